"""
Shipping Quote Service

Coordinates a single quote:
- Destination CEP validation
- Product dimension lookup
- Carrier call (one attempt, no retries)
- Normalization into cheapest/fastest picks

Every check that can fail locally runs before the carrier is contacted,
so a bad CEP or an unmeasured product never costs an upstream call.
"""
import logging
from typing import Optional, Protocol, Union

from app.core.config import ShippingConfig
from app.core.exceptions import (
    CarrierServiceUnavailableError,
    ItemNotFoundError,
    MissingDimensionsError,
    NoOptionsAvailableError,
    ShippingError,
    ShippingRequestError,
)
from app.modules.shipping.carriers import CarrierFactory
from app.modules.shipping.carriers.base import (
    BaseCarrier,
    CarrierCode,
    QuoteRequest,
    QuoteResult,
    ShippableItem,
)
from app.modules.shipping.normalizer import NoOptionsAvailable, normalize_quotes
from app.modules.shipping.postal_code import normalize_postal_code

logger = logging.getLogger(__name__)


class DimensionStore(Protocol):
    async def get_item_dimensions(self, product_id: str) -> Optional[ShippableItem]:
        ...


class ShippingQuoteService:
    """
    Quote fetcher for a single product and destination.

    quote() raises ShippingError subclasses; calculate() is the
    never-raising variant used by the HTTP layer.
    """

    def __init__(
        self,
        config: ShippingConfig,
        dimension_store: DimensionStore,
        carrier: Optional[BaseCarrier] = None,
    ):
        self.config = config
        self.dimension_store = dimension_store
        self._carrier = carrier

    def _get_carrier(self) -> BaseCarrier:
        """Get or create the quote carrier."""
        if self._carrier is not None:
            return self._carrier

        carrier = CarrierFactory.get_carrier(CarrierCode.MELHOR_ENVIO, self.config)
        if carrier is None:
            raise CarrierServiceUnavailableError(details={"reason": "carrier_not_registered"})

        self._carrier = carrier
        return carrier

    async def close(self) -> None:
        """Close carrier resources."""
        if self._carrier:
            await self._carrier.close()
            self._carrier = None

    async def _load_item(self, product_id: Optional[str]) -> ShippableItem:
        if not product_id:
            raise ItemNotFoundError(product_id=product_id)

        item = await self.dimension_store.get_item_dimensions(product_id)
        if item is None:
            logger.info(f"Product {product_id} not found for shipping quote")
            raise ItemNotFoundError(product_id=product_id)

        missing = item.missing_dimensions()
        if missing:
            logger.warning(f"Product {product_id} missing dimensions: {missing}")
            raise MissingDimensionsError(product_id=product_id, missing_fields=missing)

        return item

    async def quote(self, cep: Optional[str], product_id: Optional[str]) -> QuoteResult:
        """
        Fetch and normalize quotes for one unit of a product.

        Args:
            cep: Destination CEP in any formatting
            product_id: Product to ship

        Returns:
            QuoteResult with cheapest, fastest and all valid options

        Raises:
            ShippingError: any failure, see app.core.exceptions
        """
        destination = normalize_postal_code(cep)
        item = await self._load_item(product_id)

        if not self.config.has_carrier_credentials:
            logger.error("MELHOR_ENVIO_TOKEN not configured")
            raise CarrierServiceUnavailableError()

        request = QuoteRequest(
            destination_postal_code=destination,
            item=item,
            origin_postal_code=self.config.origin_postal_code,
            insurance_value=self.config.insurance_value,
        )

        carrier = self._get_carrier()
        raw = await carrier.calculate(request)

        result = normalize_quotes(raw)
        if isinstance(result, NoOptionsAvailable):
            raise NoOptionsAvailableError(upstream_error=result.upstream_error)

        logger.info(
            f"Shipping quote {destination} / {item.id}: "
            f"cheapest {result.cheapest.name} R$ {result.cheapest.price:.2f}, "
            f"{len(result.all_options)} option(s)"
        )
        return result

    async def calculate(
        self,
        cep: Optional[str],
        product_id: Optional[str],
    ) -> Union[QuoteResult, ShippingError]:
        """Like quote(), but returns the error instead of raising it."""
        try:
            return await self.quote(cep, product_id)
        except ShippingError as e:
            logger.info(f"Shipping quote failed: {e.to_dict()}")
            return e
        except Exception as e:
            logger.exception(f"Unexpected error calculating shipping: {type(e).__name__}")
            return ShippingRequestError(details={"reason": type(e).__name__})
