"""
Shipping API Routes

- Quote calculation for a product and destination CEP
- CEP address lookup

The quote endpoint always answers 200; failures come back as
{"error", "message"} so the storefront can show them next to its
WhatsApp fallback.
"""
import logging
from typing import Union

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.api.deps import get_cep_lookup_service, get_shipping_quote_service
from app.core.error_handler import shipping_error_response
from app.core.exceptions import ShippingError, ShippingRequestError
from app.schemas.shipping import (
    CepAddressResponse,
    ShippingErrorResponse,
    ShippingQuoteRequest,
    ShippingQuoteResponse,
)
from app.services.cep_lookup import CepLookupService
from app.services.shipping_service import ShippingQuoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.post(
    "/calculate",
    response_model=Union[ShippingQuoteResponse, ShippingErrorResponse],
)
async def calculate_shipping(
    request: ShippingQuoteRequest,
    service: ShippingQuoteService = Depends(get_shipping_quote_service),
):
    """
    Quote shipping for one unit of a product.

    Returns the cheapest option, the fastest option (null when the cheapest
    is also the fastest) and every valid option.
    """
    logger.info(f"Calculating shipping for product {request.product_id} to CEP {request.cep}")

    result = await service.calculate(request.cep, request.product_id)
    if isinstance(result, ShippingError):
        return shipping_error_response(result)

    try:
        body = ShippingQuoteResponse.from_result(result).model_dump(by_alias=True, mode="json")
    except ValidationError as e:
        logger.error(f"Shipping quote could not be serialized: {e.errors()}")
        return shipping_error_response(ShippingRequestError(details={"reason": "invalid_option"}))

    return JSONResponse(content=body)


@router.get("/cep/{cep}", response_model=CepAddressResponse)
async def lookup_cep(
    cep: str,
    service: CepLookupService = Depends(get_cep_lookup_service),
):
    """Address for a CEP, used to prefill address forms."""
    address = await service.fetch_address(cep)
    if address is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="CEP não encontrado",
        )
    return CepAddressResponse.from_address(address)
