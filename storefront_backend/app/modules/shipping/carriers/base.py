"""
Base Carrier Interface

- All quote carriers implement this interface
- Carrier-agnostic request/result data classes shared by the quote service
  and the normalizer
"""
import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from app.core.config import ShippingConfig


DIMENSION_FIELDS = ("height", "width", "length", "weight")


class CarrierCode(str, enum.Enum):
    """Supported shipping quote carriers."""
    MELHOR_ENVIO = "MELHOR_ENVIO"


# =============================================================================
# Carrier-Agnostic Data Classes
# =============================================================================

@dataclass(frozen=True)
class ShippableItem:
    """Read-only snapshot of a product's physical attributes (cm / kg)."""
    id: str
    height: Optional[float] = None
    width: Optional[float] = None
    length: Optional[float] = None
    weight: Optional[float] = None

    def missing_dimensions(self) -> List[str]:
        """Names of the physical fields that are absent or not positive."""
        missing = []
        for name in DIMENSION_FIELDS:
            value = getattr(self, name)
            if value is None or value <= 0:
                missing.append(name)
        return missing


@dataclass(frozen=True)
class QuoteRequest:
    """A single-item quote from the configured origin to a destination CEP."""
    destination_postal_code: str
    item: ShippableItem
    origin_postal_code: str
    insurance_value: float
    quantity: int = 1

    def to_payload(self) -> Dict[str, Any]:
        """Carrier calculate payload."""
        return {
            "from": {"postal_code": self.origin_postal_code},
            "to": {"postal_code": self.destination_postal_code},
            "products": [
                {
                    "id": self.item.id,
                    "width": float(self.item.width),
                    "height": float(self.item.height),
                    "length": float(self.item.length),
                    "weight": float(self.item.weight),
                    "insurance_value": self.insurance_value,
                    "quantity": self.quantity,
                }
            ],
        }


@dataclass(frozen=True)
class NormalizedOption:
    """A validated shipping option."""
    id: Union[int, str]
    name: str
    company: str
    price: float
    delivery_time: int  # business days


@dataclass(frozen=True)
class QuoteResult:
    """
    Cheapest and fastest picks from every valid option.

    fastest is None when the cheapest option is also the fastest.
    all_options keeps the order in which options were discovered.
    """
    cheapest: NormalizedOption
    fastest: Optional[NormalizedOption] = None
    all_options: List[NormalizedOption] = field(default_factory=list)


# =============================================================================
# Base Carrier Interface
# =============================================================================

class BaseCarrier(ABC):
    """
    Abstract base class for quote carriers.

    calculate() performs exactly one upstream call and returns the parsed
    response body untouched; envelope handling belongs to the normalizer.
    """

    def __init__(self, config: Optional[ShippingConfig] = None):
        self._config = config or ShippingConfig()

    @property
    @abstractmethod
    def carrier_code(self) -> CarrierCode:
        """Return the carrier code enum value."""
        pass

    @property
    @abstractmethod
    def carrier_name(self) -> str:
        """Return the human-readable carrier name."""
        pass

    @abstractmethod
    async def calculate(self, request: QuoteRequest) -> Any:
        """
        Request quotes from the carrier.

        Args:
            request: Origin, destination and item to quote

        Returns:
            Parsed JSON body of the carrier response

        Raises:
            UnserviceableAddressError: carrier rejected the destination
            CarrierApiError: any other upstream failure
        """
        pass

    async def close(self) -> None:
        """Release network resources."""
        pass
