"""
Shipping Module

- BaseCarrier interface and CarrierFactory for quote carriers
- Normalizer turning carrier envelopes into cheapest/fastest picks
"""
from app.modules.shipping.carriers import CarrierFactory, get_carrier
from app.modules.shipping.carriers.base import (
    BaseCarrier,
    CarrierCode,
    NormalizedOption,
    QuoteRequest,
    QuoteResult,
    ShippableItem,
)
from app.modules.shipping.normalizer import NoOptionsAvailable, normalize_quotes

__all__ = [
    "CarrierFactory",
    "get_carrier",
    "BaseCarrier",
    "CarrierCode",
    "NormalizedOption",
    "QuoteRequest",
    "QuoteResult",
    "ShippableItem",
    "NoOptionsAvailable",
    "normalize_quotes",
]
