"""
Carrier Registry and Factory

- CarrierFactory creates carrier instances based on CarrierCode
- Carriers register themselves with @register_carrier
"""
from typing import Dict, List, Optional, Type
import logging

from app.core.config import ShippingConfig
from app.modules.shipping.carriers.base import BaseCarrier, CarrierCode

logger = logging.getLogger(__name__)

# Registry of carrier implementations
_CARRIER_REGISTRY: Dict[CarrierCode, Type[BaseCarrier]] = {}


def register_carrier(carrier_code: CarrierCode):
    """
    Decorator to register a carrier implementation.

    Usage:
        @register_carrier(CarrierCode.MELHOR_ENVIO)
        class MelhorEnvioCarrier(BaseCarrier):
            ...
    """
    def decorator(cls: Type[BaseCarrier]):
        _CARRIER_REGISTRY[carrier_code] = cls
        logger.debug(f"Registered carrier: {carrier_code.value} -> {cls.__name__}")
        return cls
    return decorator


class CarrierFactory:
    """Factory for creating carrier instances."""

    @classmethod
    def get_carrier(
        cls,
        carrier_code: CarrierCode,
        config: Optional[ShippingConfig] = None
    ) -> Optional[BaseCarrier]:
        """
        Get a carrier instance.

        Returns:
            BaseCarrier instance or None if no implementation is registered
        """
        carrier_cls = _CARRIER_REGISTRY.get(carrier_code)
        if not carrier_cls:
            logger.warning(f"No implementation registered for carrier: {carrier_code.value}")
            return None

        return carrier_cls(config)

    @classmethod
    def get_registered_carriers(cls) -> List[CarrierCode]:
        """Get list of all registered carrier codes."""
        return list(_CARRIER_REGISTRY.keys())


def get_carrier(
    carrier_code: CarrierCode,
    config: Optional[ShippingConfig] = None
) -> Optional[BaseCarrier]:
    """Convenience wrapper around CarrierFactory.get_carrier()."""
    return CarrierFactory.get_carrier(carrier_code, config)


# Import carriers to trigger registration
# These imports must be at the bottom to avoid circular imports
from app.modules.shipping.carriers.melhor_envio import MelhorEnvioCarrier  # noqa: E402, F401
