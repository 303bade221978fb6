"""
Storefront Exception Hierarchy

Structured exception classes for the shipping quote subsystem.
All exceptions include code, message, and details for logging and debugging.

Exception Hierarchy:
    StorefrontError
    └── ShippingError
        ├── InvalidPostalCodeError
        ├── ItemNotFoundError
        ├── MissingDimensionsError
        ├── CarrierServiceUnavailableError
        ├── UnserviceableAddressError
        ├── CarrierApiError
        ├── NoOptionsAvailableError
        └── ShippingRequestError

Shipping errors carry two user-facing strings: ``error`` (short title) and
``message`` (actionable text shown verbatim by the storefront UI).
"""
from typing import Optional, Dict, Any, List


class StorefrontError(Exception):
    """
    Base exception for all storefront custom errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
        severity: P0-P3 severity level
    """

    default_code: str = "STOREFRONT_ERROR"
    default_severity: str = "P2"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[str] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.severity = severity or self.default_severity
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# SHIPPING ERRORS
# =============================================================================

class ShippingError(StorefrontError):
    """Base exception for shipping quote errors."""
    default_code = "SHIPPING_ERROR"
    default_severity = "P2"
    default_error = "Erro ao calcular frete"
    default_message = "Não foi possível calcular o frete. Entre em contato via WhatsApp."

    def __init__(
        self,
        message: Optional[str] = None,
        error: Optional[str] = None,
        **kwargs
    ):
        self.error = error or self.default_error
        super().__init__(message or self.default_message, **kwargs)

    @property
    def calls_carrier(self) -> bool:
        """True for errors raised after the carrier API was contacted."""
        return False

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"] = self.error
        return data


class InvalidPostalCodeError(ShippingError):
    """Destination CEP is not 8 digits after stripping formatting."""
    default_code = "INVALID_POSTAL_CODE"
    default_severity = "P3"
    default_error = "CEP inválido"
    default_message = "Por favor, verifique o CEP digitado."

    def __init__(self, postal_code: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["postal_code"] = postal_code
        super().__init__(details=details, **kwargs)


class ItemNotFoundError(ShippingError):
    """Product lookup missed or failed."""
    default_code = "ITEM_NOT_FOUND"
    default_error = "Produto não encontrado"
    default_message = (
        "Não foi possível encontrar as informações do produto. "
        "Entre em contato via WhatsApp."
    )

    def __init__(self, product_id: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["product_id"] = product_id
        super().__init__(details=details, **kwargs)


class MissingDimensionsError(ShippingError):
    """Product exists but cannot be auto-quoted without dimensions."""
    default_code = "MISSING_DIMENSIONS"
    default_error = "Produto sem dimensões cadastradas"
    default_message = "Entre em contato via WhatsApp para calcular o frete deste produto."

    def __init__(
        self,
        product_id: Optional[str] = None,
        missing_fields: Optional[List[str]] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details.update({
            "product_id": product_id,
            "missing_fields": missing_fields or [],
        })
        super().__init__(details=details, **kwargs)


class CarrierServiceUnavailableError(ShippingError):
    """Carrier credential is not configured."""
    default_code = "CARRIER_SERVICE_UNAVAILABLE"
    default_severity = "P1"
    default_error = "Serviço de frete temporariamente indisponível"
    default_message = "Entre em contato via WhatsApp para calcular o frete."


class UnserviceableAddressError(ShippingError):
    """Carrier rejected the request (destination too close or unroutable)."""
    default_code = "UNSERVICEABLE_ADDRESS"
    default_error = "CEP inválido ou fora da área de cobertura"
    default_message = "Para este endereço, entre em contato via WhatsApp para combinar a entrega."

    def __init__(self, status_code: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        super().__init__(details=details, **kwargs)

    @property
    def calls_carrier(self) -> bool:
        return True


class CarrierApiError(ShippingError):
    """Carrier API failed for any other reason."""
    default_code = "CARRIER_API_ERROR"
    default_severity = "P1"
    default_error = "Erro ao calcular frete"
    default_message = "Não foi possível calcular o frete. Entre em contato via WhatsApp."

    def __init__(self, status_code: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        super().__init__(details=details, **kwargs)

    @property
    def calls_carrier(self) -> bool:
        return True


class NoOptionsAvailableError(ShippingError):
    """Carrier answered but no usable option survived normalization."""
    default_code = "NO_OPTIONS_AVAILABLE"
    default_severity = "P3"
    default_error = "Nenhuma opção de frete disponível"
    default_message = "Para este CEP, entre em contato via WhatsApp para combinar a entrega."

    # Used when the carrier flagged an error, typically a destination next to the origin
    local_delivery_error = "CEP muito próximo ao remetente"
    local_delivery_message = (
        "Para entregas locais, entre em contato via WhatsApp "
        "para combinar a retirada ou entrega."
    )

    def __init__(self, upstream_error: Optional[str] = None, **kwargs):
        if upstream_error:
            kwargs.setdefault("error", self.local_delivery_error)
            kwargs.setdefault("message", self.local_delivery_message)
        details = kwargs.pop("details", {})
        details["upstream_error"] = upstream_error
        self.upstream_error = upstream_error
        super().__init__(details=details, **kwargs)

    @property
    def calls_carrier(self) -> bool:
        return True


class ShippingRequestError(ShippingError):
    """Unexpected failure or malformed request body."""
    default_code = "SHIPPING_REQUEST_FAILED"
    default_severity = "P1"
    default_error = "Erro ao processar solicitação"
    default_message = (
        "Não foi possível calcular o frete. "
        "Entre em contato via WhatsApp para mais informações."
    )
