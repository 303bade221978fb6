from app.schemas.shipping import (
    ShippingQuoteRequest,
    ShippingOptionResponse,
    ShippingQuoteResponse,
    ShippingErrorResponse,
    CepAddressResponse,
)
