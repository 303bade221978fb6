# Services layer for business logic
from app.services.product_store import ProductDimensionStore
from app.services.shipping_service import ShippingQuoteService
from app.services.cep_lookup import CepAddress, CepLookupService
