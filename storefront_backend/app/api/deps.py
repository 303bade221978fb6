"""
API dependencies

Shipping services are request-scoped: each request gets its own carrier
HTTP client, closed when the response is done.
"""
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import ShippingConfig, shipping_config
from app.core.database import get_db
from app.services.cep_lookup import CepLookupService
from app.services.product_store import ProductDimensionStore
from app.services.shipping_service import ShippingQuoteService


def get_shipping_config() -> ShippingConfig:
    return shipping_config


def get_dimension_store(db: AsyncSession = Depends(get_db)) -> ProductDimensionStore:
    return ProductDimensionStore(db)


async def get_shipping_quote_service(
    config: ShippingConfig = Depends(get_shipping_config),
    store: ProductDimensionStore = Depends(get_dimension_store),
) -> AsyncIterator[ShippingQuoteService]:
    service = ShippingQuoteService(config, store)
    try:
        yield service
    finally:
        await service.close()


async def get_cep_lookup_service() -> AsyncIterator[CepLookupService]:
    service = CepLookupService()
    try:
        yield service
    finally:
        await service.close()
