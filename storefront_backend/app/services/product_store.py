"""
Product dimension lookups for shipping quotes.

Read-only access to the products table; returns a ShippableItem snapshot.
"""
import logging
from decimal import Decimal
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ItemNotFoundError
from app.models.product import Product
from app.modules.shipping.carriers.base import ShippableItem

logger = logging.getLogger(__name__)


def _to_float(value: Optional[Union[Decimal, float]]) -> Optional[float]:
    # Numeric columns come back as Decimal
    return None if value is None else float(value)


class ProductDimensionStore:
    """Fetches physical attributes of a product."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_item_dimensions(self, product_id: str) -> Optional[ShippableItem]:
        """
        Load height, width, length and weight for a product.

        Returns:
            ShippableItem, or None when no product has this id

        Raises:
            ItemNotFoundError: the lookup itself failed
        """
        try:
            result = await self.db.execute(
                select(
                    Product.id,
                    Product.height,
                    Product.width,
                    Product.length,
                    Product.weight,
                ).where(Product.id == product_id)
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching product {product_id}: {type(e).__name__}: {e}")
            raise ItemNotFoundError(product_id=product_id, details={"reason": type(e).__name__})

        if row is None:
            return None

        return ShippableItem(
            id=str(row.id),
            height=_to_float(row.height),
            width=_to_float(row.width),
            length=_to_float(row.length),
            weight=_to_float(row.weight),
        )
