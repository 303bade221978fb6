"""
Product model

Record store for the catalog. The shipping quote service only reads the
physical attributes (height/width/length in cm, weight in kg); everything
else is managed by the back office.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, Text, Numeric, Index, CheckConstraint
from sqlalchemy.sql import func

from app.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, index=True)
    brand = Column(String, nullable=True, index=True)
    description = Column(Text)

    # Pricing in BRL
    price = Column(Numeric(12, 2), nullable=False)
    cost_price = Column(Numeric(12, 2), nullable=True)

    # Physical dimensions for shipping quotes - cm / kg
    # Nullable: products without dimensions must be quoted manually
    height = Column(Numeric(10, 2), nullable=True)
    width = Column(Numeric(10, 2), nullable=True)
    length = Column(Numeric(10, 2), nullable=True)
    weight = Column(Numeric(10, 3), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        server_default=func.now()
    )

    __table_args__ = (
        Index("ix_products_active", "is_active"),
        CheckConstraint('price > 0', name='check_price_positive'),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name})>"
