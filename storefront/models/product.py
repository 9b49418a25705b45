"""
Product model

Variants are embedded documents: `attribute_definitions` maps an attribute
name to its ordered allowed values and `variants` holds one document per
attribute combination (sku, price override, stock, active flag).
"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.sql import func

from storefront.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    slug = Column(String, unique=True, nullable=True, index=True)
    description = Column(Text)

    # Base price; variants without a price override inherit it
    price = Column(Numeric(12, 2), nullable=False)

    # Media
    images = Column(JSON, default=list)

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Variants
    has_variants = Column(Boolean, nullable=False, default=False)
    attribute_definitions = Column(JSON, default=dict)
    variants = Column(JSON, default=list)

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
        CheckConstraint("price >= 0", name="check_product_price_non_negative"),
    )
