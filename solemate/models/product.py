"""
Catalog models
Products and their size/color variants (SKUs)
"""

from sqlalchemy import Column, String, Boolean, Integer, Numeric, ForeignKey, Uuid, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel, ReprModel

class Product(Base, TimestampedModel, UUIDModel, ReprModel):
    """Catalog product"""

    __tablename__ = "products"

    name = Column(String(255), nullable=False)
    brand = Column(String(100), nullable=True)
    category = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    variants = relationship("ProductVariant", back_populates="product", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Product {self.name}>"

class ProductVariant(Base, TimestampedModel, UUIDModel, ReprModel):
    """A specific size/color of a product"""

    __tablename__ = "product_variants"

    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    sku = Column(String(64), nullable=True, unique=True)
    size = Column(String(20), nullable=False)
    color = Column(String(50), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(500), nullable=True)
    is_available = Column(Boolean, default=True, nullable=False)
    stock = Column(Integer, default=0, nullable=False)

    product = relationship("Product", back_populates="variants")

    __table_args__ = (
        UniqueConstraint("product_id", "size", "color", name="uq_variant_product_size_color"),
        CheckConstraint("stock >= 0", name="check_variant_non_negative_stock"),
        Index("idx_product_variants_product", "product_id"),
    )
