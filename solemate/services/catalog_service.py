"""
Catalog lookups used by the cart and wishlist
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import Optional
import uuid

from solemate.models import Product, ProductVariant
from solemate.core.exceptions import (
    NotFoundException,
    BadRequestException,
    VariantUnavailableException
)

class CatalogService:
    """Read-only product/variant access"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_product(self, product_id: uuid.UUID) -> Product:
        result = await self.db.execute(
            select(Product).where(Product.id == product_id)
        )
        product = result.scalar_one_or_none()

        if not product or not product.is_active:
            raise NotFoundException("Product not found")

        return product

    async def get_variant(
        self,
        variant_id: uuid.UUID,
        require_available: bool = True
    ) -> ProductVariant:
        """
        Get a variant with its product loaded

        Raises:
            NotFoundException: If the variant does not exist
            VariantUnavailableException: If it cannot currently be bought
        """
        result = await self.db.execute(
            select(ProductVariant)
            .options(selectinload(ProductVariant.product))
            .where(ProductVariant.id == variant_id)
        )
        variant = result.scalar_one_or_none()

        if not variant:
            raise NotFoundException("Variant not found")

        if require_available and (not variant.is_available or not variant.product.is_active):
            raise VariantUnavailableException()

        return variant

    async def check_variant_of_product(
        self,
        product_id: uuid.UUID,
        variant_id: Optional[uuid.UUID]
    ) -> None:
        """Validate a (product, optional variant) pair for the wishlist"""
        product = await self.get_product(product_id)

        if variant_id is None:
            return

        variant = await self.get_variant(variant_id, require_available=False)
        if variant.product_id != product.id:
            raise BadRequestException(
                "Variant does not belong to product",
                error_code="VARIANT_PRODUCT_MISMATCH"
            )
