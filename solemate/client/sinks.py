"""
Destinations a shadow store can be flushed into
"""

from typing import Optional, Protocol
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from solemate.services.owner import Owner
from solemate.services.cart_service import CartService
from solemate.services.catalog_service import CatalogService
from solemate.services.wishlist_service import WishlistService

class ShadowSink(Protocol):
    async def add_to_cart(self, owner: Owner, variant_id: uuid.UUID, quantity: int) -> None:
        ...

    async def add_to_wishlist(
        self,
        owner: Owner,
        product_id: uuid.UUID,
        variant_id: Optional[uuid.UUID] = None
    ) -> None:
        ...

class AccessLayerSink:
    """In-process sink writing straight through the cart and wishlist services"""

    def __init__(self, db: AsyncSession):
        self.catalog = CatalogService(db)
        self.cart = CartService(db)
        self.wishlist = WishlistService(db)

    async def add_to_cart(self, owner: Owner, variant_id: uuid.UUID, quantity: int) -> None:
        variant = await self.catalog.get_variant(variant_id)
        await self.cart.add_to_cart(owner, variant.id, quantity, variant.price)

    async def add_to_wishlist(
        self,
        owner: Owner,
        product_id: uuid.UUID,
        variant_id: Optional[uuid.UUID] = None
    ) -> None:
        await self.catalog.check_variant_of_product(product_id, variant_id)
        await self.wishlist.add_to_wishlist(owner, product_id, variant_id)
