"""
Wishlist service layer
Dual-mode wishlist storage for accounts and anonymous sessions
"""

from typing import List, Optional
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.orm import selectinload
import logging
import uuid

from solemate.models import WishlistEntry, CartLine
from solemate.core.exceptions import NotFoundException, BadRequestException
from .owner import Owner, owner_filter, owner_values
from .cart_service import CartService, dialect_insert
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)

def same_item(product_id: uuid.UUID, variant_id: Optional[uuid.UUID]):
    """WHERE clause for a (product, optional variant) pair"""
    if variant_id is None:
        return (WishlistEntry.product_id == product_id, WishlistEntry.variant_id.is_(None))
    return (WishlistEntry.product_id == product_id, WishlistEntry.variant_id == variant_id)

class WishlistService:
    """Wishlist service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _entries_query(self):
        return select(WishlistEntry).options(
            selectinload(WishlistEntry.product),
            selectinload(WishlistEntry.variant)
        )

    async def get_wishlist(self, owner: Owner) -> List[WishlistEntry]:
        result = await self.db.execute(
            self._entries_query()
            .where(owner_filter(WishlistEntry, owner))
            .order_by(WishlistEntry.created_at.desc(), WishlistEntry.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def add_to_wishlist(
        self,
        owner: Owner,
        product_id: uuid.UUID,
        variant_id: Optional[uuid.UUID] = None
    ) -> WishlistEntry:
        """
        Like a product (optionally a specific variant)

        Adding something already liked returns the existing entry.
        """
        now = datetime.now(timezone.utc)
        stmt = dialect_insert(self.db, WishlistEntry).values(
            id=uuid.uuid4(),
            product_id=product_id,
            variant_id=variant_id,
            created_at=now,
            updated_at=now,
            **owner_values(owner)
        ).on_conflict_do_nothing()

        result = await self.db.execute(stmt)
        await self.db.commit()

        if result.rowcount == 0:
            logger.debug("Wishlist entry already present, returning existing entry")

        entry = await self.db.execute(
            self._entries_query()
            .where(owner_filter(WishlistEntry, owner), *same_item(product_id, variant_id))
            .execution_options(populate_existing=True)
        )
        return entry.scalar_one()

    async def remove_wishlist_entry(self, owner: Owner, entry_id: uuid.UUID) -> bool:
        """Delete an entry held by ``owner``; a missing entry is not an error"""
        result = await self.db.execute(
            delete(WishlistEntry)
            .where(WishlistEntry.id == entry_id, owner_filter(WishlistEntry, owner))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def clear_wishlist(self, owner: Owner) -> int:
        result = await self.db.execute(
            delete(WishlistEntry)
            .where(owner_filter(WishlistEntry, owner))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        logger.info(f"Cleared {result.rowcount} wishlist entries for {owner.kind} owner")
        return result.rowcount

    async def move_to_cart(self, owner: Owner, entry_id: uuid.UUID) -> CartLine:
        """
        Move a liked variant into the cart

        Adds one unit at the current catalog price, then drops the entry.

        Raises:
            NotFoundException: If the entry is missing or held by someone else
            BadRequestException: If the entry does not pin a size/color
            VariantUnavailableException: If the variant cannot be bought
        """
        result = await self.db.execute(
            select(WishlistEntry)
            .where(WishlistEntry.id == entry_id, owner_filter(WishlistEntry, owner))
        )
        entry = result.scalar_one_or_none()

        if not entry:
            raise NotFoundException("Wishlist item not found")

        if entry.variant_id is None:
            raise BadRequestException(
                "Select a size and color before moving to cart",
                error_code="VARIANT_REQUIRED"
            )

        variant = await CatalogService(self.db).get_variant(entry.variant_id)
        line = await CartService(self.db).add_to_cart(owner, variant.id, 1, variant.price)

        await self.remove_wishlist_entry(owner, entry_id)
        return line
