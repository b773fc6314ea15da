"""
Guest-to-account migration
Moves a session's cart and wishlist onto an account after login/signup
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from solemate.models import CartLine, WishlistEntry
from .session_service import SessionService
from .wishlist_service import same_item

logger = logging.getLogger(__name__)

@dataclass
class MigrationResult:
    cart_merged: int = 0
    wishlist_merged: int = 0

@dataclass
class BestEffort:
    """Outcome of an operation whose failure is logged, never raised"""

    attempted: bool
    succeeded: bool
    cart_merged: int = 0
    wishlist_merged: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

class MigrationCoordinator:
    """
    Re-owns session rows onto an account

    Every row is claimed with a conditional write scoped to the session
    (``WHERE id = :id AND session_id = :sid``) and committed on its own. A
    claim that affects no row means another migration already took it, so
    concurrent or repeated calls never fold the same quantity twice.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def migrate(self, session_id: str, account_id: uuid.UUID) -> MigrationResult:
        outcome = MigrationResult()

        cart_rows = (await self.db.execute(
            select(CartLine.id, CartLine.variant_id, CartLine.quantity)
            .where(CartLine.session_id == session_id)
            .order_by(CartLine.created_at)
        )).all()

        for line_id, variant_id, quantity in cart_rows:
            if await self._merge_cart_line(session_id, account_id, line_id, variant_id, quantity):
                outcome.cart_merged += 1

        wishlist_rows = (await self.db.execute(
            select(WishlistEntry.id, WishlistEntry.product_id, WishlistEntry.variant_id)
            .where(WishlistEntry.session_id == session_id)
            .order_by(WishlistEntry.created_at)
        )).all()

        for entry_id, product_id, variant_id in wishlist_rows:
            if await self._merge_wishlist_entry(session_id, account_id, entry_id, product_id, variant_id):
                outcome.wishlist_merged += 1

        await SessionService(self.db).retire(session_id)

        logger.info(
            f"Migrated guest session {session_id[:8]}... to account {account_id}: "
            f"{outcome.cart_merged} cart lines, {outcome.wishlist_merged} wishlist entries"
        )
        return outcome

    async def migrate_best_effort(
        self,
        session_id: Optional[str],
        account_id: uuid.UUID
    ) -> BestEffort:
        """Run :meth:`migrate`, turning any failure into a logged result"""
        if not session_id:
            return BestEffort(attempted=False, succeeded=False)

        try:
            outcome = await self.migrate(session_id, account_id)
        except Exception as e:
            logger.warning(
                f"Guest migration failed for account {account_id}: {e}",
                exc_info=True
            )
            try:
                await self.db.rollback()
            except Exception:
                logger.warning("Rollback after failed migration also failed", exc_info=True)
            return BestEffort(attempted=True, succeeded=False, error=str(e))

        return BestEffort(
            attempted=True,
            succeeded=True,
            cart_merged=outcome.cart_merged,
            wishlist_merged=outcome.wishlist_merged
        )

    async def _account_line_id(self, account_id: uuid.UUID, variant_id: uuid.UUID):
        return await self.db.scalar(
            select(CartLine.id).where(
                CartLine.account_id == account_id,
                CartLine.variant_id == variant_id
            )
        )

    async def _reown_cart_line(self, session_id: str, account_id: uuid.UUID, line_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            update(CartLine)
            .where(CartLine.id == line_id, CartLine.session_id == session_id)
            .values(
                account_id=account_id,
                session_id=None,
                updated_at=datetime.now(timezone.utc)
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def _merge_cart_line(
        self,
        session_id: str,
        account_id: uuid.UUID,
        line_id: uuid.UUID,
        variant_id: uuid.UUID,
        quantity: int
    ) -> bool:
        """Move one session line onto the account; False if it was already taken"""
        target_id = await self._account_line_id(account_id, variant_id)

        if target_id is None:
            try:
                return await self._reown_cart_line(session_id, account_id, line_id)
            except IntegrityError:
                # An account line for this variant appeared meanwhile
                await self.db.rollback()
                target_id = await self._account_line_id(account_id, variant_id)
                if target_id is None:
                    raise

        claimed = await self.db.execute(
            delete(CartLine)
            .where(CartLine.id == line_id, CartLine.session_id == session_id)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount != 1:
            await self.db.rollback()
            return False

        folded = await self.db.execute(
            update(CartLine)
            .where(CartLine.id == target_id)
            .values(
                quantity=CartLine.quantity + quantity,
                updated_at=datetime.now(timezone.utc)
            )
            .execution_options(synchronize_session=False)
        )
        if folded.rowcount != 1:
            # The account line was removed after the lookup; keep the guest line instead
            await self.db.rollback()
            return await self._reown_cart_line(session_id, account_id, line_id)

        await self.db.commit()
        return True

    async def _merge_wishlist_entry(
        self,
        session_id: str,
        account_id: uuid.UUID,
        entry_id: uuid.UUID,
        product_id: uuid.UUID,
        variant_id: Optional[uuid.UUID]
    ) -> bool:
        """Move one session entry onto the account, dropping it if already liked"""
        duplicate = await self.db.scalar(
            select(WishlistEntry.id).where(
                WishlistEntry.account_id == account_id,
                *same_item(product_id, variant_id)
            )
        )

        if duplicate is None:
            try:
                result = await self.db.execute(
                    update(WishlistEntry)
                    .where(WishlistEntry.id == entry_id, WishlistEntry.session_id == session_id)
                    .values(
                        account_id=account_id,
                        session_id=None,
                        updated_at=datetime.now(timezone.utc)
                    )
                    .execution_options(synchronize_session=False)
                )
                await self.db.commit()
                return result.rowcount == 1
            except IntegrityError:
                await self.db.rollback()

        result = await self.db.execute(
            delete(WishlistEntry)
            .where(WishlistEntry.id == entry_id, WishlistEntry.session_id == session_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1
