"""
Cart service layer
Dual-mode cart storage for accounts and anonymous sessions
"""

from typing import List, Dict, Any, Optional
from decimal import Decimal
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.orm import selectinload
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
import logging
import uuid

from solemate.models import CartLine, ProductVariant
from solemate.core.config import settings
from solemate.core.exceptions import (
    NotFoundException,
    InvalidQuantityException,
    InsufficientStockException
)
from .owner import Owner, owner_column, owner_filter, owner_values

logger = logging.getLogger(__name__)

def dialect_insert(db: AsyncSession, model):
    """INSERT construct supporting ON CONFLICT for the bound database"""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert(model)
    return pg_insert(model)

class CartService:
    """Shopping cart service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _lines_query(self):
        return select(CartLine).options(
            selectinload(CartLine.variant).selectinload(ProductVariant.product)
        )

    async def get_cart(self, owner: Owner) -> List[CartLine]:
        """All lines held by ``owner``, oldest first"""
        result = await self.db.execute(
            self._lines_query()
            .where(owner_filter(CartLine, owner))
            .order_by(CartLine.created_at, CartLine.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def _get_line(self, *conditions) -> CartLine:
        result = await self.db.execute(
            self._lines_query()
            .where(*conditions)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def _variant_stock(self, *conditions) -> Optional[int]:
        return await self.db.scalar(select(ProductVariant.stock).where(*conditions))

    async def add_to_cart(
        self,
        owner: Owner,
        variant_id: uuid.UUID,
        quantity: int,
        unit_price: Decimal
    ) -> CartLine:
        """
        Add ``quantity`` of a variant, creating the line or incrementing it

        Insert and increment are one statement, so concurrent adds for the
        same owner and variant always end in a single line with the sum.
        The increment only applies while the new total fits the variant's
        stock. The price snapshot of an existing line is kept.

        Raises:
            InvalidQuantityException: If quantity is not positive
            NotFoundException: If the variant does not exist
            InsufficientStockException: If the line would exceed stock
        """
        if quantity <= 0:
            raise InvalidQuantityException(quantity)

        stock = await self._variant_stock(ProductVariant.id == variant_id)
        if stock is None:
            raise NotFoundException("Variant not found")
        if quantity > stock:
            raise InsufficientStockException(stock)

        now = datetime.now(timezone.utc)
        stmt = dialect_insert(self.db, CartLine).values(
            id=uuid.uuid4(),
            variant_id=variant_id,
            quantity=quantity,
            unit_price=unit_price,
            created_at=now,
            updated_at=now,
            **owner_values(owner)
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[owner_column(CartLine, owner), CartLine.variant_id],
            set_={
                "quantity": CartLine.quantity + stmt.excluded.quantity,
                "updated_at": now,
            },
            where=(CartLine.quantity + stmt.excluded.quantity) <= stock
        )
        result = await self.db.execute(stmt)

        if result.rowcount == 0:
            await self.db.rollback()
            raise InsufficientStockException(stock)

        await self.db.commit()

        return await self._get_line(
            owner_filter(CartLine, owner),
            CartLine.variant_id == variant_id
        )

    async def update_cart_line(
        self,
        owner: Owner,
        line_id: uuid.UUID,
        quantity: int
    ) -> CartLine:
        """
        Set the quantity of a line held by ``owner``

        Raises:
            InvalidQuantityException: If quantity is not positive
            NotFoundException: If the line is missing or held by someone else
            InsufficientStockException: If quantity exceeds the variant's stock
        """
        if quantity <= 0:
            raise InvalidQuantityException(quantity)

        stock = await self._variant_stock(
            ProductVariant.id == CartLine.variant_id,
            CartLine.id == line_id,
            owner_filter(CartLine, owner)
        )
        if stock is None:
            raise NotFoundException("Cart item not found")
        if quantity > stock:
            raise InsufficientStockException(stock)

        result = await self.db.execute(
            update(CartLine)
            .where(CartLine.id == line_id, owner_filter(CartLine, owner))
            .values(quantity=quantity, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundException("Cart item not found")

        await self.db.commit()
        return await self._get_line(CartLine.id == line_id)

    async def remove_cart_line(self, owner: Owner, line_id: uuid.UUID) -> bool:
        """
        Delete a line held by ``owner``

        Removing a line that is already gone (or was never ours) is not an
        error. Returns whether a row was actually deleted.
        """
        result = await self.db.execute(
            delete(CartLine)
            .where(CartLine.id == line_id, owner_filter(CartLine, owner))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def clear_cart(self, owner: Owner) -> int:
        result = await self.db.execute(
            delete(CartLine)
            .where(owner_filter(CartLine, owner))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        logger.info(f"Cleared {result.rowcount} cart lines for {owner.kind} owner")
        return result.rowcount

    async def get_cart_summary(self, owner: Owner) -> Dict[str, Any]:
        """Totals for the cart held by ``owner``"""
        lines = await self.get_cart(owner)

        subtotal = sum(
            (Decimal(line.unit_price) * line.quantity for line in lines),
            Decimal("0.00")
        )
        tax = (subtotal * Decimal(str(settings.CART_TAX_RATE))).quantize(Decimal("0.01"))

        return {
            "line_count": len(lines),
            "item_count": sum(line.quantity for line in lines),
            "subtotal": subtotal.quantize(Decimal("0.01")),
            "tax": tax,
            "total": (subtotal + tax).quantize(Decimal("0.01")),
        }
