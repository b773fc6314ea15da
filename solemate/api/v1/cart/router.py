"""Cart router for account and guest session shoppers"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from solemate.core.database import get_db
from solemate.api.dependencies import get_read_owner, get_write_owner
from solemate.services.owner import Owner
from solemate.services.cart_service import CartService
from solemate.services.catalog_service import CatalogService
from .schemas import (
    CartLineCreate,
    CartLineUpdate,
    CartLineResponse,
    CartSummary,
    CartResponse,
    CartLineMutationResponse,
    CartRemovalResponse
)

router = APIRouter()

@router.get("", response_model=CartResponse)
async def get_cart(
    owner: Optional[Owner] = Depends(get_read_owner),
    db: AsyncSession = Depends(get_db)
):
    """Get cart (empty when the request carries no identity)"""
    if owner is None:
        return CartResponse()

    service = CartService(db)
    lines = await service.get_cart(owner)
    summary = await service.get_cart_summary(owner)

    return CartResponse(
        items=[CartLineResponse.from_line(line) for line in lines],
        summary=CartSummary(**summary)
    )

@router.get("/summary", response_model=CartSummary)
async def get_cart_summary(
    owner: Optional[Owner] = Depends(get_read_owner),
    db: AsyncSession = Depends(get_db)
):
    """Cart totals"""
    if owner is None:
        return CartSummary()

    return CartSummary(**await CartService(db).get_cart_summary(owner))

@router.post("", response_model=CartLineMutationResponse)
async def add_to_cart(
    item_data: CartLineCreate,
    owner: Owner = Depends(get_write_owner),
    db: AsyncSession = Depends(get_db)
):
    """Add a variant to the cart at the current catalog price"""
    variant = await CatalogService(db).get_variant(item_data.variant_id)
    line = await CartService(db).add_to_cart(
        owner,
        variant.id,
        item_data.quantity,
        variant.price
    )

    return CartLineMutationResponse(
        message="Item added to cart",
        item=CartLineResponse.from_line(line)
    )

@router.patch("/{line_id}", response_model=CartLineMutationResponse)
async def update_cart_line(
    line_id: uuid.UUID,
    update_data: CartLineUpdate,
    owner: Owner = Depends(get_write_owner),
    db: AsyncSession = Depends(get_db)
):
    """Update cart line quantity"""
    line = await CartService(db).update_cart_line(owner, line_id, update_data.quantity)

    return CartLineMutationResponse(
        message="Cart updated",
        item=CartLineResponse.from_line(line)
    )

@router.delete("/{line_id}", response_model=CartRemovalResponse)
async def remove_cart_line(
    line_id: uuid.UUID,
    owner: Owner = Depends(get_write_owner),
    db: AsyncSession = Depends(get_db)
):
    """Remove a cart line; removing a missing line succeeds"""
    removed = await CartService(db).remove_cart_line(owner, line_id)

    return CartRemovalResponse(message="Item removed from cart", removed=int(removed))

@router.delete("", response_model=CartRemovalResponse)
async def clear_cart(
    owner: Owner = Depends(get_write_owner),
    db: AsyncSession = Depends(get_db)
):
    """Clear entire cart"""
    removed = await CartService(db).clear_cart(owner)

    return CartRemovalResponse(message="Cart cleared", removed=removed)
