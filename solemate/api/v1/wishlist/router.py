"""Wishlist router for account and guest session shoppers"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from solemate.core.database import get_db
from solemate.api.dependencies import get_read_owner, get_write_owner
from solemate.services.owner import Owner
from solemate.services.catalog_service import CatalogService
from solemate.services.wishlist_service import WishlistService
from solemate.api.v1.cart.schemas import CartLineResponse
from .schemas import (
    WishlistEntryCreate,
    WishlistEntryResponse,
    WishlistResponse,
    WishlistEntryMutationResponse,
    WishlistRemovalResponse,
    MoveToCartResponse
)

router = APIRouter()

@router.get("", response_model=WishlistResponse)
async def get_wishlist(
    owner: Optional[Owner] = Depends(get_read_owner),
    db: AsyncSession = Depends(get_db)
):
    """Get wishlist (empty when the request carries no identity)"""
    if owner is None:
        return WishlistResponse()

    entries = await WishlistService(db).get_wishlist(owner)
    return WishlistResponse(
        items=[WishlistEntryResponse.from_entry(entry) for entry in entries],
        count=len(entries)
    )

@router.post("", response_model=WishlistEntryMutationResponse)
async def add_to_wishlist(
    entry_data: WishlistEntryCreate,
    owner: Owner = Depends(get_write_owner),
    db: AsyncSession = Depends(get_db)
):
    """Add to wishlist; adding an existing item returns it"""
    await CatalogService(db).check_variant_of_product(entry_data.product_id, entry_data.variant_id)

    entry = await WishlistService(db).add_to_wishlist(
        owner,
        entry_data.product_id,
        entry_data.variant_id
    )
    return WishlistEntryMutationResponse(
        message="Added to wishlist",
        item=WishlistEntryResponse.from_entry(entry)
    )

@router.delete("/{entry_id}", response_model=WishlistRemovalResponse)
async def remove_wishlist_entry(
    entry_id: uuid.UUID,
    owner: Owner = Depends(get_write_owner),
    db: AsyncSession = Depends(get_db)
):
    removed = await WishlistService(db).remove_wishlist_entry(owner, entry_id)
    return WishlistRemovalResponse(message="Removed from wishlist", removed=int(removed))

@router.post("/{entry_id}/move-to-cart", response_model=MoveToCartResponse)
async def move_to_cart(
    entry_id: uuid.UUID,
    owner: Owner = Depends(get_write_owner),
    db: AsyncSession = Depends(get_db)
):
    """Move a liked size/color into the cart"""
    line = await WishlistService(db).move_to_cart(owner, entry_id)
    return MoveToCartResponse(
        message="Moved to cart",
        cart_item=CartLineResponse.from_line(line)
    )

@router.delete("", response_model=WishlistRemovalResponse)
async def clear_wishlist(
    owner: Owner = Depends(get_write_owner),
    db: AsyncSession = Depends(get_db)
):
    removed = await WishlistService(db).clear_wishlist(owner)
    return WishlistRemovalResponse(message="Wishlist cleared", removed=removed)
