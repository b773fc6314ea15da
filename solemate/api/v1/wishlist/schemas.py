"""
Wishlist schemas for request/response validation
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from solemate.api.v1.cart.schemas import CartLineResponse

class WishlistEntryCreate(BaseModel):
    """Like a product, optionally a specific size/color"""
    product_id: uuid.UUID
    variant_id: Optional[uuid.UUID] = None

class WishlistEntryResponse(BaseModel):
    id: uuid.UUID
    product_id: uuid.UUID
    variant_id: Optional[uuid.UUID] = None
    created_at: datetime

    product_name: str
    brand: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    price: Optional[Decimal] = None
    image_url: Optional[str] = None

    @classmethod
    def from_entry(cls, entry) -> "WishlistEntryResponse":
        variant = entry.variant
        return cls(
            id=entry.id,
            product_id=entry.product_id,
            variant_id=entry.variant_id,
            created_at=entry.created_at,
            product_name=entry.product.name,
            brand=entry.product.brand,
            size=variant.size if variant else None,
            color=variant.color if variant else None,
            price=variant.price if variant else None,
            image_url=variant.image_url if variant else None,
        )

class WishlistResponse(BaseModel):
    success: bool = True
    items: List[WishlistEntryResponse] = []
    count: int = 0

class WishlistEntryMutationResponse(BaseModel):
    success: bool = True
    message: str
    item: WishlistEntryResponse

class WishlistRemovalResponse(BaseModel):
    success: bool = True
    message: str
    removed: int = 0

class MoveToCartResponse(BaseModel):
    success: bool = True
    message: str
    cart_item: CartLineResponse
