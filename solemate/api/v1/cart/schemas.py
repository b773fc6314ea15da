"""
Cart schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

class CartLineCreate(BaseModel):
    """Schema for adding a variant to the cart"""
    variant_id: uuid.UUID
    quantity: int = Field(1, gt=0, le=99)

class CartLineUpdate(BaseModel):
    """Schema for updating a cart line"""
    quantity: int = Field(..., gt=0, le=99)

class CartLineResponse(BaseModel):
    """Schema for a cart line with display fields"""
    id: uuid.UUID
    variant_id: uuid.UUID
    quantity: int
    unit_price: Decimal
    created_at: datetime

    # Product details
    product_id: uuid.UUID
    product_name: str
    brand: Optional[str] = None
    size: str
    color: str
    image_url: Optional[str] = None
    is_available: bool

    # Calculated fields
    subtotal: Decimal

    @classmethod
    def from_line(cls, line) -> "CartLineResponse":
        variant = line.variant
        return cls(
            id=line.id,
            variant_id=line.variant_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            created_at=line.created_at,
            product_id=variant.product_id,
            product_name=variant.product.name,
            brand=variant.product.brand,
            size=variant.size,
            color=variant.color,
            image_url=variant.image_url,
            is_available=variant.is_available and variant.product.is_active,
            subtotal=Decimal(line.unit_price) * line.quantity,
        )

class CartSummary(BaseModel):
    """Cart totals"""
    line_count: int = 0
    item_count: int = 0
    subtotal: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")

class CartResponse(BaseModel):
    """Schema for complete cart response"""
    success: bool = True
    items: List[CartLineResponse] = []
    summary: CartSummary = CartSummary()

class CartLineMutationResponse(BaseModel):
    success: bool = True
    message: str
    item: CartLineResponse

class CartRemovalResponse(BaseModel):
    success: bool = True
    message: str
    removed: int = 0
