"""Models package initialization"""

from .base import Base
from .account import Account
from .session import AnonymousSession
from .product import Product, ProductVariant
from .cart import CartLine
from .wishlist import WishlistEntry

__all__ = [
    "Base",
    "Account",
    "AnonymousSession",
    "Product",
    "ProductVariant",
    "CartLine",
    "WishlistEntry",
]
