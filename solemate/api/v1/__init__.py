"""API v1 routes aggregation"""

from fastapi import APIRouter

from .session.router import router as session_router
from .cart.router import router as cart_router
from .wishlist.router import router as wishlist_router
from .auth.router import router as auth_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(session_router, prefix="/session", tags=["Guest Session"])
api_router.include_router(cart_router, prefix="/cart", tags=["Cart"])
api_router.include_router(wishlist_router, prefix="/wishlist", tags=["Wishlist"])
api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
