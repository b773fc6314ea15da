"""
Guest session schemas
"""

from pydantic import BaseModel

class SessionResponse(BaseModel):
    success: bool = True
    session_id: str
    is_new: bool
    expires_in: int

class SessionValidationResponse(BaseModel):
    success: bool = True
    valid: bool
    session_id: str

class SessionMigrationResponse(BaseModel):
    success: bool = True
    message: str
    cart_merged: int
    wishlist_merged: int
