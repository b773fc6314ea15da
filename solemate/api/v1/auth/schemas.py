"""
Authentication schemas for request/response validation
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from solemate.core.config import settings

class RegisterRequest(BaseModel):
    """Account registration request"""
    email: EmailStr
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH, max_length=72)
    full_name: str = Field(..., min_length=2, max_length=100)

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "jane@example.com",
                "password": "correct-horse",
                "full_name": "Jane Doe"
            }
        }
    }

class LoginRequest(BaseModel):
    """Account login request"""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)

class TokenResponse(BaseModel):
    """JWT token response"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiry in seconds")

class AccountResponse(BaseModel):
    """Account information response"""
    id: uuid.UUID
    email: str
    full_name: str
    created_at: datetime

    model_config = {
        "from_attributes": True
    }

class MigrationOutcome(BaseModel):
    """What happened to the guest cart/wishlist on sign-in"""
    attempted: bool
    succeeded: bool
    cart_merged: int = 0
    wishlist_merged: int = 0
    error: Optional[str] = None

class AuthResponse(BaseModel):
    """Authentication response with tokens, account and migration outcome"""
    success: bool = True
    message: str
    account: AccountResponse
    tokens: TokenResponse
    migration: MigrationOutcome
