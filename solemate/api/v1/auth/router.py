"""
Authentication API routes
Sign-in hands the guest cart and wishlist over to the account
"""

from typing import Dict, Any
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from solemate.core.database import get_db
from solemate.core.config import settings
from solemate.models import Account
from solemate.services.migration_service import BestEffort
from solemate.api.dependencies import get_session_candidate, get_current_account
from .schemas import (
    RegisterRequest,
    LoginRequest,
    AccountResponse,
    AuthResponse,
    TokenResponse,
    MigrationOutcome
)
from .services import AuthService

router = APIRouter()

def _complete_sign_in(
    response: Response,
    account: Account,
    tokens: Dict[str, Any],
    migration: BestEffort,
    message: str
) -> AuthResponse:
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=tokens["access_token"],
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    # The account identity takes over from here
    response.delete_cookie(settings.SESSION_COOKIE_NAME)

    return AuthResponse(
        message=message,
        account=AccountResponse.model_validate(account),
        tokens=TokenResponse(**tokens),
        migration=MigrationOutcome(**migration.to_dict())
    )

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new account",
    description="Create an account and adopt the caller's guest cart and wishlist"
)
async def register(
    request: RegisterRequest,
    http_request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Register a new account"""
    service = AuthService(db)

    account = await service.register(request)
    tokens = service.generate_tokens(account)
    migration = await service.adopt_guest_state(account, get_session_candidate(http_request))

    return _complete_sign_in(response, account, tokens, migration, "Account created successfully")

@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Login",
    description="Login with email and password and adopt the caller's guest cart and wishlist"
)
async def login(
    request: LoginRequest,
    http_request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Login with email and password"""
    service = AuthService(db)

    account = await service.login(request.email, request.password)
    tokens = service.generate_tokens(account)
    migration = await service.adopt_guest_state(account, get_session_candidate(http_request))

    return _complete_sign_in(response, account, tokens, migration, "Login successful")

@router.get(
    "/me",
    response_model=AccountResponse,
    summary="Get current account"
)
async def get_me(account: Account = Depends(get_current_account)):
    return account
