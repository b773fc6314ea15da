"""
Guest session API routes
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from solemate.core.database import get_db
from solemate.core.config import settings
from solemate.core.exceptions import UnauthorizedException, BadRequestException
from solemate.models import Account
from solemate.services.session_service import SessionService
from solemate.services.migration_service import MigrationCoordinator
from solemate.api.dependencies import get_session_candidate, attach_session, get_current_account
from .schemas import SessionResponse, SessionValidationResponse, SessionMigrationResponse

router = APIRouter()

@router.post(
    "/create",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Create or resume a guest session"
)
async def create_session(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Resume the session the client sent, or mint a new one"""
    candidate = get_session_candidate(request)
    session_id = await SessionService(db).issue_or_resolve(candidate)
    attach_session(response, session_id)

    return SessionResponse(
        session_id=session_id,
        is_new=session_id != candidate,
        expires_in=settings.GUEST_SESSION_TTL_DAYS * 24 * 60 * 60
    )

@router.get(
    "/validate",
    response_model=SessionValidationResponse,
    summary="Validate a guest session"
)
async def validate_session(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    session_id = get_session_candidate(request)

    if not await SessionService(db).validate(session_id):
        raise UnauthorizedException("Invalid or expired session", error_code="INVALID_SESSION")

    return SessionValidationResponse(valid=True, session_id=session_id)

@router.post(
    "/migrate",
    response_model=SessionMigrationResponse,
    summary="Move guest cart and wishlist to the signed-in account",
    description="Safe to retry: a repeated call finds nothing left to move"
)
async def migrate_session(
    request: Request,
    response: Response,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db)
):
    session_id = get_session_candidate(request)
    if not session_id:
        raise BadRequestException("Guest session id is required", error_code="SESSION_REQUIRED")

    result = await MigrationCoordinator(db).migrate(session_id, account.id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)

    return SessionMigrationResponse(
        message="Guest data migrated",
        cart_merged=result.cart_merged,
        wishlist_merged=result.wishlist_merged
    )
