"""
Request identity dependencies

Resolves the account (bearer token or access token cookie) and the guest
session (session header or cookie) behind a request. Account identity wins
over a guest session. Read endpoints never create a session; write endpoints
mint one when the request carries none and send it back in both the session
header and cookie.
"""

from typing import Optional
from fastapi import Depends, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from solemate.core.database import get_db
from solemate.core.security import SecurityUtils
from solemate.core.config import settings
from solemate.core.exceptions import UnauthorizedException
from solemate.models import Account
from solemate.services.owner import Owner, AccountOwner, SessionOwner
from solemate.services.session_service import SessionService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

def extract_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Bearer header first, then the access token cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)

async def _load_account(db: AsyncSession, token: str) -> Account:
    payload = SecurityUtils.decode_token(token)

    if payload.get("type") != "access":
        raise UnauthorizedException("Invalid token type")

    try:
        account_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise UnauthorizedException("Invalid authentication credentials")

    result = await db.execute(
        select(Account).where(Account.id == account_id, Account.is_active == True)
    )
    account = result.scalar_one_or_none()

    if account is None:
        raise UnauthorizedException("Account not found or inactive")

    return account

async def get_current_account_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[Account]:
    """
    Get current account if authenticated, otherwise None
    A bad or expired token degrades to anonymous access
    """
    token = extract_access_token(request, credentials)
    if not token:
        return None

    try:
        return await _load_account(db, token)
    except UnauthorizedException as e:
        logger.debug(f"Ignoring unusable access token: {e.detail}")
        return None

async def get_current_account(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Account:
    """
    Get current authenticated account (required)
    Raises 401 if not authenticated or account not found
    """
    token = extract_access_token(request, credentials)
    if not token:
        raise UnauthorizedException("Authentication required")

    return await _load_account(db, token)

def get_session_candidate(request: Request) -> Optional[str]:
    """Session id sent by the client, header before cookie"""
    candidate = request.headers.get(settings.SESSION_HEADER_NAME)
    if not candidate:
        candidate = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return candidate.strip() if candidate else None

def attach_session(response: Response, session_id: str) -> None:
    """Propagate the session id back to the client"""
    response.headers[settings.SESSION_HEADER_NAME] = session_id
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        max_age=settings.GUEST_SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )

async def get_read_owner(
    request: Request,
    response: Response,
    account: Optional[Account] = Depends(get_current_account_optional),
    db: AsyncSession = Depends(get_db)
) -> Optional[Owner]:
    """Owner for read-only endpoints; None when the request has no usable identity"""
    if account:
        return AccountOwner(account.id)

    session_id = await SessionService(db).resolve(get_session_candidate(request))
    if not session_id:
        return None

    attach_session(response, session_id)
    return SessionOwner(session_id)

async def get_write_owner(
    request: Request,
    response: Response,
    account: Optional[Account] = Depends(get_current_account_optional),
    db: AsyncSession = Depends(get_db)
) -> Owner:
    """Owner for mutating endpoints, minting a guest session when needed"""
    if account:
        return AccountOwner(account.id)

    session_id = await SessionService(db).issue_or_resolve(get_session_candidate(request))
    attach_session(response, session_id)
    return SessionOwner(session_id)
