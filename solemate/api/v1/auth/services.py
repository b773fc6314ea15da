"""
Authentication service layer
Email/password sign-in plus the guest state hand-over that follows it
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from solemate.models import Account
from solemate.core.security import SecurityUtils
from solemate.core.config import settings
from solemate.core.database import AsyncSessionLocal
from solemate.core.exceptions import UnauthorizedException, DuplicateResourceException
from solemate.services.migration_service import MigrationCoordinator, BestEffort
from .schemas import RegisterRequest

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, request: RegisterRequest) -> Account:
        """
        Create a new account

        Raises:
            DuplicateResourceException: If the email is already registered
        """
        email = request.email.lower()
        existing = await self.db.execute(
            select(Account.id).where(Account.email == email)
        )
        if existing.scalar_one_or_none():
            raise DuplicateResourceException("Account", "email", email)

        account = Account(
            email=email,
            full_name=request.full_name,
            password_hash=SecurityUtils.hash_password(request.password),
            last_login_at=datetime.now(timezone.utc),
        )
        self.db.add(account)
        await self.db.commit()
        await self.db.refresh(account)

        logger.info(f"New account registered: {account.id}")
        return account

    async def login(self, email: str, password: str) -> Account:
        """
        Check credentials and record the login

        Raises:
            UnauthorizedException: On unknown email, wrong password or inactive account
        """
        result = await self.db.execute(
            select(Account).where(Account.email == email.lower())
        )
        account = result.scalar_one_or_none()

        if not account or not SecurityUtils.verify_password(password, account.password_hash):
            raise UnauthorizedException("Invalid email or password", error_code="INVALID_CREDENTIALS")

        if not account.is_active:
            raise UnauthorizedException("Account is deactivated", error_code="ACCOUNT_INACTIVE")

        account.last_login_at = datetime.now(timezone.utc)
        await self.db.commit()

        logger.info(f"Account logged in: {account.id}")
        return account

    def generate_tokens(self, account: Account) -> Dict[str, Any]:
        token_data = {"sub": str(account.id), "email": account.email}

        return {
            "access_token": SecurityUtils.create_access_token(token_data),
            "refresh_token": SecurityUtils.create_refresh_token(token_data),
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    async def adopt_guest_state(self, account: Account, session_id: Optional[str]) -> BestEffort:
        """
        Fold the guest session's cart and wishlist into the account

        Runs after the account changes are committed, on a session of its
        own: rolling back a failed migration never touches the account
        loaded here. Failure only shows up in the returned outcome.
        """
        async with AsyncSessionLocal() as migration_db:
            return await MigrationCoordinator(migration_db).migrate_best_effort(session_id, account.id)
