"""
Anonymous session issuance and lookup
"""

from typing import Optional
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_, func
import logging

from solemate.models import AnonymousSession
from solemate.core.config import settings
from solemate.core.security import SecurityUtils

logger = logging.getLogger(__name__)

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class SessionService:
    """Issues guest session ids and resolves the ones clients send back"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _usable(now: datetime):
        cutoff = now - timedelta(days=settings.GUEST_SESSION_TTL_DAYS)
        return and_(
            AnonymousSession.migrated_at.is_(None),
            AnonymousSession.last_seen_at >= cutoff,
        )

    async def resolve(self, candidate_id: Optional[str]) -> Optional[str]:
        """
        Return ``candidate_id`` if it names a live, non-migrated session

        The lookup and the ``last_seen_at`` touch are one conditional UPDATE,
        so concurrent requests carrying the same id never insert anything.
        """
        if not candidate_id:
            return None

        now = utcnow()
        result = await self.db.execute(
            update(AnonymousSession)
            .where(
                AnonymousSession.session_id == candidate_id,
                self._usable(now),
            )
            .values(last_seen_at=now)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        if result.rowcount == 1:
            return candidate_id
        return None

    async def issue_or_resolve(self, candidate_id: Optional[str] = None) -> str:
        """
        Resolve the candidate or mint a new session

        Unknown, expired and migrated candidates are not errors: a fresh
        session is minted so anonymous browsing never fails.
        """
        resolved = await self.resolve(candidate_id)
        if resolved:
            return resolved

        if candidate_id:
            logger.info("Guest session candidate not usable, minting a new session")

        return await self._mint()

    async def _mint(self) -> str:
        now = utcnow()
        session = AnonymousSession(
            session_id=SecurityUtils.generate_session_token(),
            created_at=now,
            last_seen_at=now,
        )
        self.db.add(session)
        await self.db.commit()

        logger.info(f"Minted guest session {session.session_id[:8]}...")
        return session.session_id

    async def validate(self, session_id: Optional[str]) -> bool:
        """Check a session exists, is not expired and was not migrated"""
        if not session_id:
            return False

        result = await self.db.execute(
            select(func.count())
            .select_from(AnonymousSession)
            .where(
                AnonymousSession.session_id == session_id,
                self._usable(utcnow()),
            )
        )
        return result.scalar_one() == 1

    async def retire(self, session_id: str) -> bool:
        """
        Stamp the session as migrated so it is never reused for storage

        Returns False when it was already retired (or never existed).
        """
        result = await self.db.execute(
            update(AnonymousSession)
            .where(
                AnonymousSession.session_id == session_id,
                AnonymousSession.migrated_at.is_(None),
            )
            .values(migrated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1
