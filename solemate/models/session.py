"""
Anonymous shopper session
Identity that guest cart lines and wishlist entries hang off
"""

from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func

from .base import Base, UUIDModel, ReprModel

class AnonymousSession(Base, UUIDModel, ReprModel):
    """Guest session; weak reference target, owns nothing"""

    __tablename__ = "anonymous_sessions"

    session_id = Column(String(64), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    last_seen_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Stamped once when the session's rows were folded into an account
    migrated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_anonymous_sessions_last_seen", "last_seen_at"),
    )
