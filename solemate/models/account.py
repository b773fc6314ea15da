"""
Account model
Owned by the authentication layer; referenced here as the migration target
"""

from sqlalchemy import Column, String, Boolean, DateTime

from .base import Base, TimestampedModel, UUIDModel, ReprModel

class Account(Base, TimestampedModel, UUIDModel, ReprModel):
    """Registered shopper"""

    __tablename__ = "accounts"

    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Account {self.email}>"
