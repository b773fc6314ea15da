"""
Shopping cart model
A line is owned by exactly one of an account or an anonymous session
"""

from sqlalchemy import Column, String, Integer, Numeric, ForeignKey, Uuid, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel, ReprModel

class CartLine(Base, TimestampedModel, UUIDModel, ReprModel):
    """Shopping cart line"""

    __tablename__ = "cart_lines"

    # Account or session
    account_id = Column(Uuid(as_uuid=True), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=True)
    session_id = Column(String(64), ForeignKey("anonymous_sessions.session_id"), nullable=True)

    variant_id = Column(Uuid(as_uuid=True), ForeignKey("product_variants.id"), nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)  # Price at time of adding

    variant = relationship("ProductVariant")

    __table_args__ = (
        UniqueConstraint("account_id", "variant_id", name="uq_cart_account_variant"),
        UniqueConstraint("session_id", "variant_id", name="uq_cart_session_variant"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
        CheckConstraint(
            "(account_id IS NULL) <> (session_id IS NULL)",
            name="check_cart_single_owner",
        ),
        Index("idx_cart_lines_session", "session_id"),
    )
