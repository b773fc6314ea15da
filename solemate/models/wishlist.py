"""
Wishlist model for liked products
An entry may pin a specific variant or the product generally
"""

from sqlalchemy import Column, String, ForeignKey, Uuid, Index, CheckConstraint, text
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel, ReprModel

def _owner_unique_indexes(owner_column: str):
    # A NULL variant never collides in a plain unique constraint, so the
    # pinned and unpinned cases get separate partial indexes.
    pinned = text("variant_id IS NOT NULL")
    unpinned = text("variant_id IS NULL")
    return (
        Index(
            f"uq_wishlist_{owner_column}_product_variant",
            owner_column, "product_id", "variant_id",
            unique=True,
            postgresql_where=pinned,
            sqlite_where=pinned,
        ),
        Index(
            f"uq_wishlist_{owner_column}_product",
            owner_column, "product_id",
            unique=True,
            postgresql_where=unpinned,
            sqlite_where=unpinned,
        ),
    )

class WishlistEntry(Base, TimestampedModel, UUIDModel, ReprModel):
    """Wishlist entry"""

    __tablename__ = "wishlist_entries"

    account_id = Column(Uuid(as_uuid=True), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=True)
    session_id = Column(String(64), ForeignKey("anonymous_sessions.session_id"), nullable=True)

    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)
    variant_id = Column(Uuid(as_uuid=True), ForeignKey("product_variants.id"), nullable=True)

    product = relationship("Product")
    variant = relationship("ProductVariant")

    __table_args__ = (
        *_owner_unique_indexes("account_id"),
        *_owner_unique_indexes("session_id"),
        CheckConstraint(
            "(account_id IS NULL) <> (session_id IS NULL)",
            name="check_wishlist_single_owner",
        ),
        Index("idx_wishlist_entries_session", "session_id"),
    )
