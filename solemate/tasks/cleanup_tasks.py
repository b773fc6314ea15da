"""Cleanup and maintenance tasks"""

from celery.utils.log import get_task_logger
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from solemate.core.celery_app import celery_app
from solemate.core.config import settings
from solemate.core.database import get_db_sync_context
from solemate.models import AnonymousSession, CartLine, WishlistEntry

logger = get_task_logger(__name__)

def purge_guest_state(db: Session, ttl_days: int, now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Delete cart lines and wishlist entries of sessions idle past ``ttl_days``

    Session rows are kept; only the state hanging off them goes.
    """
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=ttl_days)
    idle_sessions = select(AnonymousSession.session_id).where(
        AnonymousSession.last_seen_at < cutoff
    )

    carts = db.execute(
        delete(CartLine)
        .where(CartLine.session_id.in_(idle_sessions))
        .execution_options(synchronize_session=False)
    )
    wishlists = db.execute(
        delete(WishlistEntry)
        .where(WishlistEntry.session_id.in_(idle_sessions))
        .execution_options(synchronize_session=False)
    )

    return {
        "cart_lines_deleted": carts.rowcount,
        "wishlist_entries_deleted": wishlists.rowcount,
    }

@celery_app.task(name="solemate.tasks.cleanup_tasks.purge_abandoned_guest_state")
def purge_abandoned_guest_state(ttl_days: Optional[int] = None):
    """Remove cart and wishlist rows left behind by abandoned guest sessions"""
    try:
        with get_db_sync_context() as db:
            result = purge_guest_state(db, ttl_days or settings.GUEST_SESSION_TTL_DAYS)

        logger.info(
            f"Purged {result['cart_lines_deleted']} cart lines and "
            f"{result['wishlist_entries_deleted']} wishlist entries from idle guest sessions"
        )
        return result

    except Exception as e:
        logger.error(f"Error purging guest state: {str(e)}")
        raise
