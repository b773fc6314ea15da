"""
Tests for guest session issuance
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, func, update

from solemate.core.database import AsyncSessionLocal
from solemate.models import AnonymousSession
from solemate.services.session_service import SessionService

async def _count_sessions(db) -> int:
    return (await db.execute(select(func.count()).select_from(AnonymousSession))).scalar_one()

async def _issue(candidate=None) -> str:
    async with AsyncSessionLocal() as session:
        return await SessionService(session).issue_or_resolve(candidate)

async def test_issue_without_candidate_mints_session(db):
    session_id = await SessionService(db).issue_or_resolve()

    assert len(session_id) == 64
    int(session_id, 16)
    assert await _count_sessions(db) == 1

async def test_valid_candidate_is_returned_unchanged(db):
    service = SessionService(db)
    session_id = await service.issue_or_resolve()

    assert await service.issue_or_resolve(session_id) == session_id
    assert await _count_sessions(db) == 1

async def test_resolving_touches_last_seen(db):
    service = SessionService(db)
    session_id = await service.issue_or_resolve()

    week_ago = datetime.now(timezone.utc) - timedelta(days=7)
    await db.execute(
        update(AnonymousSession)
        .where(AnonymousSession.session_id == session_id)
        .values(last_seen_at=week_ago)
    )
    await db.commit()

    await service.resolve(session_id)

    recent = datetime.now(timezone.utc) - timedelta(days=1)
    still_stale = await db.execute(
        select(func.count())
        .select_from(AnonymousSession)
        .where(AnonymousSession.session_id == session_id, AnonymousSession.last_seen_at < recent)
    )
    assert still_stale.scalar_one() == 0

async def test_unknown_candidate_mints_new_session(db):
    session_id = await SessionService(db).issue_or_resolve("not-a-session-we-issued")

    assert session_id != "not-a-session-we-issued"
    assert await _count_sessions(db) == 1

async def test_expired_candidate_mints_new_session(db):
    service = SessionService(db)
    session_id = await service.issue_or_resolve()

    await db.execute(
        update(AnonymousSession)
        .where(AnonymousSession.session_id == session_id)
        .values(last_seen_at=datetime.now(timezone.utc) - timedelta(days=31))
    )
    await db.commit()

    assert await service.validate(session_id) is False
    assert await service.issue_or_resolve(session_id) != session_id

async def test_migrated_session_is_never_reused(db):
    service = SessionService(db)
    session_id = await service.issue_or_resolve()

    assert await service.retire(session_id) is True
    assert await service.retire(session_id) is False

    assert await service.resolve(session_id) is None
    assert await service.issue_or_resolve(session_id) != session_id

async def test_resolve_never_mints(db):
    service = SessionService(db)

    assert await service.resolve(None) is None
    assert await service.resolve("unknown") is None
    assert await _count_sessions(db) == 0

async def test_validate(db):
    service = SessionService(db)
    session_id = await service.issue_or_resolve()

    assert await service.validate(session_id) is True
    assert await service.validate("unknown") is False
    assert await service.validate(None) is False

async def test_concurrent_issue_with_shared_candidate_never_forks(db):
    session_id = await SessionService(db).issue_or_resolve()

    results = await asyncio.gather(*[_issue(session_id) for _ in range(5)])

    assert set(results) == {session_id}
    assert await _count_sessions(db) == 1

async def test_concurrent_issue_without_candidate_mints_distinct_sessions(db):
    results = await asyncio.gather(*[_issue() for _ in range(5)])

    assert len(set(results)) == 5
    assert await _count_sessions(db) == 5
