"""
Tests for dual-mode wishlist storage
"""

import uuid
from decimal import Decimal

import pytest

from solemate.core.exceptions import NotFoundException, BadRequestException, VariantUnavailableException
from solemate.services.cart_service import CartService
from solemate.services.owner import AccountOwner, SessionOwner
from solemate.services.session_service import SessionService
from solemate.services.wishlist_service import WishlistService

@pytest.fixture
async def guest(db):
    return SessionOwner(await SessionService(db).issue_or_resolve())

async def test_add_get_remove_round_trip(db, catalog, guest):
    service = WishlistService(db)

    entry = await service.add_to_wishlist(guest, catalog.product_id, catalog.variant_id)
    entries = await service.get_wishlist(guest)
    assert [e.id for e in entries] == [entry.id]
    assert entries[0].variant_id == catalog.variant_id

    assert await service.remove_wishlist_entry(guest, entry.id) is True
    assert await service.get_wishlist(guest) == []

async def test_repeated_add_returns_existing_entry(db, catalog, guest):
    service = WishlistService(db)

    first = await service.add_to_wishlist(guest, catalog.product_id)
    second = await service.add_to_wishlist(guest, catalog.product_id)

    assert first.id == second.id
    assert len(await service.get_wishlist(guest)) == 1

async def test_pinned_and_unpinned_entries_are_distinct(db, catalog, guest):
    service = WishlistService(db)

    await service.add_to_wishlist(guest, catalog.product_id)
    await service.add_to_wishlist(guest, catalog.product_id, catalog.variant_id)
    await service.add_to_wishlist(guest, catalog.product_id, catalog.variant_id)

    assert len(await service.get_wishlist(guest)) == 2

async def test_same_item_for_two_owners(db, catalog, guest, account):
    service = WishlistService(db)
    member = AccountOwner(account.id)

    await service.add_to_wishlist(guest, catalog.product_id)
    await service.add_to_wishlist(member, catalog.product_id)

    assert len(await service.get_wishlist(guest)) == 1
    assert len(await service.get_wishlist(member)) == 1

async def test_remove_is_idempotent_and_owner_scoped(db, catalog, guest, account):
    service = WishlistService(db)
    member = AccountOwner(account.id)
    entry = await service.add_to_wishlist(member, catalog.product_id)

    assert await service.remove_wishlist_entry(guest, entry.id) is False
    assert len(await service.get_wishlist(member)) == 1
    assert await service.remove_wishlist_entry(guest, uuid.uuid4()) is False

async def test_clear_wishlist(db, catalog, guest):
    service = WishlistService(db)
    await service.add_to_wishlist(guest, catalog.product_id)
    await service.add_to_wishlist(guest, catalog.other_product_id)

    assert await service.clear_wishlist(guest) == 2
    assert await service.get_wishlist(guest) == []

async def test_move_to_cart(db, catalog, guest):
    service = WishlistService(db)
    entry = await service.add_to_wishlist(guest, catalog.product_id, catalog.second_variant_id)

    line = await service.move_to_cart(guest, entry.id)

    assert line.variant_id == catalog.second_variant_id
    assert line.quantity == 1
    assert Decimal(line.unit_price) == catalog.second_price
    assert await service.get_wishlist(guest) == []
    assert len(await CartService(db).get_cart(guest)) == 1

async def test_move_to_cart_requires_variant(db, catalog, guest):
    service = WishlistService(db)
    entry = await service.add_to_wishlist(guest, catalog.product_id)

    with pytest.raises(BadRequestException) as exc_info:
        await service.move_to_cart(guest, entry.id)

    assert exc_info.value.error_code == "VARIANT_REQUIRED"
    assert len(await service.get_wishlist(guest)) == 1

async def test_move_to_cart_unavailable_variant(db, catalog, guest):
    service = WishlistService(db)
    entry = await service.add_to_wishlist(guest, catalog.product_id, catalog.unavailable_variant_id)

    with pytest.raises(VariantUnavailableException):
        await service.move_to_cart(guest, entry.id)

async def test_move_other_owners_entry_is_not_found(db, catalog, guest, account):
    service = WishlistService(db)
    entry = await service.add_to_wishlist(AccountOwner(account.id), catalog.product_id, catalog.variant_id)

    with pytest.raises(NotFoundException):
        await service.move_to_cart(guest, entry.id)
