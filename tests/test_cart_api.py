"""
Tests for cart endpoints
"""

import uuid
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from solemate.core.database import SessionLocal
from solemate.models import AnonymousSession
from solemate.services.cart_service import CartService

SESSION_HEADER = "X-Session-ID"

def _session_count() -> int:
    with SessionLocal() as session:
        return session.execute(select(func.count()).select_from(AnonymousSession)).scalar_one()

def _add(client, variant_id, quantity=1, headers=None):
    return client.post(
        "/api/v1/cart",
        json={"variant_id": str(variant_id), "quantity": quantity},
        headers=headers or {}
    )

def test_read_without_identity_is_empty_and_mints_nothing(client):
    response = client.get("/api/v1/cart")

    assert response.status_code == 200
    data = response.json()
    assert data["items"] == []
    assert data["summary"]["item_count"] == 0
    assert SESSION_HEADER not in response.headers
    assert _session_count() == 0

def test_first_write_mints_session(client, catalog):
    response = _add(client, catalog.variant_id, 2)

    assert response.status_code == 200
    session_id = response.headers[SESSION_HEADER]
    assert len(session_id) == 64
    assert any(c.startswith(f"guest_session_id={session_id}") for c in response.headers.get_list("set-cookie"))

    item = response.json()["item"]
    assert item["quantity"] == 2
    assert item["product_name"] == "Trail Runner"
    assert item["size"] == "9"
    assert Decimal(item["unit_price"]) == catalog.price
    assert _session_count() == 1

def test_repeated_add_with_header_increments(client, catalog):
    session_id = _add(client, catalog.variant_id).headers[SESSION_HEADER]

    response = _add(client, catalog.variant_id, headers={SESSION_HEADER: session_id})

    assert response.headers[SESSION_HEADER] == session_id
    assert response.json()["item"]["quantity"] == 2

    cart = client.get("/api/v1/cart", headers={SESSION_HEADER: session_id}).json()
    assert len(cart["items"]) == 1
    assert _session_count() == 1

def test_session_cookie_identifies_guest(client, catalog):
    _add(client, catalog.variant_id)

    # The test client replays the guest cookie it was given
    cart = client.get("/api/v1/cart").json()

    assert [item["quantity"] for item in cart["items"]] == [1]

def test_add_rejects_non_positive_quantity(client, catalog):
    response = _add(client, catalog.variant_id, 0)

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "VALIDATION_ERROR"
    assert data["request_id"]

def test_add_unavailable_variant(client, catalog):
    response = _add(client, catalog.unavailable_variant_id)

    assert response.status_code == 400
    assert response.json()["error_code"] == "VARIANT_UNAVAILABLE"

def test_add_unknown_variant(client, catalog):
    response = _add(client, uuid.uuid4())

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"

def test_add_beyond_stock(client, catalog):
    session_id = _add(client, catalog.variant_id, catalog.stock).headers[SESSION_HEADER]

    response = _add(client, catalog.variant_id, headers={SESSION_HEADER: session_id})

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "INSUFFICIENT_INVENTORY"

    cart = client.get("/api/v1/cart", headers={SESSION_HEADER: session_id}).json()
    assert [item["quantity"] for item in cart["items"]] == [catalog.stock]

def test_update_beyond_stock(client, catalog):
    added = _add(client, catalog.variant_id)

    response = client.patch(
        f"/api/v1/cart/{added.json()['item']['id']}",
        json={"quantity": catalog.stock + 1},
        headers={SESSION_HEADER: added.headers[SESSION_HEADER]}
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "INSUFFICIENT_INVENTORY"

def test_update_line(client, catalog):
    added = _add(client, catalog.variant_id)
    session_id = added.headers[SESSION_HEADER]
    line_id = added.json()["item"]["id"]

    response = client.patch(
        f"/api/v1/cart/{line_id}",
        json={"quantity": 4},
        headers={SESSION_HEADER: session_id}
    )

    assert response.status_code == 200
    assert response.json()["item"]["quantity"] == 4

def test_update_other_guests_line_is_not_found(client, catalog):
    owner_line = _add(client, catalog.variant_id).json()["item"]

    client.cookies.clear()
    intruder = _add(client, catalog.second_variant_id).headers[SESSION_HEADER]
    response = client.patch(
        f"/api/v1/cart/{owner_line['id']}",
        json={"quantity": 9},
        headers={SESSION_HEADER: intruder}
    )

    assert response.status_code == 404
    assert response.json()["success"] is False

def test_remove_is_idempotent(client, catalog):
    added = _add(client, catalog.variant_id)
    headers = {SESSION_HEADER: added.headers[SESSION_HEADER]}
    line_id = added.json()["item"]["id"]

    first = client.delete(f"/api/v1/cart/{line_id}", headers=headers)
    second = client.delete(f"/api/v1/cart/{line_id}", headers=headers)

    assert first.status_code == 200
    assert first.json()["removed"] == 1
    assert second.status_code == 200
    assert second.json()["removed"] == 0

def test_clear_and_summary(client, catalog):
    headers = {SESSION_HEADER: _add(client, catalog.variant_id, 2).headers[SESSION_HEADER]}
    _add(client, catalog.second_variant_id, 1, headers=headers)

    summary = client.get("/api/v1/cart/summary", headers=headers).json()
    assert summary["item_count"] == 3
    assert Decimal(summary["subtotal"]) == Decimal("320.00")
    assert Decimal(summary["tax"]) == Decimal("57.60")
    assert Decimal(summary["total"]) == Decimal("377.60")

    cleared = client.delete("/api/v1/cart", headers=headers)
    assert cleared.json()["removed"] == 2
    assert client.get("/api/v1/cart", headers=headers).json()["items"] == []

def test_store_failure_is_reported_as_unavailable(client, catalog, monkeypatch):
    async def broken_clear(self, owner):
        raise OperationalError("DELETE FROM cart_lines", {}, Exception("database is locked"))

    monkeypatch.setattr(CartService, "clear_cart", broken_clear)

    response = client.delete("/api/v1/cart")

    assert response.status_code == 503
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "STORE_UNAVAILABLE"

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
