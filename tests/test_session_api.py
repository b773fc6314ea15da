"""
Tests for guest session endpoints
"""

SESSION_HEADER = "X-Session-ID"

def test_create_session(client):
    response = client.post("/api/v1/session/create")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["is_new"] is True
    assert data["expires_in"] == 30 * 24 * 60 * 60
    assert response.headers[SESSION_HEADER] == data["session_id"]

def test_create_resumes_known_session(client):
    session_id = client.post("/api/v1/session/create").json()["session_id"]

    response = client.post("/api/v1/session/create", headers={SESSION_HEADER: session_id})

    assert response.json()["session_id"] == session_id
    assert response.json()["is_new"] is False

def test_create_with_unknown_session_mints_new_one(client):
    response = client.post("/api/v1/session/create", headers={SESSION_HEADER: "forged"})

    assert response.status_code == 200
    assert response.json()["session_id"] != "forged"
    assert response.json()["is_new"] is True

def test_validate_session(client):
    session_id = client.post("/api/v1/session/create").json()["session_id"]

    response = client.get("/api/v1/session/validate", headers={SESSION_HEADER: session_id})

    assert response.status_code == 200
    assert response.json()["valid"] is True

def test_validate_unknown_session(client):
    response = client.get("/api/v1/session/validate", headers={SESSION_HEADER: "forged"})

    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_SESSION"

def test_migrate_requires_account(client):
    session_id = client.post("/api/v1/session/create").json()["session_id"]

    response = client.post("/api/v1/session/migrate", headers={SESSION_HEADER: session_id})

    assert response.status_code == 401

def test_migrate_requires_session(client, auth_headers):
    response = client.post("/api/v1/session/migrate", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "SESSION_REQUIRED"

def test_explicit_migration_is_retry_safe(client, catalog, auth_headers):
    added = client.post(
        "/api/v1/cart",
        json={"variant_id": str(catalog.variant_id), "quantity": 2}
    )
    session_id = added.headers[SESSION_HEADER]
    client.post("/api/v1/wishlist", json={"product_id": str(catalog.product_id)})

    headers = {**auth_headers, SESSION_HEADER: session_id}
    first = client.post("/api/v1/session/migrate", headers=headers)
    second = client.post("/api/v1/session/migrate", headers=headers)

    assert first.status_code == 200
    assert first.json()["cart_merged"] == 1
    assert first.json()["wishlist_merged"] == 1
    assert second.status_code == 200
    assert second.json()["cart_merged"] == 0
    assert second.json()["wishlist_merged"] == 0

    cart = client.get("/api/v1/cart", headers=auth_headers).json()
    assert [item["quantity"] for item in cart["items"]] == [2]
