"""
Auth API tests.

Verifies:
- Protected endpoints return 401 with a redirect hint
- Sign-up / login / logout flow and the session endpoint
- Sign-in and sign-out are published on the auth-state channel
"""

import pytest

from grocerpos.extensions import get_auth_events
from grocerpos.services.session_service import SIGNED_IN, SIGNED_OUT

from conftest import CASHIER_EMAIL, CASHIER_PASSWORD, auth_headers


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/session"),
            ("GET", "/api/dashboard"),
            ("GET", "/api/pos/products"),
            ("GET", "/api/pos/cart"),
            ("POST", "/api/pos/cart/items"),
            ("POST", "/api/pos/checkout"),
            ("GET", "/api/inventory/products"),
            ("POST", "/api/inventory/products"),
            ("GET", "/api/sales"),
            ("DELETE", "/api/sales/some-id"),
            ("GET", "/api/shifts"),
            ("POST", "/api/shifts/start"),
            ("GET", "/api/settings/profile"),
            ("PUT", "/api/settings/profile"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.json["redirect"] == "/auth"

    def test_invalid_token(self, client, db_session):
        resp = client.get("/api/dashboard", headers=auth_headers("0" * 64))
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid or expired token"


class TestAuthFlow:

    def test_sign_up_returns_token(self, client, db_session):
        resp = client.post("/api/auth/sign-up", json={
            "email": "new@grocerpos.test",
            "password": CASHIER_PASSWORD,
            "full_name": "New Cashier",
        })

        assert resp.status_code == 201
        assert len(resp.json["token"]) == 64
        assert resp.json["user"]["email"] == "new@grocerpos.test"

    def test_sign_up_weak_password(self, client, db_session):
        resp = client.post("/api/auth/sign-up", json={"email": "new@grocerpos.test", "password": "weak"})
        assert resp.status_code == 400

    def test_sign_up_duplicate_email_conflict(self, client, cashier):
        resp = client.post("/api/auth/sign-up", json={"email": CASHIER_EMAIL, "password": CASHIER_PASSWORD})
        assert resp.status_code == 409

    def test_login_and_session(self, client, cashier):
        resp = client.post("/api/auth/login", json={"email": CASHIER_EMAIL, "password": CASHIER_PASSWORD})
        assert resp.status_code == 200
        token = resp.json["token"]

        resp = client.get("/api/auth/session", headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.json["user"] == {"id": cashier.identity.user_id, "email": CASHIER_EMAIL}

    def test_login_bad_credentials(self, client, cashier):
        resp = client.post("/api/auth/login", json={"email": CASHIER_EMAIL, "password": "Wrong123!!"})
        assert resp.status_code == 401
        assert resp.json["redirect"] == "/auth"

    def test_login_missing_fields(self, client, db_session):
        resp = client.post("/api/auth/login", json={"email": CASHIER_EMAIL})
        assert resp.status_code == 400

    def test_logout_revokes_token_and_clears_cart(self, client, headers, products):
        client.post("/api/pos/cart/items", json={"product_id": products["RICE-5"].id}, headers=headers)

        resp = client.post("/api/auth/logout", headers=headers)
        assert resp.status_code == 200

        assert client.get("/api/auth/session", headers=headers).status_code == 401
        with client.session_transaction() as sess:
            assert "cart" not in sess

    def test_logout_without_token(self, client, db_session):
        assert client.post("/api/auth/logout").status_code == 401


class TestAuthEventsPublished:

    def test_sign_in_and_sign_out_events(self, client, cashier):
        seen = []
        unsubscribe = get_auth_events().subscribe(lambda event, identity: seen.append((event, identity.email)))
        try:
            resp = client.post("/api/auth/login", json={"email": CASHIER_EMAIL, "password": CASHIER_PASSWORD})
            client.post("/api/auth/logout", headers=auth_headers(resp.json["token"]))
        finally:
            unsubscribe()

        assert seen == [(SIGNED_IN, CASHIER_EMAIL), (SIGNED_OUT, CASHIER_EMAIL)]
