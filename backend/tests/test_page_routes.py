"""
API tests for the remaining pages: inventory, sales history, shifts,
settings, dashboard and the health check.
"""

import pytest


class TestInventoryRoutes:

    def test_list_with_stock_filter_and_summary(self, client, headers, products):
        resp = client.get("/api/inventory/products?stock=low", headers=headers)

        assert resp.status_code == 200
        assert [p["sku"] for p in resp.json["products"]] == ["EGG-10", "MILK-1"]
        assert resp.json["summary"] == {"total_products": 4, "low_stock": 2, "out_of_stock": 1}
        assert resp.json["low_stock_threshold"] == 10

    def test_unknown_stock_bucket(self, client, headers, products):
        assert client.get("/api/inventory/products?stock=lots", headers=headers).status_code == 400

    def test_add_product(self, client, headers, db_session):
        resp = client.post("/api/inventory/products", json={
            "sku": "OIL-2",
            "name": "Cooking oil 2L",
            "price": 38500,
            "stock_quantity": "6",
            "category": "Staples",
        }, headers=headers)

        assert resp.status_code == 201
        assert resp.json["product"]["price"] == "38500.00"
        assert resp.json["product"]["stock_quantity"] == 6

    def test_add_product_validation_and_conflict(self, client, headers, products):
        resp = client.post("/api/inventory/products", json={"sku": "X", "name": "X", "price": 0}, headers=headers)
        assert resp.status_code == 400

        resp = client.post("/api/inventory/products", json={"sku": "RICE-5", "name": "Dup", "price": 1}, headers=headers)
        assert resp.status_code == 409


class TestSalesRoutes:

    def _sell(self, client, headers, product):
        client.post("/api/pos/cart/items", json={"product_id": product.id}, headers=headers)
        return client.post("/api/pos/checkout", headers=headers).json["sale"]["id"]

    def test_list_detail_delete(self, client, headers, products):
        sale_id = self._sell(client, headers, products["RICE-5"])

        listed = client.get("/api/sales", headers=headers).json["sales"]
        assert [s["id"] for s in listed] == [sale_id]

        detail = client.get(f"/api/sales/{sale_id}", headers=headers).json["sale"]
        assert detail["items"][0]["product"] == {"name": "Rice 5kg", "sku": "RICE-5"}

        assert client.delete(f"/api/sales/{sale_id}", headers=headers).status_code == 200
        assert client.get(f"/api/sales/{sale_id}", headers=headers).status_code == 404
        assert client.delete(f"/api/sales/{sale_id}", headers=headers).status_code == 404


class TestShiftRoutes:

    def test_start_end_and_history(self, client, headers, products):
        resp = client.post("/api/shifts/start", json={"starting_cash": "100000"}, headers=headers)
        assert resp.status_code == 201
        shift_id = resp.json["shift"]["id"]

        assert client.post("/api/shifts/start", json={"starting_cash": 0}, headers=headers).status_code == 409

        client.post("/api/pos/cart/items", json={"product_id": products["SOAP-3"].id}, headers=headers)
        client.post("/api/pos/checkout", headers=headers)

        listing = client.get("/api/shifts", headers=headers).json
        assert listing["active_shift"]["id"] == shift_id

        assert client.delete(f"/api/shifts/{shift_id}", headers=headers).status_code == 409

        resp = client.post("/api/shifts/end", json={"ending_cash": "109000", "notes": "ok"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json["shift"]["status"] == "closed"
        assert resp.json["shift"]["total_sales"] == "9000.00"

        listing = client.get("/api/shifts", headers=headers).json
        assert listing["active_shift"] is None
        assert [s["id"] for s in listing["shifts"]] == [shift_id]

        assert client.delete(f"/api/shifts/{shift_id}", headers=headers).status_code == 200
        assert client.delete(f"/api/shifts/{shift_id}", headers=headers).status_code == 404

    @pytest.mark.parametrize("amount", [-5, "abc", None])
    def test_invalid_starting_cash(self, client, headers, store, amount):
        resp = client.post("/api/shifts/start", json={"starting_cash": amount}, headers=headers)
        assert resp.status_code == 400
        assert store.select("shifts") == []

    def test_end_without_shift(self, client, headers):
        assert client.post("/api/shifts/end", json={"ending_cash": 0}, headers=headers).status_code == 409


class TestSettingsRoutes:

    def test_get_profile_includes_email(self, client, headers, cashier):
        resp = client.get("/api/settings/profile", headers=headers)

        assert resp.status_code == 200
        profile = resp.json["profile"]
        assert profile["email"] == cashier.identity.email
        assert profile["full_name"] == "Ayu Cashier"
        assert profile["language"] == "en"

    def test_update_profile(self, client, headers):
        resp = client.put("/api/settings/profile", json={
            "full_name": "Ayu S.",
            "phone_number": "+62 812 0000",
            "language": "id",
            "email": "ignored@example.com",
        }, headers=headers)

        assert resp.status_code == 200
        profile = resp.json["profile"]
        assert profile["full_name"] == "Ayu S."
        assert profile["language"] == "id"
        assert profile["email"] != "ignored@example.com"

    def test_unsupported_language(self, client, headers):
        resp = client.put("/api/settings/profile", json={"language": "xx"}, headers=headers)
        assert resp.status_code == 400


class TestDashboardAndHealth:

    def test_dashboard(self, client, headers, products):
        resp = client.get("/api/dashboard", headers=headers)

        assert resp.status_code == 200
        assert resp.json["role"] == "cashier"
        assert resp.json["summary"]["total_products"] == 4
        assert resp.json["active_shift"] is None

    def test_health(self, client, db_session):
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json["status"] == "healthy"
        assert resp.json["checks"]["data_store"]["backend"] == "sql"
        assert resp.json["checks"]["auth"]["backend"] == "local"
