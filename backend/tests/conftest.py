"""
Pytest fixtures for GrocerPOS backend tests.

Provides an in-memory SQLite app (sql data store, local auth), a signed-up
cashier and a small seeded catalog.
"""

import pytest

from grocerpos import create_app
from grocerpos.extensions import db, get_auth, get_store
from grocerpos.services import catalog_service
from grocerpos.services.session_service import SessionContext


CASHIER_EMAIL = "cashier@grocerpos.test"
CASHIER_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'DATA_BACKEND': 'sql',
        'AUTH_BACKEND': 'local',
        'LOW_STOCK_THRESHOLD': 10,
        'STORE_NAME': 'Test Grocer',
        'CURRENCY_SYMBOL': 'Rp',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client (keeps the session cookie, and so the cart, between requests)."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def store(db_session):
    return get_store()


@pytest.fixture(scope='function')
def cashier(db_session):
    """Signed-up cashier; returns the AuthSession (token + identity)."""
    return get_auth().sign_up(CASHIER_EMAIL, CASHIER_PASSWORD, "Ayu Cashier")


@pytest.fixture(scope='function')
def context(cashier):
    return SessionContext(identity=cashier.identity, access_token=cashier.access_token)


@pytest.fixture(scope='function')
def headers(cashier):
    return auth_headers(cashier.access_token)


@pytest.fixture(scope='function')
def products(store):
    """
    Seed catalog, keyed by SKU:
    - RICE-5   Staples  65000.00  stock 20
    - EGG-10   Dairy    28000.00  stock 8   (low)
    - MILK-1   Dairy    18500.00  stock 0   (out)
    - SOAP-3   Home      9000.00  stock 12
    """
    rows = [
        {"sku": "RICE-5", "name": "Rice 5kg", "price": "65000", "stock_quantity": 20, "category": "Staples"},
        {"sku": "EGG-10", "name": "Eggs (10)", "price": "28000", "stock_quantity": 8, "category": "Dairy"},
        {"sku": "MILK-1", "name": "Milk 1L", "price": "18500", "stock_quantity": 0, "category": "Dairy"},
        {"sku": "SOAP-3", "name": "Bar Soap 3-pack", "price": "9000", "stock_quantity": 12, "category": "Home"},
    ]
    return {row["sku"]: catalog_service.add_product(store, row) for row in rows}


def make_product(store, sku: str, price: str, stock: int, name: str | None = None, category: str | None = None):
    """Helper to add one product."""
    return catalog_service.add_product(store, {
        "sku": sku,
        "name": name or sku,
        "price": price,
        "stock_quantity": stock,
        "category": category,
    })


def stock_of(store, product_id: str) -> int:
    return store.select_one("products", {"id": product_id})["stock_quantity"]


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
