# Overview: Service-layer operations for the product catalog; loading, filtering and the inventory add form.

"""
Catalog Reader

Loading goes through the data store; every derivation below works on an
immutable snapshot (a list of Product records), so the POS and Inventory
pages can re-filter without another round trip.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..datastore import DataStore
from ..records import Product
from ..time_utils import utcnow
from ..validation import (
    ConflictError,
    ValidationError,
    clean_text,
    parse_money,
    parse_non_negative_int,
)

logger = logging.getLogger(__name__)

STOCK_BUCKETS = ("all", "low", "out")
DEFAULT_LOW_STOCK_THRESHOLD = 10


def load(store: DataStore) -> List[Product]:
    """All products ordered by name."""
    return [Product.from_row(row) for row in store.select("products", order_by="name")]


def get_product(store: DataStore, product_id: str) -> Optional[Product]:
    row = store.select_one("products", {"id": product_id})
    return Product.from_row(row) if row else None


def categories(products: Iterable[Product]) -> List[str]:
    """Distinct non-empty categories in order of first appearance."""
    seen: List[str] = []
    for product in products:
        if product.category and product.category not in seen:
            seen.append(product.category)
    return seen


def filter_products(
    products: Iterable[Product],
    search: Optional[str] = None,
    category: Optional[str] = None,
    stock: str = "all",
    low_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> List[Product]:
    """
    Conjunction of three filters:
    - search: case-insensitive substring of name or SKU (empty matches all)
    - category: exact match; None or "all" matches all
    - stock: "all", "low" (stock <= low_threshold) or "out" (stock == 0)
    """
    stock = (stock or "all").lower()
    if stock not in STOCK_BUCKETS:
        raise ValidationError(f"stock must be one of: {', '.join(STOCK_BUCKETS)}")

    needle = (search or "").strip().lower()
    wanted_category = None if category in (None, "", "all") else category

    result = []
    for product in products:
        if needle and needle not in product.name.lower() and needle not in product.sku.lower():
            continue
        if wanted_category is not None and product.category != wanted_category:
            continue
        if stock == "low" and product.stock_quantity > low_threshold:
            continue
        if stock == "out" and product.stock_quantity != 0:
            continue
        result.append(product)
    return result


def summary(products: Iterable[Product], low_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> dict:
    """Counts shown in the inventory page header."""
    products = list(products)
    return {
        "total_products": len(products),
        "low_stock": sum(1 for p in products if p.stock_quantity <= low_threshold),
        "out_of_stock": sum(1 for p in products if p.stock_quantity == 0),
    }


def add_product(store: DataStore, payload: dict) -> Product:
    """
    Create a product from the inventory add form.

    Raises:
        ValidationError: missing sku/name, non-positive price, bad stock
        ConflictError: SKU already in the catalog
    """
    sku = clean_text(payload.get("sku"))
    name = clean_text(payload.get("name"))
    if not sku:
        raise ValidationError("sku is required")
    if not name:
        raise ValidationError("name is required")

    price = parse_money(payload.get("price"), "price", allow_zero=False)
    stock_quantity = parse_non_negative_int(payload.get("stock_quantity"), "stock_quantity", default=0)

    if store.select_one("products", {"sku": sku}):
        raise ConflictError(f"SKU {sku} already exists")

    rows = store.insert("products", {
        "sku": sku,
        "name": name,
        "description": clean_text(payload.get("description")),
        "price": price,
        "stock_quantity": stock_quantity,
        "category": clean_text(payload.get("category")),
        "created_at": utcnow(),
    })
    product = Product.from_row(rows[0])
    logger.info("Added product %s (%s)", product.sku, product.id)
    return product
