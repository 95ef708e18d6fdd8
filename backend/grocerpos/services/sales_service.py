# Overview: Service-layer operations for sales history.

from __future__ import annotations

import logging
from typing import List

from ..datastore import DataStore, in_
from ..records import Sale, SaleItem

logger = logging.getLogger(__name__)


class SaleNotFoundError(Exception):
    pass


def list_sales(store: DataStore) -> List[Sale]:
    """All sales, newest first."""
    return [Sale.from_row(row) for row in store.select("sales", order_by="created_at", descending=True)]


def get_sale(store: DataStore, sale_id: str) -> Sale:
    """Sale with its items, each carrying the product's name and SKU."""
    row = store.select_one("sales", {"id": sale_id})
    if not row:
        raise SaleNotFoundError("Sale not found")

    item_rows = store.select("sale_items", {"sale_id": sale_id})
    product_ids = sorted({str(item["product_id"]) for item in item_rows})
    products = {}
    if product_ids:
        products = {str(p["id"]): p for p in store.select("products", [in_("id", product_ids)])}

    items = [SaleItem.from_row(item, products.get(str(item["product_id"]))) for item in item_rows]
    return Sale.from_row(row, items)


def delete_sale(store: DataStore, sale_id: str) -> None:
    """
    Delete a sale and its items together.

    Stock sold by the sale is not put back.
    """
    if not store.select_one("sales", {"id": sale_id}):
        raise SaleNotFoundError("Sale not found")

    with store.unit_of_work() as uow:
        removed = uow.delete("sale_items", {"sale_id": sale_id})
        uow.delete("sales", {"id": sale_id})

    logger.info("Deleted sale %s with %d item(s)", sale_id, removed)
