# Overview: Service-layer operations for checkout; turns a cart into a sale, its items and stock decrements.

"""
Checkout Committer

The sale, its line items and every stock decrement are written inside one
store.unit_of_work(): either all of them persist or none do. Stock is
re-read inside that scope (FOR UPDATE on SQL backends) and each product is
written as previous_stock - quantity_sold.

A retried checkout carrying the same idempotency key returns the sale it
already created instead of selling twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..datastore import DataStore, in_
from ..records import Sale, SaleItem
from ..time_utils import utcnow
from .cart_service import Cart
from .session_service import SessionContext

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    """Raised when a cart cannot be sold as-is."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass(frozen=True)
class CheckoutResult:
    sale: Sale
    items: List[SaleItem]
    replayed: bool = False


class CheckoutCommitter:

    def __init__(self, store: DataStore, context: SessionContext, payment_method: str = "cash"):
        self.store = store
        self.context = context
        self.payment_method = payment_method

    def _replay(self, idempotency_key: str) -> Optional[CheckoutResult]:
        row = self.store.select_one("sales", {
            "cashier_id": self.context.user_id,
            "idempotency_key": idempotency_key,
        })
        if not row:
            return None
        items = [SaleItem.from_row(r) for r in self.store.select("sale_items", {"sale_id": row["id"]})]
        logger.info("Checkout replayed for idempotency key %s (sale %s)", idempotency_key, row["id"])
        return CheckoutResult(sale=Sale.from_row(row, items), items=items, replayed=True)

    @staticmethod
    def _check_stock(lines, products: dict) -> None:
        missing = [line.product_id for line in lines if line.product_id not in products]
        if missing:
            raise CheckoutError("Product not found", {"missing_product_ids": missing})

        insufficient = []
        for line in lines:
            on_hand = int(products[line.product_id]["stock_quantity"] or 0)
            if on_hand < line.quantity:
                insufficient.append({
                    "product_id": line.product_id,
                    "name": line.name,
                    "requested_quantity": line.quantity,
                    "on_hand": on_hand,
                })
        if insufficient:
            raise CheckoutError("Insufficient stock", {"insufficient_items": insufficient})

    def commit(self, cart: Cart, idempotency_key: Optional[str] = None) -> Optional[CheckoutResult]:
        """
        Persist the cart as a completed sale.

        Returns None for an empty cart (nothing is read or written).

        Raises:
            CheckoutError: unknown product or not enough stock
            DataStoreError: the backend failed; all writes were undone
        """
        if cart.is_empty():
            return None

        if idempotency_key:
            replay = self._replay(idempotency_key)
            if replay:
                return replay

        lines = cart.lines()
        total = cart.total()

        with self.store.unit_of_work() as uow:
            products = {
                str(row["id"]): row
                for row in uow.select("products", [in_("id", [line.product_id for line in lines])], for_update=True)
            }
            self._check_stock(lines, products)

            sale_row = uow.insert("sales", {
                "cashier_id": self.context.user_id,
                "total_amount": total,
                "payment_method": self.payment_method,
                "status": "completed",
                "idempotency_key": idempotency_key,
                "created_at": utcnow(),
            })[0]

            item_rows = uow.insert("sale_items", [
                {
                    "sale_id": sale_row["id"],
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "subtotal": line.subtotal,
                }
                for line in lines
            ])

            for line in lines:
                previous_stock = int(products[line.product_id]["stock_quantity"] or 0)
                uow.update(
                    "products",
                    {"stock_quantity": previous_stock - line.quantity},
                    {"id": line.product_id},
                )

        items = [SaleItem.from_row(row) for row in item_rows]
        sale = Sale.from_row(sale_row, items)
        logger.info(
            "Checkout committed sale %s: %d line(s), total %s, cashier %s",
            sale.id, len(items), sale.total_amount, self.context.user_id,
        )
        return CheckoutResult(sale=sale, items=items)
