# Overview: Point-of-sale cart; kept per browser session in the signed Flask cookie.

"""
Cart Accumulator

Cart structure stored in the Flask session under key 'cart':
[
    {"product_id": str, "name": str, "sku": str,
     "unit_price": str,   <- string so the Decimal survives JSON
     "quantity": int},
    ...
]

Line subtotals and the order total are always derived, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from flask import session

from ..records import Product
from ..validation import to_money


CART_KEY = "cart"


@dataclass
class CartItem:
    product_id: str
    name: str
    sku: str
    unit_price: Decimal
    quantity: int = 1

    @property
    def subtotal(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "sku": self.sku,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "subtotal": str(self.subtotal),
        }


class Cart:
    """Product id -> line, in the order products were first added."""

    def __init__(self, items: Optional[List[CartItem]] = None):
        self._items: Dict[str, CartItem] = {}
        for item in items or []:
            self._items[item.product_id] = item

    def add(self, product: Product) -> CartItem:
        """One more unit of product; new lines start at quantity 1."""
        item = self._items.get(product.id)
        if item is None:
            item = CartItem(
                product_id=product.id,
                name=product.name,
                sku=product.sku,
                unit_price=product.price,
            )
            self._items[product.id] = item
        else:
            item.quantity += 1
        return item

    def set_quantity(self, product_id: str, delta: int) -> Optional[CartItem]:
        """Adjust a line by delta, never below 1. Unknown ids are ignored."""
        item = self._items.get(product_id)
        if item is None:
            return None
        item.quantity = max(1, item.quantity + delta)
        return item

    def remove(self, product_id: str) -> None:
        self._items.pop(product_id, None)

    def clear(self) -> None:
        self._items.clear()

    def is_empty(self) -> bool:
        return not self._items

    def lines(self) -> List[CartItem]:
        return list(self._items.values())

    def total(self) -> Decimal:
        return sum((item.subtotal for item in self._items.values()), Decimal("0.00"))

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.lines()],
            "total": str(self.total()),
            "item_count": sum(item.quantity for item in self.lines()),
        }

    # Session (de)serialization

    def to_state(self) -> list:
        return [
            {
                "product_id": item.product_id,
                "name": item.name,
                "sku": item.sku,
                "unit_price": str(item.unit_price),
                "quantity": item.quantity,
            }
            for item in self.lines()
        ]

    @classmethod
    def from_state(cls, state) -> "Cart":
        items = []
        for entry in state or []:
            items.append(CartItem(
                product_id=entry["product_id"],
                name=entry["name"],
                sku=entry["sku"],
                unit_price=Decimal(entry["unit_price"]),
                quantity=max(1, int(entry["quantity"])),
            ))
        return cls(items)


def load_cart() -> Cart:
    """Return the current session's cart (may be empty)."""
    return Cart.from_state(session.get(CART_KEY))


def save_cart(cart: Cart) -> None:
    session[CART_KEY] = cart.to_state()
    session.modified = True


def clear_cart() -> None:
    """Empty the cart after a completed sale or sign-out."""
    session.pop(CART_KEY, None)
    session.modified = True
