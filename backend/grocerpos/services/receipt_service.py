# Overview: Plain-text receipt for a cart snapshot.

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from ..time_utils import to_utc_z


RECEIPT_WIDTH = 40


def _money(currency: str, amount: Decimal) -> str:
    return f"{currency} {amount:,.2f}"


def _row(left: str, right: str, width: int) -> str:
    space = width - len(right) - 1
    if len(left) > space:
        left = left[:max(space - 1, 0)] + "~"
    return f"{left:<{space}} {right}"


def render_receipt(
    lines: Iterable,
    cashier_name: str,
    timestamp: datetime,
    store_name: str,
    currency: str = "Rp",
    width: int = RECEIPT_WIDTH,
) -> str:
    """
    Fixed-width receipt text.

    `lines` are cart lines (anything with name, quantity, unit_price and
    subtotal). Identical input always renders identical output.
    """
    rule = "-" * width
    out = [
        store_name.center(width).rstrip(),
        rule,
        f"Date: {to_utc_z(timestamp)}",
        f"Cashier: {cashier_name}",
        rule,
    ]

    total = Decimal("0.00")
    for line in lines:
        out.append(_row(line.name, _money(currency, line.subtotal), width))
        out.append(f"  {line.quantity} x {_money(currency, line.unit_price)}")
        total += line.subtotal

    out.append(rule)
    out.append(_row("TOTAL", _money(currency, total), width))
    out.append(rule)
    out.append("Thank you for shopping!".center(width).rstrip())
    return "\n".join(out) + "\n"
