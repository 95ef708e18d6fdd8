# Overview: Service-layer operations for shifts; opening and closing the cashier's cash drawer.

"""
Shift Ledger

DESIGN PRINCIPLES:
- At most one open shift per cashier
- The only transition is open -> closed; closed shifts are not edited
- total_sales covers every sale created inside [start_time, end_time],
  for all cashiers, both ends inclusive
- Open shifts cannot be deleted
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

from ..datastore import DataStore, gte, lte
from ..records import Shift
from ..time_utils import utcnow
from ..validation import clean_text, parse_money, to_money
from .session_service import SessionContext

logger = logging.getLogger(__name__)


class ShiftError(Exception):
    """Raised for shift management errors."""
    pass


class ShiftNotFoundError(ShiftError):
    pass


class ShiftLedger:

    def __init__(self, store: DataStore, context: SessionContext, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.context = context
        self.clock = clock

    def active(self) -> Optional[Shift]:
        """The cashier's open shift, if any."""
        row = self.store.select_one("shifts", {"cashier_id": self.context.user_id, "status": "open"})
        return Shift.from_row(row) if row else None

    def history(self) -> List[Shift]:
        rows = self.store.select(
            "shifts",
            {"cashier_id": self.context.user_id},
            order_by="start_time",
            descending=True,
        )
        return [Shift.from_row(row) for row in rows]

    def start(self, starting_cash) -> Shift:
        """
        Open a shift stamped with now.

        Raises:
            ValidationError: starting_cash not a non-negative number
            ShiftError: cashier already has an open shift
        """
        amount = parse_money(starting_cash, "starting_cash")

        existing = self.active()
        if existing:
            raise ShiftError(f"Cashier already has an open shift (shift {existing.id})")

        row = self.store.insert("shifts", {
            "cashier_id": self.context.user_id,
            "status": "open",
            "start_time": self.clock(),
            "starting_cash": amount,
        })[0]
        shift = Shift.from_row(row)
        logger.info("Shift %s opened by %s with %s", shift.id, self.context.user_id, amount)
        return shift

    def sales_total(self, start: datetime, end: datetime) -> Decimal:
        rows = self.store.select("sales", [gte("created_at", start), lte("created_at", end)])
        return sum((to_money(row["total_amount"]) for row in rows), Decimal("0.00"))

    def end(self, ending_cash, notes: Optional[str] = None) -> Shift:
        """
        Close the cashier's open shift.

        Raises:
            ValidationError: ending_cash not a non-negative number
            ShiftError: no open shift
        """
        amount = parse_money(ending_cash, "ending_cash")

        shift = self.active()
        if not shift:
            raise ShiftError("No active shift to end")

        now = self.clock()
        total_sales = self.sales_total(shift.start_time, now)

        rows = self.store.update("shifts", {
            "status": "closed",
            "end_time": now,
            "ending_cash": amount,
            "total_sales": total_sales,
            "notes": clean_text(notes),
        }, {"id": shift.id, "status": "open"})
        if not rows:
            raise ShiftError("Shift was closed concurrently")

        closed = Shift.from_row(rows[0])
        logger.info(
            "Shift %s closed by %s: ending cash %s, sales %s",
            closed.id, self.context.user_id, amount, total_sales,
        )
        return closed

    def delete(self, shift_id: str) -> None:
        """
        Remove one of the cashier's closed shifts.

        Raises:
            ShiftNotFoundError: unknown id (or another cashier's shift)
            ShiftError: shift is still open
        """
        row = self.store.select_one("shifts", {"id": shift_id, "cashier_id": self.context.user_id})
        if not row:
            raise ShiftNotFoundError("Shift not found")
        if row["status"] == "open":
            raise ShiftError("Cannot delete an open shift; end it first")

        self.store.delete("shifts", {"id": shift_id})
        logger.info("Shift %s deleted by %s", shift_id, self.context.user_id)
