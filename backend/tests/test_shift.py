"""
Shift ledger tests.

Verifies:
- Cash amounts are validated before anything is written
- One open shift per cashier
- Closing sums every sale inside [start_time, end_time], both ends inclusive
- Open shifts cannot be deleted
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from grocerpos.services.session_service import Identity, SessionContext
from grocerpos.services.shift_service import ShiftLedger, ShiftError, ShiftNotFoundError
from grocerpos.validation import ValidationError


T0 = datetime(2026, 3, 2, 8, 0, 0)
T1 = datetime(2026, 3, 2, 16, 0, 0)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _sale(store, created_at: datetime, total: str, cashier_id: str = "someone-else"):
    store.insert("sales", {
        "cashier_id": cashier_id,
        "total_amount": Decimal(total),
        "payment_method": "cash",
        "status": "completed",
        "created_at": created_at,
    })


class TestShiftStart:

    @pytest.mark.parametrize("amount", [-5, "-0.01", "abc", None, "", "NaN", "Infinity", True])
    def test_invalid_starting_cash_writes_nothing(self, store, context, amount):
        with pytest.raises(ValidationError):
            ShiftLedger(store, context).start(amount)
        assert store.select("shifts") == []

    def test_start_opens_shift_stamped_with_now(self, store, context):
        shift = ShiftLedger(store, context, clock=Clock(T0)).start("150000")

        assert shift.status == "open"
        assert shift.start_time == T0
        assert shift.starting_cash == Decimal("150000.00")
        assert shift.end_time is None
        assert shift.cashier_id == context.user_id

    def test_second_open_shift_rejected(self, store, context):
        ledger = ShiftLedger(store, context, clock=Clock(T0))
        ledger.start(0)

        with pytest.raises(ShiftError):
            ledger.start(10)
        assert len(store.select("shifts")) == 1

    def test_other_cashier_can_open_own_shift(self, store, context):
        ShiftLedger(store, context, clock=Clock(T0)).start(0)
        other = SessionContext(identity=Identity(user_id="cashier-2"), access_token="x")

        ShiftLedger(store, other, clock=Clock(T0)).start(0)

        assert len(store.select("shifts", {"status": "open"})) == 2


class TestShiftEnd:

    def test_total_sales_window_is_inclusive(self, store, context):
        clock = Clock(T0)
        ledger = ShiftLedger(store, context, clock=clock)
        ledger.start("100000")

        _sale(store, T0 - timedelta(seconds=1), "1.00")       # before start
        _sale(store, T0, "10.00")                             # at start
        _sale(store, T0 + timedelta(hours=2), "20.00", context.user_id)
        _sale(store, T1, "30.00")                             # at end
        _sale(store, T1 + timedelta(seconds=1), "1000.00")    # after end

        clock.now = T1
        shift = ledger.end("160000", notes="  counted twice  ")

        assert shift.status == "closed"
        assert shift.end_time == T1
        assert shift.total_sales == Decimal("60.00")
        assert shift.ending_cash == Decimal("160000.00")
        assert shift.notes == "counted twice"
        assert ledger.active() is None

    def test_end_without_open_shift(self, store, context):
        with pytest.raises(ShiftError):
            ShiftLedger(store, context).end(0)

    def test_invalid_ending_cash_leaves_shift_open(self, store, context):
        ledger = ShiftLedger(store, context, clock=Clock(T0))
        ledger.start(0)

        with pytest.raises(ValidationError):
            ledger.end("-1")

        assert ledger.active() is not None

    def test_closed_shift_cannot_be_closed_again(self, store, context):
        clock = Clock(T0)
        ledger = ShiftLedger(store, context, clock=clock)
        ledger.start(0)
        clock.now = T1
        ledger.end(0)

        with pytest.raises(ShiftError):
            ledger.end(0)


class TestShiftHistoryAndDelete:

    def test_history_newest_first(self, store, context):
        clock = Clock(T0)
        ledger = ShiftLedger(store, context, clock=clock)
        for day in range(3):
            clock.now = T0 + timedelta(days=day)
            ledger.start(0)
            clock.now = T1 + timedelta(days=day)
            ledger.end(0)

        starts = [s.start_time for s in ledger.history()]
        assert starts == sorted(starts, reverse=True)
        assert len(starts) == 3

    def test_open_shift_cannot_be_deleted(self, store, context):
        ledger = ShiftLedger(store, context, clock=Clock(T0))
        shift = ledger.start(0)

        with pytest.raises(ShiftError):
            ledger.delete(shift.id)
        assert len(store.select("shifts")) == 1

    def test_closed_shift_deleted(self, store, context):
        clock = Clock(T0)
        ledger = ShiftLedger(store, context, clock=clock)
        shift = ledger.start(0)
        clock.now = T1
        ledger.end(0)

        ledger.delete(shift.id)

        assert store.select("shifts") == []

    def test_unknown_shift(self, store, context):
        with pytest.raises(ShiftNotFoundError):
            ShiftLedger(store, context).delete("nope")
