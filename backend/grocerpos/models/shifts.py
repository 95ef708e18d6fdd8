from __future__ import annotations

from ..extensions import db
from .base import RowMixin, new_id


class Shift(RowMixin, db.Model):
    """
    Cash-drawer session for one cashier.

    LIFECYCLE:
    - open: started, end fields null
    - closed: end_time, ending_cash and total_sales written once
    """
    __tablename__ = "shifts"
    __table_args__ = (
        db.Index("ix_shifts_cashier_status", "cashier_id", "status"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    cashier_id = db.Column(db.String(36), nullable=False, index=True)

    status = db.Column(db.String(16), nullable=False, default="open")

    start_time = db.Column(db.DateTime(timezone=True), nullable=False, index=True)
    end_time = db.Column(db.DateTime(timezone=True), nullable=True)

    starting_cash = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    ending_cash = db.Column(db.Numeric(12, 2), nullable=True)
    total_sales = db.Column(db.Numeric(12, 2), nullable=True)

    notes = db.Column(db.Text, nullable=True)
