from __future__ import annotations

from ..extensions import db
from .base import RowMixin, new_id


class Sale(RowMixin, db.Model):
    """
    Completed sale.

    total_amount is the sum of its items' subtotals at checkout time.
    idempotency_key lets a retried checkout find the sale it already created;
    keys are unique per cashier.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_created_at", "created_at"),
        db.UniqueConstraint("cashier_id", "idempotency_key", name="uq_sales_cashier_idempotency_key"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    cashier_id = db.Column(db.String(36), nullable=True, index=True)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False)
    payment_method = db.Column(db.String(32), nullable=False, default="cash")
    status = db.Column(db.String(16), nullable=False, default="completed")
    idempotency_key = db.Column(db.String(128), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())


class SaleItem(RowMixin, db.Model):
    """Line item on a sale; unit_price is a copy taken at sale time."""
    __tablename__ = "sale_items"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    sale_id = db.Column(db.String(36), db.ForeignKey("sales.id"), nullable=False, index=True)
    product_id = db.Column(db.String(36), db.ForeignKey("products.id"), nullable=False, index=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    subtotal = db.Column(db.Numeric(12, 2), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
