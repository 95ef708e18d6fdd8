# Overview: Typed views over data store rows, shared by services and routes.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from .time_utils import coerce_datetime, to_utc_z
from .validation import to_money


@dataclass(frozen=True)
class Product:
    id: str
    sku: str
    name: str
    price: Decimal
    stock_quantity: int
    description: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "Product":
        return cls(
            id=str(row["id"]),
            sku=row["sku"],
            name=row["name"],
            price=to_money(row.get("price")),
            stock_quantity=int(row.get("stock_quantity") or 0),
            description=row.get("description"),
            category=row.get("category"),
            created_at=coerce_datetime(row.get("created_at")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "stock_quantity": self.stock_quantity,
            "category": self.category,
            "created_at": to_utc_z(self.created_at),
        }


@dataclass(frozen=True)
class SaleItem:
    id: str
    sale_id: str
    product_id: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    # Filled in by the sales history view
    product_name: Optional[str] = None
    product_sku: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict, product: Optional[dict] = None) -> "SaleItem":
        return cls(
            id=str(row["id"]),
            sale_id=str(row["sale_id"]),
            product_id=str(row["product_id"]),
            quantity=int(row["quantity"]),
            unit_price=to_money(row.get("unit_price")),
            subtotal=to_money(row.get("subtotal")),
            product_name=product.get("name") if product else None,
            product_sku=product.get("sku") if product else None,
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "sale_id": self.sale_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "subtotal": str(self.subtotal),
        }
        if self.product_name is not None or self.product_sku is not None:
            data["product"] = {"name": self.product_name, "sku": self.product_sku}
        return data


@dataclass(frozen=True)
class Sale:
    id: str
    total_amount: Decimal
    payment_method: str
    status: str
    cashier_id: Optional[str] = None
    idempotency_key: Optional[str] = None
    created_at: Optional[datetime] = None
    items: tuple = field(default_factory=tuple)

    @classmethod
    def from_row(cls, row: dict, items=()) -> "Sale":
        return cls(
            id=str(row["id"]),
            total_amount=to_money(row.get("total_amount")),
            payment_method=row.get("payment_method") or "cash",
            status=row.get("status") or "completed",
            cashier_id=row.get("cashier_id"),
            idempotency_key=row.get("idempotency_key"),
            created_at=coerce_datetime(row.get("created_at")),
            items=tuple(items),
        )

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": self.id,
            "cashier_id": self.cashier_id,
            "total_amount": str(self.total_amount),
            "payment_method": self.payment_method,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


@dataclass(frozen=True)
class Shift:
    id: str
    cashier_id: str
    status: str
    start_time: datetime
    starting_cash: Decimal
    end_time: Optional[datetime] = None
    ending_cash: Optional[Decimal] = None
    total_sales: Optional[Decimal] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == "open"

    @classmethod
    def from_row(cls, row: dict) -> "Shift":
        return cls(
            id=str(row["id"]),
            cashier_id=str(row["cashier_id"]),
            status=row.get("status") or "open",
            start_time=coerce_datetime(row["start_time"]),
            starting_cash=to_money(row.get("starting_cash")),
            end_time=coerce_datetime(row.get("end_time")),
            ending_cash=_optional_money(row.get("ending_cash")),
            total_sales=_optional_money(row.get("total_sales")),
            notes=row.get("notes"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cashier_id": self.cashier_id,
            "status": self.status,
            "start_time": to_utc_z(self.start_time),
            "end_time": to_utc_z(self.end_time),
            "starting_cash": str(self.starting_cash),
            "ending_cash": _money_str(self.ending_cash),
            "total_sales": _money_str(self.total_sales),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class Profile:
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    language: str = "en"

    @classmethod
    def from_row(cls, row: dict, email: Optional[str] = None) -> "Profile":
        return cls(
            id=str(row["id"]),
            email=email,
            full_name=row.get("full_name"),
            phone_number=row.get("phone_number"),
            address=row.get("address"),
            language=row.get("language") or "en",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "phone_number": self.phone_number,
            "address": self.address,
            "language": self.language,
        }


def _optional_money(value: Any) -> Optional[Decimal]:
    return None if value is None else to_money(value)


def _money_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)
