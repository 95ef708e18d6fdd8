# grocerpos/datastore/interface.py
"""
Generic CRUD surface every page talks to.

Rows travel as plain dicts keyed by column name. Filters are either a
dict (equality on every key) or a sequence of Filter objects built with
eq/gte/lte/in_.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union


class DataStoreError(Exception):
    """Raised when the backend rejects or fails a request. Message is the backend's own."""


@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any


OPERATORS = ("eq", "gte", "lte", "in")


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def in_(column: str, values: Iterable[Any]) -> Filter:
    return Filter(column, "in", list(values))


Filters = Union[Mapping[str, Any], Sequence[Filter], None]
Row = Dict[str, Any]


def as_filters(filters: Filters) -> List[Filter]:
    """Normalize the accepted filter shapes to a list of Filter."""
    if not filters:
        return []
    if isinstance(filters, Mapping):
        return [
            in_(key, value) if isinstance(value, (list, tuple, set)) else eq(key, value)
            for key, value in filters.items()
        ]
    normalized = list(filters)
    for f in normalized:
        if f.op not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {f.op}")
    return normalized


class DataStore(ABC):
    """Abstract data store for the different backends."""

    name = "abstract"

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Filters = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        for_update: bool = False,
    ) -> List[Row]:
        """Select rows from a table."""

    @abstractmethod
    def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        """Insert one or more rows, returning them with generated columns."""

    @abstractmethod
    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        """Update matching rows, returning them."""

    @abstractmethod
    def delete(self, table: str, filters: Filters) -> int:
        """Delete matching rows, returning the count."""

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager["DataStore"]:
        """
        Scope in which several writes persist together or not at all.

        The yielded object exposes the same select/insert/update/delete API.
        """

    def ping(self) -> None:
        """Cheap round trip used by the health check."""
        self.select("products", limit=1)

    def select_one(self, table: str, filters: Filters = None, *, for_update: bool = False) -> Optional[Row]:
        rows = self.select(table, filters, limit=1, for_update=for_update)
        return rows[0] if rows else None
