# grocerpos/datastore/supabase_store.py
"""
Data store backed by the hosted Supabase project (PostgREST over HTTP).

PostgREST offers no multi-request transaction, so unit_of_work() keeps a
compensation log: every write records its inverse and, if the scope fails,
the inverses run newest-first before the original error propagates.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from functools import partial
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, Union

from supabase import Client, PostgrestAPIError, create_client

from ..time_utils import to_wire
from .interface import DataStore, DataStoreError, Filters, Row, as_filters

logger = logging.getLogger(__name__)


def _encode(value: Any) -> Any:
    """JSON-safe value for the REST API."""
    if isinstance(value, datetime):
        return to_wire(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def _encode_row(row: Row) -> Row:
    return {key: _encode(value) for key, value in row.items()}


class SupabaseStore(DataStore):
    """Supabase table API behind the DataStore interface."""

    name = "supabase"

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_config(cls, url: str, key: str) -> "SupabaseStore":
        if not url or not key:
            raise DataStoreError("SUPABASE_URL and SUPABASE_KEY must be configured")
        return cls(create_client(url, key))

    def _apply_filters(self, query, filters: Filters):
        for f in as_filters(filters):
            value = _encode(f.value)
            if f.op == "eq":
                query = query.is_(f.column, "null") if value is None else query.eq(f.column, value)
            elif f.op == "gte":
                query = query.gte(f.column, value)
            elif f.op == "lte":
                query = query.lte(f.column, value)
            elif f.op == "in":
                query = query.in_(f.column, value)
        return query

    def _execute(self, query) -> List[Row]:
        try:
            result = query.execute()
        except PostgrestAPIError as exc:
            raise DataStoreError(exc.message or str(exc))
        return result.data or []

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
        # for_update has no PostgREST equivalent; reads are plain snapshots
        query = self._apply_filters(self.client.table(table).select("*"), filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit:
            query = query.limit(limit)
        return self._execute(query)

    def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        if isinstance(rows, dict):
            rows = [rows]
        payload = [_encode_row(row) for row in rows]
        return self._execute(self.client.table(table).insert(payload))

    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        query = self._apply_filters(self.client.table(table).update(_encode_row(values)), filters)
        return self._execute(query)

    def delete(self, table: str, filters: Filters) -> int:
        query = self._apply_filters(self.client.table(table).delete(), filters)
        return len(self._execute(query))

    def ping(self) -> None:
        self.select("products", limit=1)

    @contextmanager
    def unit_of_work(self) -> Iterator["CompensatingUnitOfWork"]:
        uow = CompensatingUnitOfWork(self)
        try:
            yield uow
        except BaseException:
            uow.compensate()
            raise


class CompensatingUnitOfWork:
    """Write-through proxy that remembers how to undo each write."""

    def __init__(self, store: SupabaseStore):
        self._store = store
        self._undo: List[Tuple[str, Callable[[], Any]]] = []

    def select(self, table: str, filters: Filters = None, **kwargs) -> List[Row]:
        return self._store.select(table, filters, **kwargs)

    def select_one(self, table: str, filters: Filters = None, **kwargs) -> Optional[Row]:
        return self._store.select_one(table, filters, **kwargs)

    def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        inserted = self._store.insert(table, rows)
        ids = [row["id"] for row in inserted]
        if ids:
            self._undo.append((f"delete {len(ids)} {table} row(s)", partial(self._store.delete, table, {"id": ids})))
        return inserted

    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        before = self._store.select(table, filters)
        updated = self._store.update(table, values, filters)
        for row in before:
            previous = {key: row.get(key) for key in values}
            self._undo.append((f"restore {table} {row['id']}", partial(self._store.update, table, previous, {"id": row["id"]})))
        return updated

    def delete(self, table: str, filters: Filters) -> int:
        before = self._store.select(table, filters)
        count = self._store.delete(table, filters)
        if before:
            self._undo.append((f"re-insert {len(before)} {table} row(s)", partial(self._store.insert, table, before)))
        return count

    @contextmanager
    def unit_of_work(self) -> Iterator["CompensatingUnitOfWork"]:
        # Nested scopes share the outer compensation log
        yield self

    def compensate(self) -> None:
        if not self._undo:
            return
        logger.warning("Rolling back %d write(s) with compensating actions", len(self._undo))
        for label, action in reversed(self._undo):
            try:
                action()
            except Exception:
                # The original failure is re-raised by the caller; a failed inverse
                # leaves the backend inconsistent and needs operator attention.
                logger.exception("Compensating action failed: %s", label)
        self._undo.clear()
