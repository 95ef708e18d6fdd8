# Overview: Data store backed by the local Flask-SQLAlchemy schema.

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Union

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import TABLES
from .interface import DataStore, DataStoreError, Filters, Row, as_filters


class SqlStore(DataStore):
    """
    DataStore over db.session.

    Outside a unit of work every write commits immediately. Inside one,
    writes are flushed and the whole scope commits or rolls back together.
    """

    name = "sql"

    def __init__(self):
        # Unit-of-work nesting is tracked per thread, like db.session itself
        self._local = threading.local()

    @property
    def _depth(self) -> int:
        return getattr(self._local, "depth", 0)

    @_depth.setter
    def _depth(self, value: int) -> None:
        self._local.depth = value

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise DataStoreError(f'relation "{table}" does not exist')

    def _query(self, table: str, filters: Filters):
        model = self._model(table)
        query = db.session.query(model)
        for f in as_filters(filters):
            column = getattr(model, f.column, None)
            if column is None:
                raise DataStoreError(f'column {table}.{f.column} does not exist')
            if f.op == "eq":
                query = query.filter(column.is_(None) if f.value is None else column == f.value)
            elif f.op == "gte":
                query = query.filter(column >= f.value)
            elif f.op == "lte":
                query = query.filter(column <= f.value)
            elif f.op == "in":
                query = query.filter(column.in_(f.value))
        return model, query

    def _finish(self) -> None:
        if self._depth:
            db.session.flush()
        else:
            db.session.commit()

    def _fail(self, exc: SQLAlchemyError) -> DataStoreError:
        if not self._depth:
            db.session.rollback()
        message = str(getattr(exc, "orig", None) or exc)
        return DataStoreError(message)

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
        model, query = self._query(table, filters)
        if order_by:
            column = getattr(model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())
        if limit:
            query = query.limit(limit)
        if for_update:
            # NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
            query = query.with_for_update()
        try:
            return [obj.to_row() for obj in query.all()]
        except SQLAlchemyError as exc:
            raise self._fail(exc)

    def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        model = self._model(table)
        if isinstance(rows, dict):
            rows = [rows]
        try:
            objects = [model(**row) for row in rows]
            db.session.add_all(objects)
            db.session.flush()
            result = [obj.to_row() for obj in objects]
            self._finish()
            return result
        except SQLAlchemyError as exc:
            raise self._fail(exc)

    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        _, query = self._query(table, filters)
        try:
            objects = query.all()
            for obj in objects:
                for key, value in values.items():
                    setattr(obj, key, value)
            db.session.flush()
            result = [obj.to_row() for obj in objects]
            self._finish()
            return result
        except SQLAlchemyError as exc:
            raise self._fail(exc)

    def delete(self, table: str, filters: Filters) -> int:
        _, query = self._query(table, filters)
        try:
            objects = query.all()
            for obj in objects:
                db.session.delete(obj)
            self._finish()
            return len(objects)
        except SQLAlchemyError as exc:
            raise self._fail(exc)

    @contextmanager
    def unit_of_work(self) -> Iterator["SqlStore"]:
        """One database transaction; nested scopes join the outer one."""
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if not self._depth:
                db.session.rollback()
            raise
        self._depth -= 1
        if not self._depth:
            try:
                db.session.commit()
            except SQLAlchemyError as exc:
                db.session.rollback()
                raise DataStoreError(str(getattr(exc, "orig", None) or exc))
