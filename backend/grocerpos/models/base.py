from __future__ import annotations

import uuid


def new_id() -> str:
    """Client-side UUID so the local schema matches the hosted backend's uuid keys."""
    return str(uuid.uuid4())


class RowMixin:
    """Plain-dict view of a mapped row, in the shape the data store hands to services."""

    def to_row(self) -> dict:
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}
