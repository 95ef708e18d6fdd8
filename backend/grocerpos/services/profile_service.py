# Overview: Service-layer operations for the signed-in user's profile (Settings page).

from __future__ import annotations

from typing import Optional

from ..datastore import DataStore
from ..records import Profile
from ..time_utils import utcnow
from ..validation import ValidationError, clean_text
from .session_service import SessionContext


LANGUAGES = ("en", "id", "es", "fr", "de")
EDITABLE_FIELDS = ("full_name", "phone_number", "address", "language")


def get_profile(store: DataStore, context: SessionContext) -> Profile:
    """Profile row merged with the session email; a blank profile if none exists yet."""
    row = store.select_one("profiles", {"id": context.user_id})
    if row is None:
        return Profile(id=context.user_id, email=context.identity.email)
    return Profile.from_row(row, email=context.identity.email)


def get_role(store: DataStore, user_id: str) -> Optional[str]:
    row = store.select_one("user_roles", {"user_id": user_id})
    return row["role"] if row else None


def update_profile(store: DataStore, context: SessionContext, payload: dict) -> Profile:
    """
    Apply the editable fields present in payload; other keys are ignored.

    Raises ValidationError for an unsupported language.
    """
    values = {}
    for field in EDITABLE_FIELDS:
        if field in payload:
            values[field] = clean_text(payload[field])

    if "language" in values:
        if values["language"] not in LANGUAGES:
            raise ValidationError(f"language must be one of: {', '.join(LANGUAGES)}")

    values["updated_at"] = utcnow()
    if store.select_one("profiles", {"id": context.user_id}):
        rows = store.update("profiles", values, {"id": context.user_id})
    else:
        values.setdefault("language", "en")
        rows = store.insert("profiles", {"id": context.user_id, **values})
    return Profile.from_row(rows[0], email=context.identity.email)
