# Overview: Service-layer operations for session; bearer tokens, request context and the auth-state channel.

"""
Session Token Management Service

Local auth tokens are cryptographically secure, hashed in the data store,
and time-limited. Hosted auth issues its own JWTs; both end up as a
SessionContext that routes pass explicitly into every service.

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before storage (fast, one-way)
- 24-hour absolute timeout (SESSION_ABSOLUTE_TIMEOUT)
- 2-hour idle timeout (SESSION_IDLE_TIMEOUT)
- Revocable on logout
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, List, Optional

from ..datastore import DataStore
from ..time_utils import coerce_datetime, utcnow

logger = logging.getLogger(__name__)


# Configuration constants
SESSION_ABSOLUTE_TIMEOUT = timedelta(hours=24)  # Maximum session length
SESSION_IDLE_TIMEOUT = timedelta(hours=2)        # Activity timeout

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.user_id, "email": self.email}


@dataclass(frozen=True)
class SessionContext:
    """Who is making the request; built once per request by require_auth."""
    identity: Identity
    access_token: str

    @property
    def user_id(self) -> str:
        return self.identity.user_id


def generate_token() -> str:
    """64-character hex string (32 bytes of entropy), sent to the client and never stored."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def create_session(store: DataStore, user_id: str) -> str:
    """Persist a new session for user_id and return the plaintext token."""
    plaintext_token = generate_token()
    now = utcnow()
    store.insert("session_tokens", {
        "user_id": user_id,
        "token_hash": hash_token(plaintext_token),
        "created_at": now,
        "last_used_at": now,
        "expires_at": now + SESSION_ABSOLUTE_TIMEOUT,
        "is_revoked": False,
    })
    return plaintext_token


def _revoke(store: DataStore, session_id: str, reason: str) -> None:
    store.update("session_tokens", {
        "is_revoked": True,
        "revoked_at": utcnow(),
        "revoked_reason": reason,
    }, {"id": session_id})


def validate_session(store: DataStore, token: str) -> Optional[Identity]:
    """
    Identity for a valid token, else None.

    Returns None if the token is unknown, expired, revoked or idle, or if
    the user account is deactivated. Updates last_used_at on success.
    """
    now = utcnow()
    session = store.select_one("session_tokens", {"token_hash": hash_token(token), "is_revoked": False})
    if not session:
        return None

    # Check absolute timeout
    if coerce_datetime(session["expires_at"]) < now:
        return None

    # Check idle timeout
    if now - coerce_datetime(session["last_used_at"]) > SESSION_IDLE_TIMEOUT:
        _revoke(store, session["id"], "Idle timeout")
        return None

    user = store.select_one("users", {"id": session["user_id"]})
    if not user or not user["is_active"]:
        _revoke(store, session["id"], "User account deactivated")
        return None

    store.update("session_tokens", {"last_used_at": now}, {"id": session["id"]})
    return Identity(user_id=str(user["id"]), email=user["email"])


def revoke_session(store: DataStore, token: str, reason: str = "User logout") -> bool:
    """Returns True if a live session was revoked, False if not found."""
    session = store.select_one("session_tokens", {"token_hash": hash_token(token), "is_revoked": False})
    if not session:
        return False
    _revoke(store, session["id"], reason)
    return True


class AuthEvents:
    """
    Explicit auth-state channel.

    Listeners are called with (event, identity). subscribe() returns the
    function that removes the listener again.
    """

    def __init__(self):
        self._listeners: List[Callable[[str, Identity], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[str, Identity], None]) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def publish(self, event: str, identity: Identity) -> None:
        logger.info("Auth event %s for user %s", event, identity.user_id)
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            try:
                callback(event, identity)
            except Exception:
                # A broken listener must not fail the sign-in/sign-out request
                logger.exception("Auth event listener failed for %s", event)
