# Overview: Service-layer operations for auth; sign-up, sign-in and sign-out against the configured identity backend.

"""
Authentication Service

Two gateways share one interface:
- LocalAuth: users in the data store, bcrypt password hashes and hashed
  bearer tokens (see session_service.py)
- SupabaseAuth: the hosted auth service; its access token (JWT) is the
  bearer token

SECURITY NOTES (local):
- Passwords hashed with bcrypt (cost factor 12)
- Minimum 8 characters required
- Must contain uppercase, lowercase, digit, and special char
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import bcrypt
from supabase import AuthError, Client, create_client

from ..datastore import DataStore
from ..time_utils import utcnow
from ..validation import ConflictError, ValidationError, clean_text
from . import session_service
from .session_service import Identity

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthenticationError(Exception):
    """Invalid credentials or session (401)."""
    pass


class AuthBackendError(Exception):
    """The identity backend failed or rejected the request for a non-credential reason (502)."""
    pass


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


@dataclass(frozen=True)
class AuthSession:
    access_token: Optional[str]
    identity: Identity

    def to_dict(self) -> dict:
        return {"token": self.access_token, "user": self.identity.to_dict()}


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character (!@#$%^&*(),.'":{}|<>)

    Raises PasswordValidationError if requirements not met.
    """
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[!@#$%^&*(),.'\":{}|<>]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """bcrypt hash (cost 12) of a password that passed the strength check."""
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe check; malformed hashes simply fail."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def _credentials(email, password) -> tuple:
    email = (clean_text(email) or "").lower()
    if not email or not password:
        raise ValidationError("email and password required")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("email is not valid")
    return email, password


class AuthGateway(ABC):
    """Identity backend used by the auth routes and require_auth."""

    name = "abstract"

    @abstractmethod
    def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> AuthSession:
        """Create an account. access_token may be None when the backend requires confirmation."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthSession:
        """Raises AuthenticationError on bad credentials."""

    @abstractmethod
    def get_identity(self, token: str) -> Optional[Identity]:
        """Identity for a live token, else None."""

    @abstractmethod
    def sign_out(self, token: str) -> bool:
        """End the session behind token."""

    def ping(self) -> None:
        """Reachability check for /health."""


class LocalAuth(AuthGateway):
    """Users, profiles and session tokens in the application's own data store."""

    name = "local"

    def __init__(self, store: DataStore):
        self.store = store

    def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> AuthSession:
        email, password = _credentials(email, password)
        validate_password_strength(password)

        if self.store.select_one("users", {"email": email}):
            raise ConflictError("A user with this email already exists")

        password_hash = hash_password(password)

        with self.store.unit_of_work() as uow:
            user = uow.insert("users", {
                "email": email,
                "password_hash": password_hash,
                "is_active": True,
                "created_at": utcnow(),
            })[0]
            uow.insert("profiles", {
                "id": user["id"],
                "full_name": clean_text(full_name),
                "language": "en",
                "updated_at": utcnow(),
            })
            uow.insert("user_roles", {"user_id": user["id"], "role": "cashier"})

        logger.info("Created user %s", user["id"])
        identity = Identity(user_id=str(user["id"]), email=email)
        return AuthSession(session_service.create_session(self.store, identity.user_id), identity)

    def sign_in(self, email: str, password: str) -> AuthSession:
        email, password = _credentials(email, password)
        user = self.store.select_one("users", {"email": email, "is_active": True})
        if not user or not verify_password(password, user["password_hash"]):
            raise AuthenticationError("Invalid login credentials")

        identity = Identity(user_id=str(user["id"]), email=user["email"])
        return AuthSession(session_service.create_session(self.store, identity.user_id), identity)

    def get_identity(self, token: str) -> Optional[Identity]:
        return session_service.validate_session(self.store, token)

    def sign_out(self, token: str) -> bool:
        return session_service.revoke_session(self.store, token, reason="User logout")

    def ping(self) -> None:
        self.store.select("users", limit=1)


class SupabaseAuth(AuthGateway):
    """
    Hosted auth service.

    Uses its own client: signing in stores a session on the client, which
    must not leak into the client used for table access.
    """

    name = "supabase"

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_config(cls, url: str, key: str) -> "SupabaseAuth":
        if not url or not key:
            raise AuthBackendError("SUPABASE_URL and SUPABASE_KEY must be configured")
        return cls(create_client(url, key))

    @staticmethod
    def _identity(user) -> Identity:
        return Identity(user_id=str(user.id), email=getattr(user, "email", None))

    def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> AuthSession:
        email, password = _credentials(email, password)
        try:
            response = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"full_name": clean_text(full_name)}},
            })
        except AuthError as exc:
            raise AuthBackendError(exc.message)
        if response.user is None:
            raise AuthBackendError("Sign-up did not return a user")
        token = response.session.access_token if response.session else None
        return AuthSession(token, self._identity(response.user))

    def sign_in(self, email: str, password: str) -> AuthSession:
        email, password = _credentials(email, password)
        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as exc:
            if getattr(exc, "status", None) in (400, 401):
                raise AuthenticationError(exc.message)
            raise AuthBackendError(exc.message)
        if response.session is None or response.user is None:
            raise AuthenticationError("Invalid login credentials")
        return AuthSession(response.session.access_token, self._identity(response.user))

    def get_identity(self, token: str) -> Optional[Identity]:
        try:
            response = self.client.auth.get_user(token)
        except AuthError as exc:
            if getattr(exc, "status", None) in (401, 403):
                return None
            raise AuthBackendError(exc.message)
        if response is None or response.user is None:
            return None
        return self._identity(response.user)

    def sign_out(self, token: str) -> bool:
        try:
            self.client.auth.admin.sign_out(token)
        except AuthError as exc:
            if getattr(exc, "status", None) in (401, 403, 404):
                return False
            raise AuthBackendError(exc.message)
        return True

    def ping(self) -> None:
        """Smallest admin call the auth server answers; needs the service-role key, as sign_out does."""
        try:
            self.client.auth.admin.list_users(page=1, per_page=1)
        except AuthError as exc:
            raise AuthBackendError(exc.message)


def build_auth(config, store: DataStore) -> AuthGateway:
    """Create the gateway selected by AUTH_BACKEND."""
    backend = config.get("AUTH_BACKEND", "local")
    if backend == "local":
        return LocalAuth(store)
    if backend == "supabase":
        return SupabaseAuth.from_config(config.get("SUPABASE_URL"), config.get("SUPABASE_KEY"))
    raise ValueError(f"Unknown AUTH_BACKEND: {backend}")
