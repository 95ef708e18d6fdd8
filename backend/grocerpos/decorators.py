# Overview: Request decorators and shared error responses for API routes.

from functools import wraps
from flask import current_app, request, jsonify, g

from .extensions import get_auth
from .services.session_service import SessionContext


AUTH_REDIRECT = "/auth"


def unauthorized(message: str):
    """401 carrying the page the client should send the user to."""
    return jsonify({"error": message, "redirect": AUTH_REDIRECT}), 401


def backend_failure(exc: Exception, action: str):
    """502 with the backend's own message."""
    current_app.logger.error("Backend failure while trying to %s: %s", action, exc)
    return jsonify({"error": str(exc)}), 502


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def require_auth(f):
    """
    Require a live session and build the request's SessionContext.

    Sets g.session_context, which routes pass into every service call.
    Returns 401 (with a redirect hint) if the Authorization header is
    missing or the token is invalid, expired or revoked.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return unauthorized("Authentication required")

        identity = get_auth().get_identity(token)
        if not identity:
            return unauthorized("Invalid or expired token")

        g.session_context = SessionContext(identity=identity, access_token=token)
        return f(*args, **kwargs)

    return decorated_function
