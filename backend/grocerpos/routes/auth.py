# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/grocerpos/routes/auth.py
"""
Authentication API routes

Sign-up and login return a bearer token; every other /api route expects
it in the Authorization header. Sign-in and sign-out are published on the
app's AuthEvents channel.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, unauthorized, backend_failure, bearer_token
from ..extensions import get_auth, get_auth_events
from ..datastore import DataStoreError
from ..services.auth_service import AuthenticationError, AuthBackendError
from ..services.cart_service import clear_cart
from ..services.session_service import SIGNED_IN, SIGNED_OUT
from ..validation import ValidationError, ConflictError


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/sign-up")
def sign_up_route():
    """
    Create an account.

    Request body: {"email": str, "password": str, "full_name": str (optional)}

    Returns the new session when the backend signs the user in right away;
    token is null when the backend requires email confirmation first.
    """
    try:
        data = request.get_json(silent=True) or {}
        session = get_auth().sign_up(data.get("email"), data.get("password"), data.get("full_name"))

        if session.access_token:
            get_auth_events().publish(SIGNED_IN, session.identity)

        return jsonify({
            **session.to_dict(),
            "message": "Sign-up successful" if session.access_token else "Check your email to confirm your account",
        }), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except (AuthBackendError, DataStoreError) as e:
        return backend_failure(e, "sign up")
    except Exception:
        current_app.logger.exception("Failed to sign up user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/login")
def login_route():
    """
    Authenticate and create a session token.

    Token must be included in the Authorization header for protected routes.
    """
    try:
        data = request.get_json(silent=True) or {}
        session = get_auth().sign_in(data.get("email"), data.get("password"))

        get_auth_events().publish(SIGNED_IN, session.identity)

        return jsonify({**session.to_dict(), "message": "Login successful"}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except AuthenticationError as e:
        return unauthorized(str(e))
    except (AuthBackendError, DataStoreError) as e:
        return backend_failure(e, "log in")
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
def logout_route():
    """
    Revoke the session token and clear the cart.

    Expects Authorization header: Bearer <token>
    """
    try:
        token = bearer_token()
        if not token:
            return unauthorized("Authorization header required")

        auth = get_auth()
        identity = auth.get_identity(token)
        if not identity or not auth.sign_out(token):
            return unauthorized("Invalid or expired token")

        clear_cart()
        get_auth_events().publish(SIGNED_OUT, identity)

        return jsonify({"message": "Logout successful", "redirect": "/auth"}), 200

    except (AuthBackendError, DataStoreError) as e:
        return backend_failure(e, "log out")
    except Exception:
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/session")
@require_auth
def session_route():
    """Current identity; 401 with a redirect hint when there is none."""
    return jsonify({"user": g.session_context.identity.to_dict()}), 200
