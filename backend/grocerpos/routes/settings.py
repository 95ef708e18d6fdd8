# Overview: Flask API routes for the settings page (the signed-in user's profile).

from flask import Blueprint, request, jsonify, current_app, g

from ..datastore import DataStoreError
from ..decorators import require_auth, backend_failure
from ..extensions import get_store
from ..services import profile_service
from ..validation import ValidationError


settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("/profile")
@require_auth
def get_profile_route():
    try:
        profile = profile_service.get_profile(get_store(), g.session_context)
        return jsonify({
            "profile": profile.to_dict(),
            "languages": list(profile_service.LANGUAGES),
        }), 200
    except DataStoreError as e:
        return backend_failure(e, "load profile")
    except Exception:
        current_app.logger.exception("Failed to load profile")
        return jsonify({"error": "Internal server error"}), 500


@settings_bp.put("/profile")
@require_auth
def update_profile_route():
    """
    Update profile fields.

    Request body (any subset):
    {"full_name": str, "phone_number": str, "address": str, "language": "en|id|es|fr|de"}

    email is read-only; unknown keys are ignored.
    """
    try:
        data = request.get_json(silent=True) or {}
        profile = profile_service.update_profile(get_store(), g.session_context, data)
        return jsonify({"profile": profile.to_dict(), "message": "Your profile has been updated"}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except DataStoreError as e:
        return backend_failure(e, "update profile")
    except Exception:
        current_app.logger.exception("Failed to update profile")
        return jsonify({"error": "Internal server error"}), 500
