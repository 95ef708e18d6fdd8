# Overview: Flask API route for the dashboard landing page.

from flask import Blueprint, jsonify, current_app, g

from ..datastore import DataStoreError
from ..decorators import require_auth, backend_failure
from ..extensions import get_store
from ..services import catalog_service, profile_service
from ..services.shift_service import ShiftLedger


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("")
@require_auth
def dashboard_route():
    """
    Role, store summary and the cashier's active shift.

    role is null when no user_roles row exists for the user.
    """
    try:
        store = get_store()
        context = g.session_context
        products = catalog_service.load(store)
        active = ShiftLedger(store, context).active()

        return jsonify({
            "user": context.identity.to_dict(),
            "role": profile_service.get_role(store, context.user_id),
            "summary": catalog_service.summary(products, current_app.config["LOW_STOCK_THRESHOLD"]),
            "active_shift": active.to_dict() if active else None,
        }), 200

    except DataStoreError as e:
        return backend_failure(e, "load dashboard")
    except Exception:
        current_app.logger.exception("Failed to load dashboard")
        return jsonify({"error": "Internal server error"}), 500
