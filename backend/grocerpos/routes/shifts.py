# Overview: Flask API routes for shift operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app, g

from ..datastore import DataStoreError
from ..decorators import require_auth, backend_failure
from ..extensions import get_store
from ..services.shift_service import ShiftLedger, ShiftError, ShiftNotFoundError
from ..validation import ValidationError


shifts_bp = Blueprint("shifts", __name__, url_prefix="/api/shifts")


def _ledger() -> ShiftLedger:
    return ShiftLedger(get_store(), g.session_context)


@shifts_bp.get("")
@require_auth
def list_shifts_route():
    """The cashier's active shift (or null) and shift history, newest first."""
    try:
        ledger = _ledger()
        active = ledger.active()
        return jsonify({
            "active_shift": active.to_dict() if active else None,
            "shifts": [s.to_dict() for s in ledger.history()],
        }), 200
    except DataStoreError as e:
        return backend_failure(e, "list shifts")
    except Exception:
        current_app.logger.exception("Failed to list shifts")
        return jsonify({"error": "Internal server error"}), 500


@shifts_bp.post("/start")
@require_auth
def start_shift_route():
    """
    Open a shift.

    Request body: {"starting_cash": "100000.00"}

    Returns 409 if the cashier already has an open shift.
    """
    try:
        data = request.get_json(silent=True) or {}
        shift = _ledger().start(data.get("starting_cash"))
        return jsonify({"shift": shift.to_dict()}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ShiftError as e:
        return jsonify({"error": str(e)}), 409
    except DataStoreError as e:
        return backend_failure(e, "start shift")
    except Exception:
        current_app.logger.exception("Failed to start shift")
        return jsonify({"error": "Internal server error"}), 500


@shifts_bp.post("/end")
@require_auth
def end_shift_route():
    """
    Close the active shift.

    Request body:
    {
        "ending_cash": "250000.00",
        "notes": "Drawer counted twice"  (optional)
    }

    total_sales is computed from every sale inside the shift's window.
    """
    try:
        data = request.get_json(silent=True) or {}
        shift = _ledger().end(data.get("ending_cash"), data.get("notes"))
        return jsonify({"shift": shift.to_dict()}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ShiftError as e:
        return jsonify({"error": str(e)}), 409
    except DataStoreError as e:
        return backend_failure(e, "end shift")
    except Exception:
        current_app.logger.exception("Failed to end shift")
        return jsonify({"error": "Internal server error"}), 500


@shifts_bp.delete("/<shift_id>")
@require_auth
def delete_shift_route(shift_id: str):
    try:
        _ledger().delete(shift_id)
        return jsonify({"message": "Shift deleted"}), 200

    except ShiftNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ShiftError as e:
        return jsonify({"error": str(e)}), 409
    except DataStoreError as e:
        return backend_failure(e, "delete shift")
    except Exception:
        current_app.logger.exception("Failed to delete shift")
        return jsonify({"error": "Internal server error"}), 500
