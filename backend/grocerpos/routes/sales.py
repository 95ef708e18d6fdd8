# Overview: Flask API routes for sales history.

from flask import Blueprint, jsonify, current_app

from ..datastore import DataStoreError
from ..decorators import require_auth, backend_failure
from ..extensions import get_store
from ..services import sales_service
from ..services.sales_service import SaleNotFoundError


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
@require_auth
def list_sales_route():
    try:
        sales = sales_service.list_sales(get_store())
        return jsonify({"sales": [s.to_dict() for s in sales]}), 200
    except DataStoreError as e:
        return backend_failure(e, "list sales")
    except Exception:
        current_app.logger.exception("Failed to list sales")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/<sale_id>")
@require_auth
def get_sale_route(sale_id: str):
    try:
        sale = sales_service.get_sale(get_store(), sale_id)
        return jsonify({"sale": sale.to_dict(include_items=True)}), 200
    except SaleNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except DataStoreError as e:
        return backend_failure(e, "load sale")
    except Exception:
        current_app.logger.exception("Failed to load sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.delete("/<sale_id>")
@require_auth
def delete_sale_route(sale_id: str):
    """Delete a sale and its items. Stock is not restored."""
    try:
        sales_service.delete_sale(get_store(), sale_id)
        return jsonify({"message": "Sale deleted"}), 200
    except SaleNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except DataStoreError as e:
        return backend_failure(e, "delete sale")
    except Exception:
        current_app.logger.exception("Failed to delete sale")
        return jsonify({"error": "Internal server error"}), 500
