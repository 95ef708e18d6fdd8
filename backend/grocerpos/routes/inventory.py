# Overview: Flask API routes for inventory operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..datastore import DataStoreError
from ..decorators import require_auth, backend_failure
from ..extensions import get_store
from ..services import catalog_service
from ..validation import ValidationError, ConflictError


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("/products")
@require_auth
def list_products_route():
    """
    Inventory table.

    Query params:
    - search: name or SKU substring (case-insensitive)
    - category: exact category, or "all"
    - stock: all | low | out
    """
    try:
        threshold = current_app.config["LOW_STOCK_THRESHOLD"]
        products = catalog_service.load(get_store())
        filtered = catalog_service.filter_products(
            products,
            search=request.args.get("search"),
            category=request.args.get("category"),
            stock=request.args.get("stock", "all"),
            low_threshold=threshold,
        )
        return jsonify({
            "products": [p.to_dict() for p in filtered],
            "categories": catalog_service.categories(products),
            "summary": catalog_service.summary(products, threshold),
            "low_stock_threshold": threshold,
        }), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except DataStoreError as e:
        return backend_failure(e, "load inventory")
    except Exception:
        current_app.logger.exception("Failed to load inventory")
        return jsonify({"error": "Internal server error"}), 500


@inventory_bp.post("/products")
@require_auth
def add_product_route():
    """
    Add a product.

    Request body:
    {
        "sku": "SKU-001",           // required, unique
        "name": "Rice 5kg",         // required
        "price": "65000.00",        // required, > 0
        "stock_quantity": 20,       // optional, default 0
        "description": "...",       // optional
        "category": "Staples"       // optional
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        product = catalog_service.add_product(get_store(), data)
        return jsonify({"product": product.to_dict()}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except DataStoreError as e:
        return backend_failure(e, "add product")
    except Exception:
        current_app.logger.exception("Failed to add product")
        return jsonify({"error": "Internal server error"}), 500
