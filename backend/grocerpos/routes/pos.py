# Overview: Flask API routes for the point-of-sale page; catalog lookup, cart edits and checkout.

# backend/grocerpos/routes/pos.py
"""
POS routes

The cart lives in the signed session cookie, so clients must keep cookies
between requests. Checkout accepts an optional Idempotency-Key header;
retrying with the same key returns the original sale.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..datastore import DataStoreError
from ..decorators import require_auth, backend_failure
from ..extensions import get_store
from ..services import catalog_service
from ..services.cart_service import load_cart, save_cart, clear_cart
from ..services.checkout_service import CheckoutCommitter, CheckoutError
from ..services.profile_service import get_profile
from ..services.receipt_service import render_receipt
from ..time_utils import utcnow
from ..validation import ValidationError


pos_bp = Blueprint("pos", __name__, url_prefix="/api/pos")


def _cashier_name(context) -> str:
    profile = get_profile(get_store(), context)
    return profile.full_name or context.identity.email or context.user_id


def _receipt(lines, timestamp, cashier_name: str) -> str:
    return render_receipt(
        lines,
        cashier_name=cashier_name,
        timestamp=timestamp,
        store_name=current_app.config["STORE_NAME"],
        currency=current_app.config["CURRENCY_SYMBOL"],
    )


@pos_bp.get("/products")
@require_auth
def products_route():
    """
    Product grid.

    Query params:
    - search: name or SKU substring (case-insensitive)
    - category: exact category, or "all"
    """
    try:
        products = catalog_service.load(get_store())
        filtered = catalog_service.filter_products(
            products,
            search=request.args.get("search"),
            category=request.args.get("category"),
        )
        return jsonify({
            "products": [p.to_dict() for p in filtered],
            "categories": catalog_service.categories(products),
        }), 200

    except DataStoreError as e:
        return backend_failure(e, "load products")
    except Exception:
        current_app.logger.exception("Failed to load POS products")
        return jsonify({"error": "Internal server error"}), 500


@pos_bp.get("/cart")
@require_auth
def get_cart_route():
    return jsonify({"cart": load_cart().to_dict()}), 200


@pos_bp.post("/cart/items")
@require_auth
def add_cart_item_route():
    """
    Add one unit of a product.

    Request body: {"product_id": str}
    """
    try:
        data = request.get_json(silent=True) or {}
        product_id = data.get("product_id")
        if not product_id:
            return jsonify({"error": "product_id required"}), 400

        product = catalog_service.get_product(get_store(), str(product_id))
        if not product:
            return jsonify({"error": "Product not found"}), 404

        cart = load_cart()
        cart.add(product)
        save_cart(cart)
        return jsonify({"cart": cart.to_dict()}), 200

    except DataStoreError as e:
        return backend_failure(e, "add cart item")
    except Exception:
        current_app.logger.exception("Failed to add cart item")
        return jsonify({"error": "Internal server error"}), 500


@pos_bp.patch("/cart/items/<product_id>")
@require_auth
def update_cart_item_route(product_id: str):
    """
    Adjust a line's quantity.

    Request body: {"delta": int}  (quantity never drops below 1)
    """
    data = request.get_json(silent=True) or {}
    delta = data.get("delta")
    if isinstance(delta, bool) or not isinstance(delta, int):
        return jsonify({"error": "delta must be an integer"}), 400

    cart = load_cart()
    cart.set_quantity(product_id, delta)
    save_cart(cart)
    return jsonify({"cart": cart.to_dict()}), 200


@pos_bp.delete("/cart/items/<product_id>")
@require_auth
def remove_cart_item_route(product_id: str):
    cart = load_cart()
    cart.remove(product_id)
    save_cart(cart)
    return jsonify({"cart": cart.to_dict()}), 200


@pos_bp.delete("/cart")
@require_auth
def clear_cart_route():
    clear_cart()
    return jsonify({"cart": load_cart().to_dict()}), 200


@pos_bp.get("/receipt")
@require_auth
def receipt_route():
    """Plain-text preview of the receipt for the current cart."""
    try:
        cart = load_cart()
        if cart.is_empty():
            return jsonify({"error": "Cart is empty"}), 400
        text = _receipt(cart.lines(), utcnow(), _cashier_name(g.session_context))
        return current_app.response_class(text, mimetype="text/plain")

    except DataStoreError as e:
        return backend_failure(e, "render receipt")
    except Exception:
        current_app.logger.exception("Failed to render receipt")
        return jsonify({"error": "Internal server error"}), 500


@pos_bp.post("/checkout")
@require_auth
def checkout_route():
    """
    Commit the cart as a completed sale.

    Headers:
    - Idempotency-Key (optional): repeat-safe checkout

    Returns 201 with the sale and its receipt, 200 when an earlier sale is
    replayed (receipt is null), 400 for an empty cart and 409 when stock is
    insufficient. The cart is cleared whenever a sale exists for it.
    """
    try:
        cart = load_cart()
        if cart.is_empty():
            return jsonify({"error": "Cart is empty"}), 400

        # Everything the receipt needs is read before anything is written
        cashier_name = _cashier_name(g.session_context)

        committer = CheckoutCommitter(
            get_store(),
            g.session_context,
            payment_method=current_app.config["DEFAULT_PAYMENT_METHOD"],
        )
        result = committer.commit(cart, idempotency_key=request.headers.get("Idempotency-Key"))
        clear_cart()

        receipt = None
        if not result.replayed:
            receipt = _receipt(cart.lines(), result.sale.created_at, cashier_name)

        return jsonify({
            "sale": result.sale.to_dict(include_items=True),
            "receipt": receipt,
            "replayed": result.replayed,
        }), 200 if result.replayed else 201

    except CheckoutError as e:
        return jsonify({"error": str(e), "details": e.details}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except DataStoreError as e:
        return backend_failure(e, "checkout")
    except Exception:
        current_app.logger.exception("Failed to checkout")
        return jsonify({"error": "Internal server error"}), 500
