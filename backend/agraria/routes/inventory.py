# Overview: Flask API routes for inventory operations; parses input and returns JSON responses.

# backend/agraria/routes/inventory.py
"""
Inventory routes.

SECURITY:
- Read operations require VIEW_INVENTORY
- Stock movements require RECORD_MOVEMENTS
- Product catalog changes require MANAGE_PRODUCTS
"""
from flask import Blueprint, request, jsonify, current_app, g

from ..context import get_services
from ..decorators import require_auth, require_permission
from ..models import MOVEMENT_TYPES, PRODUCT_CATEGORIES
from ..services.inventory_service import InventoryError
from ..validation import NotFoundError, ValidationError

inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("/products")
@require_auth
@require_permission("VIEW_INVENTORY")
def list_products_route():
    service = get_services().inventory_service
    products = service.list_products()
    return jsonify({
        "items": [p.to_view_dict() for p in products],
        "count": len(products),
        "summary": service.stock_summary(),
        "categories": PRODUCT_CATEGORIES,
        "movement_types": MOVEMENT_TYPES,
    }), 200


@inventory_bp.get("/products/<int:product_id>")
@require_auth
@require_permission("VIEW_INVENTORY")
def get_product_route(product_id: int):
    try:
        return jsonify(get_services().inventory_service.get_product(product_id).to_view_dict()), 200
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404


@inventory_bp.get("/movements")
@require_auth
@require_permission("VIEW_INVENTORY")
def list_movements_route():
    movements = get_services().inventory_service.list_movements()
    return jsonify({"items": [m.to_dict() for m in movements], "count": len(movements)}), 200


@inventory_bp.post("/movements")
@require_auth
@require_permission("RECORD_MOVEMENTS")
def record_movement_route():
    """
    Body: {"productId", "type": "entrada"|"salida"|"ajuste", "quantity", "reason"}
    """
    try:
        product, movement = get_services().inventory_service.record_movement(
            request.get_json(silent=True), g.current_user
        )
        return jsonify({"product": product.to_view_dict(), "movement": movement.to_dict()}), 201
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except InventoryError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to record stock movement")
        return jsonify({"error": "Internal server error"}), 500


@inventory_bp.post("/products")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def create_product_route():
    try:
        product = get_services().inventory_service.add_product(request.get_json(silent=True), g.current_user)
        return jsonify(product.to_view_dict()), 201
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500


@inventory_bp.patch("/products/<int:product_id>/price")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def update_price_route(product_id: int):
    try:
        product = get_services().inventory_service.update_price(product_id, request.get_json(silent=True))
        return jsonify(product.to_view_dict()), 200
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to update product price")
        return jsonify({"error": "Internal server error"}), 500


@inventory_bp.delete("/products/<int:product_id>")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def delete_product_route(product_id: int):
    try:
        get_services().inventory_service.delete_product(product_id)
        return jsonify({"message": "Product deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify({"error": "Internal server error"}), 500
