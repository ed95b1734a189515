# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/agraria/routes/sales.py
from flask import Blueprint, request, jsonify, current_app, g

from ..context import get_services
from ..decorators import require_auth, require_permission
from ..models import PAYMENT_METHODS
from ..services.sales_service import SaleError
from ..validation import NotFoundError, ValidationError

sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
@require_auth
@require_permission("VIEW_SALES")
def list_sales_route():
    """Registered sales, newest first. Optional ?limit=N."""
    limit = request.args.get("limit", type=int)
    services = get_services()
    sales = services.sales_service.list_sales(limit=limit)
    return jsonify({
        "items": [s.to_dict() for s in sales],
        "count": len(sales),
        "can_register": services.auth.has_permission("REGISTER_SALES", g.current_user),
    }), 200


@sales_bp.get("/products")
@require_auth
@require_permission("VIEW_SALES")
def sale_products_route():
    """Products that can be sold (in stock), with their default price."""
    products = get_services().sales_service.available_products()
    return jsonify({
        "items": [p.to_view_dict() for p in products],
        "payment_methods": PAYMENT_METHODS,
    }), 200


@sales_bp.get("/<int:sale_id>")
@require_auth
@require_permission("VIEW_SALES")
def get_sale_route(sale_id: int):
    try:
        return jsonify(get_services().sales_service.get_sale(sale_id).to_dict()), 200
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404


@sales_bp.post("")
@require_auth
@require_permission("REGISTER_SALES")
def register_sale_route():
    """
    Register a sale and withdraw its stock.

    Body: {"saleDate", "customerName", "paymentMethod", "observations",
           "items": [{"productId", "quantity", "unitPrice"?}]}
    """
    try:
        sale = get_services().sales_service.register_sale(request.get_json(silent=True), g.current_user)
        return jsonify(sale.to_dict()), 201
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except SaleError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to register sale")
        return jsonify({"error": "Internal server error"}), 500
