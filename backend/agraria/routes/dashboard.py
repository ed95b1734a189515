# Overview: Flask API route for the dashboard; header info, navigation and stats.

from flask import Blueprint, jsonify, current_app, g

from ..context import get_services
from ..decorators import require_auth, require_permission

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("")
@require_auth
@require_permission("VIEW_DASHBOARD")
def dashboard_route():
    try:
        return jsonify(get_services().dashboard_service.overview(g.current_user)), 200
    except Exception:
        current_app.logger.exception("Failed to build dashboard")
        return jsonify({"error": "Internal server error"}), 500
