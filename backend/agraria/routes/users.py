# Overview: Flask API routes for users operations; parses input and returns JSON responses.

# backend/agraria/routes/users.py
"""
User administration routes.

SECURITY: Administrators only (@require_admin). Responses never include
password hashes or security answers.
"""
from flask import Blueprint, request, jsonify, current_app, g

from ..context import get_services
from ..decorators import require_auth, require_admin
from ..services.user_service import UserError
from ..validation import NotFoundError, ValidationError

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_admin
def list_users_route():
    users = get_services().user_service.list_users()
    return jsonify({"items": [u.to_public_dict() for u in users], "count": len(users)}), 200


@users_bp.get("/<int:user_id>")
@require_auth
@require_admin
def get_user_route(user_id: int):
    try:
        user = get_services().user_service.get_user(user_id)
        return jsonify(user.to_public_dict()), 200
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404


@users_bp.post("")
@require_auth
@require_admin
def create_user_route():
    try:
        user = get_services().user_service.create_user(request.get_json(silent=True))
        return jsonify(user.to_public_dict()), 201
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.put("/<int:user_id>")
@require_auth
@require_admin
def update_user_route(user_id: int):
    try:
        user = get_services().user_service.update_user(user_id, request.get_json(silent=True))
        return jsonify(user.to_public_dict()), 200
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to update user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.delete("/<int:user_id>")
@require_auth
@require_admin
def delete_user_route(user_id: int):
    try:
        get_services().user_service.delete_user(user_id, acting_user=g.current_user)
        return jsonify({"message": "User deleted"}), 200
    except UserError as e:
        return jsonify({"error": e.message}), 400
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to delete user")
        return jsonify({"error": "Internal server error"}), 500
