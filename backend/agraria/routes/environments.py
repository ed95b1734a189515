# Overview: Flask API routes for environments operations; parses input and returns JSON responses.

# backend/agraria/routes/environments.py
"""
Training environment routes.

SECURITY:
- Read operations require VIEW_ENVIRONMENTS; teachers only see the
  environments assigned to them
- Write operations require MANAGE_ENVIRONMENTS
"""
from flask import Blueprint, request, jsonify, current_app, g

from ..context import get_services
from ..decorators import require_auth, require_permission
from ..validation import NotFoundError, ValidationError

environments_bp = Blueprint("environments", __name__, url_prefix="/api/environments")


@environments_bp.get("")
@require_auth
@require_permission("VIEW_ENVIRONMENTS")
def list_environments_route():
    services = get_services()
    environments = services.environment_service.list_environments(viewer=g.current_user)
    return jsonify({
        "items": [e.to_dict() for e in environments],
        "count": len(environments),
        "can_manage": services.auth.has_permission("MANAGE_ENVIRONMENTS", g.current_user),
    }), 200


@environments_bp.get("/teachers")
@require_auth
@require_permission("MANAGE_ENVIRONMENTS")
def list_teachers_route():
    """Candidates for the responsible-teacher select, optionally ?kind=animal|vegetal."""
    teachers = get_services().user_service.list_teachers(kind=request.args.get("kind") or None)
    return jsonify({
        "items": [
            {"id": t.id, "name": t.full_name, "role": t.role.value, "kind": t.role.teacher_kind.value}
            for t in teachers
        ],
    }), 200


@environments_bp.get("/<int:environment_id>")
@require_auth
@require_permission("VIEW_ENVIRONMENTS")
def get_environment_route(environment_id: int):
    try:
        env = get_services().environment_service.get_environment(environment_id, viewer=g.current_user)
        return jsonify(env.to_dict()), 200
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404


@environments_bp.post("")
@require_auth
@require_permission("MANAGE_ENVIRONMENTS")
def create_environment_route():
    try:
        env = get_services().environment_service.create_environment(request.get_json(silent=True))
        return jsonify(env.to_dict()), 201
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception:
        current_app.logger.exception("Failed to create environment")
        return jsonify({"error": "Internal server error"}), 500


@environments_bp.put("/<int:environment_id>")
@require_auth
@require_permission("MANAGE_ENVIRONMENTS")
def update_environment_route(environment_id: int):
    try:
        env = get_services().environment_service.update_environment(environment_id, request.get_json(silent=True))
        return jsonify(env.to_dict()), 200
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to update environment")
        return jsonify({"error": "Internal server error"}), 500


@environments_bp.delete("/<int:environment_id>")
@require_auth
@require_permission("MANAGE_ENVIRONMENTS")
def delete_environment_route(environment_id: int):
    try:
        get_services().environment_service.delete_environment(environment_id)
        return jsonify({"message": "Environment deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to delete environment")
        return jsonify({"error": "Internal server error"}), 500
