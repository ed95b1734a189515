# Overview: Flask API routes for activities operations; parses input and returns JSON responses.

# backend/agraria/routes/activities.py
from flask import Blueprint, request, jsonify, current_app, g

from ..context import get_services
from ..decorators import require_auth, require_permission
from ..validation import NotFoundError, ValidationError

activities_bp = Blueprint("activities", __name__, url_prefix="/api/activities")


@activities_bp.get("")
@require_auth
@require_permission("VIEW_ACTIVITIES")
def list_activities_route():
    """All activities, newest first."""
    activities = get_services().activity_service.list_activities()
    return jsonify({"items": [a.to_dict() for a in activities], "count": len(activities)}), 200


@activities_bp.get("/<int:activity_id>")
@require_auth
@require_permission("VIEW_ACTIVITIES")
def get_activity_route(activity_id: int):
    try:
        return jsonify(get_services().activity_service.get_activity(activity_id).to_dict()), 200
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404


@activities_bp.post("")
@require_auth
@require_permission("REGISTER_ACTIVITIES")
def create_activity_route():
    try:
        activity = get_services().activity_service.create_activity(request.get_json(silent=True), g.current_user)
        return jsonify(activity.to_dict()), 201
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception:
        current_app.logger.exception("Failed to register activity")
        return jsonify({"error": "Internal server error"}), 500


@activities_bp.put("/<int:activity_id>")
@require_auth
@require_permission("REGISTER_ACTIVITIES")
def update_activity_route(activity_id: int):
    try:
        activity = get_services().activity_service.update_activity(activity_id, request.get_json(silent=True))
        return jsonify(activity.to_dict()), 200
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to update activity")
        return jsonify({"error": "Internal server error"}), 500


@activities_bp.delete("/<int:activity_id>")
@require_auth
@require_permission("REGISTER_ACTIVITIES")
def delete_activity_route(activity_id: int):
    try:
        get_services().activity_service.delete_activity(activity_id)
        return jsonify({"message": "Activity deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except Exception:
        current_app.logger.exception("Failed to delete activity")
        return jsonify({"error": "Internal server error"}), 500
