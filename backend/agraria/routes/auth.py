# Overview: Flask API routes for auth operations; login, logout, session state and password recovery.

# backend/agraria/routes/auth.py
"""
Authentication API routes

Each client keeps its own session record in the signed Flask session cookie
(see session_service); it is the only proof of login. Password recovery
progress shares that cookie, so two browsers can each run their own flow.
"""

from flask import Blueprint, request, jsonify, current_app, g
from flask import session as client_session

from ..context import get_services
from ..decorators import require_auth
from ..permissions import permission_catalog, permissions_for, visible_pages
from ..services.auth_service import InvalidCredentials, MissingFields
from ..services.recovery_service import RecoveryError, RecoveryStep


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

RECOVERY_STATE_KEY = "password_recovery"
LOGOUT_REDIRECT_DELAY_MS = 1000


def _session_payload(user, session) -> dict:
    return {
        "user": user.to_public_dict(),
        "session": session.to_dict() if session is not None else None,
        "permissions": sorted(permissions_for(user.role)),
        "pages": visible_pages(user.role),
    }


@auth_bp.post("/login")
def login_route():
    """
    Authenticate and create the session record.

    Body: {"username", "password", "rememberMe"}

    Responses:
    - 200 user, session, permissions, pages, redirect "dashboard"
    - 400 a field is blank
    - 401 no active user matches
    """
    data = request.get_json(silent=True) or {}
    services = get_services()
    try:
        session = services.auth.login(
            data.get("username"),
            data.get("password"),
            remember_me=data.get("rememberMe") is True,
        )
        user = services.user_service.get_user(session.user_id)
        payload = _session_payload(user, session)
        payload.update({"redirect": "dashboard", "message": "Login successful"})
        return jsonify(payload), 200

    except MissingFields as e:
        return jsonify({"error": e.message}), 400
    except InvalidCredentials as e:
        return jsonify({"error": e.message}), 401
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
def logout_route():
    """Clear the session; the client shows a confirmation, then returns to the entry page."""
    try:
        get_services().auth.logout()
        return jsonify({
            "message": "Session closed successfully",
            "redirect": "index",
            "redirect_delay_ms": LOGOUT_REDIRECT_DELAY_MS,
        }), 200
    except Exception:
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/session")
@require_auth
def session_route():
    """Current user, session, permissions and visible pages."""
    session = get_services().auth.current_session()
    return jsonify(_session_payload(g.current_user, session)), 200


@auth_bp.get("/permissions")
@require_auth
def permissions_route():
    """Permission catalog by category, with the caller's grants marked."""
    catalog = permission_catalog(permissions_for(g.current_user.role))
    return jsonify({"role": g.current_user.role.value, "categories": catalog}), 200


# ===== PASSWORD RECOVERY =====

def _load_recovery():
    return get_services().recovery(client_session.get(RECOVERY_STATE_KEY))


def _store_recovery(flow) -> None:
    if flow.step is RecoveryStep.COMPLETED:
        client_session.pop(RECOVERY_STATE_KEY, None)
    else:
        client_session[RECOVERY_STATE_KEY] = flow.to_dict()


def _recovery_error(flow, e: RecoveryError):
    step = e.step or flow.step
    return jsonify({"error": e.message, "step": step.value}), 400


@auth_bp.get("/recovery")
def recovery_state_route():
    flow = _load_recovery()
    try:
        return jsonify({"step": flow.step.value, "securityQuestion": flow.security_question}), 200
    except RecoveryError:
        # The identified user was removed meanwhile; start over
        client_session.pop(RECOVERY_STATE_KEY, None)
        return jsonify({"step": RecoveryStep.IDENTIFY_USER.value, "securityQuestion": None}), 200


@auth_bp.post("/recovery/start")
def recovery_start_route():
    flow = get_services().recovery()
    _store_recovery(flow)
    return jsonify({"step": flow.step.value}), 200


@auth_bp.delete("/recovery")
def recovery_dismiss_route():
    """Dismissing the dialog discards all progress."""
    client_session.pop(RECOVERY_STATE_KEY, None)
    return jsonify({"step": RecoveryStep.IDENTIFY_USER.value}), 200


@auth_bp.post("/recovery/identify")
def recovery_identify_route():
    data = request.get_json(silent=True) or {}
    flow = _load_recovery()
    try:
        question = flow.identify(data.get("username"))
        _store_recovery(flow)
        return jsonify({"step": flow.step.value, "securityQuestion": question}), 200
    except RecoveryError as e:
        return _recovery_error(flow, e)
    except Exception:
        current_app.logger.exception("Failed to identify user for recovery")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/recovery/answer")
def recovery_answer_route():
    data = request.get_json(silent=True) or {}
    flow = _load_recovery()
    try:
        flow.answer(data.get("answer"))
        _store_recovery(flow)
        return jsonify({"step": flow.step.value}), 200
    except RecoveryError as e:
        return _recovery_error(flow, e)
    except Exception:
        current_app.logger.exception("Failed to check recovery answer")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/recovery/reset")
def recovery_reset_route():
    data = request.get_json(silent=True) or {}
    flow = _load_recovery()
    try:
        flow.set_password(data.get("newPassword"), data.get("confirmPassword"))
        _store_recovery(flow)
        return jsonify({"step": flow.step.value, "message": "Password updated successfully"}), 200
    except RecoveryError as e:
        return _recovery_error(flow, e)
    except Exception:
        current_app.logger.exception("Failed to reset password")
        return jsonify({"error": "Internal server error"}), 500
