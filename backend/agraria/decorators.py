# Overview: Request and permission decorators for API routes.

from functools import wraps
from flask import jsonify, g

from .context import get_services
from .permissions import validate_permission_code
from .services.auth_service import AccessDenied, NotAuthenticated


def _is_authenticated() -> bool:
    return getattr(g, "current_user", None) is not None


def require_auth(f):
    """
    Require a valid session for the calling client.

    Sets g.current_user to the logged-in User (re-read from the roster, so
    role and active flag are current).

    Returns 401 with redirect "index" when there is no session, or when it
    expired, is malformed, or its user is gone or inactive. The session is
    cleared in each of those cases.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            user = get_services().auth.require_auth()
        except NotAuthenticated as e:
            return jsonify({"error": e.message, "redirect": "index"}), 401

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the administrator role. Use below @require_auth."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _is_authenticated():
            return jsonify({"error": "Authentication required", "redirect": "index"}), 401

        if not get_services().auth.is_admin(g.current_user):
            return jsonify({
                "error": "Access denied. Administrator permissions are required.",
                "redirect": "dashboard",
            }), 403

        return f(*args, **kwargs)

    return decorated_function


def require_permission(permission_code: str):
    """
    Require a permission from the role table. Use below @require_auth.

    Unknown codes fail at import time rather than denying every request.
    """
    if not validate_permission_code(permission_code):
        raise ValueError(f"Unknown permission code: {permission_code}")

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required", "redirect": "index"}), 401

            try:
                _check(permission_code)
            except AccessDenied as e:
                return jsonify({
                    "error": "Permission denied",
                    "required_permission": permission_code,
                    "message": e.message,
                    "redirect": "dashboard",
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def _check(permission_code: str) -> None:
    if not get_services().auth.has_permission(permission_code, g.current_user):
        raise AccessDenied(f"Access denied. Missing permission: {permission_code}")
