"""
api.auth - Bearer-token gate and permission decorators.

Every request except login/register/health must carry
``Authorization: Bearer <token>``.  The verified Identity is stored on
flask.g for the route to use; routes never re-authenticate.
"""

from functools import wraps

from flask import current_app, g, jsonify, request

from api import api_bp
from services.auth_service import verify_token
from services.errors import AuthError, PermissionDenied

PUBLIC_ENDPOINTS = {"api.login", "api.register", "api.health"}


@api_bp.before_request
def _require_token():
    if request.method == "OPTIONS" or request.endpoint in PUBLIC_ENDPOINTS:
        return None

    header = request.headers.get("Authorization", "")
    token = header[7:].strip() if header.startswith("Bearer ") else ""
    if not token:
        return jsonify({"error": "Unauthorized"}), 401
    try:
        g.identity = verify_token(current_app.config["SECRET_KEY"], token)
    except AuthError as exc:
        return jsonify(exc.to_dict()), exc.status_code
    return None


def editor_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not g.identity.can_edit:
            raise PermissionDenied("Editor access required")
        return fn(*args, **kwargs)
    return wrapper


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not g.identity.is_admin:
            raise PermissionDenied("Admin access required")
        return fn(*args, **kwargs)
    return wrapper
