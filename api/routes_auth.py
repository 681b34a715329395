"""
api.routes_auth - /api/health and /api/auth/* endpoints.
"""

from datetime import datetime, timezone

from flask import current_app, g, jsonify

from api import api_bp, json_body
from db import get_session
from services.auth_service import UsersService, issue_token


def _user_json(user) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "permission": user.permission,
    }


@api_bp.route("/health")
def health():
    return jsonify({
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


@api_bp.route("/auth/login", methods=["POST"])
def login():
    """POST /api/auth/login  {email, password} → {token, user}"""
    data = json_body()
    session = get_session()
    try:
        user = UsersService.authenticate(session, data.get("email"), data.get("password"))
        token = issue_token(current_app.config["SECRET_KEY"], user)
        return jsonify({"token": token, "user": _user_json(user)})
    finally:
        session.close()


@api_bp.route("/auth/register", methods=["POST"])
def register():
    """POST /api/auth/register  {email, password, firstName, lastName}"""
    data = json_body()
    session = get_session()
    try:
        user = UsersService.register(session, data)
        session.commit()
        body = _user_json(user)
        del body["permission"]
        return jsonify({
            "message": "Registration successful. Your account is pending approval.",
            "user": body,
        }), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/auth/me")
def me():
    session = get_session()
    try:
        user = UsersService.get(session, g.identity.user_id)
        return jsonify(_user_json(user))
    finally:
        session.close()


@api_bp.route("/auth/change-password", methods=["POST"])
def change_password():
    """POST /api/auth/change-password  {oldPassword, newPassword}"""
    data = json_body()
    session = get_session()
    try:
        user = UsersService.get(session, g.identity.user_id)
        UsersService.change_password(
            session, user, data.get("oldPassword"), data.get("newPassword"),
        )
        session.commit()
        return jsonify({"message": "Password changed successfully"})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
