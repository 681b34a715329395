"""
api.routes_users - /api/users admin endpoints.
"""

from flask import jsonify

from api import api_bp, json_body
from api.auth import admin_required
from db import get_session
from services.auth_service import UsersService


@api_bp.route("/users")
@admin_required
def list_users():
    session = get_session()
    try:
        return jsonify([u.to_dict() for u in UsersService.list(session)])
    finally:
        session.close()


@api_bp.route("/users/<user_id>")
@admin_required
def get_user(user_id: str):
    session = get_session()
    try:
        return jsonify(UsersService.get(session, user_id).to_dict())
    finally:
        session.close()


@api_bp.route("/users", methods=["POST"])
@admin_required
def create_user():
    """POST /api/users  {email, password, firstName, lastName, userPermission, enabled?}"""
    data = json_body()
    session = get_session()
    try:
        user = UsersService.create(session, data)
        session.commit()
        return jsonify(user.to_dict()), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/users/<user_id>", methods=["PUT"])
@admin_required
def update_user(user_id: str):
    data = json_body()
    session = get_session()
    try:
        user = UsersService.get(session, user_id)
        UsersService.update(session, user, data)
        session.commit()
        return jsonify(user.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/users/<user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id: str):
    session = get_session()
    try:
        UsersService.delete(session, UsersService.get(session, user_id))
        session.commit()
        return "", 204
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
