"""
api.routes_settings - /api/settings (single global row).
"""

from flask import jsonify

from api import api_bp, json_body
from api.auth import admin_required
from db import get_session
from services.settings_service import get_settings, update_settings


@api_bp.route("/settings")
def read_settings():
    session = get_session()
    try:
        row = get_settings(session)
        session.commit()
        return jsonify(row.to_dict())
    finally:
        session.close()


@api_bp.route("/settings", methods=["PUT"])
@admin_required
def write_settings():
    """PUT /api/settings  {hideUnusedFields}"""
    data = json_body()
    session = get_session()
    try:
        row = update_settings(session, data)
        session.commit()
        return jsonify(row.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
