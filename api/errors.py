"""
api.errors - JSON error handlers for the API blueprint.
"""

import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from api import api_bp
from services.errors import ServiceError

logger = logging.getLogger(__name__)


@api_bp.errorhandler(ServiceError)
def api_service_error(exc: ServiceError):
    return jsonify(exc.to_dict()), exc.status_code


@api_bp.errorhandler(SQLAlchemyError)
def api_storage_error(exc: SQLAlchemyError):
    logger.exception("Storage error: %s", exc)
    return jsonify({"error": "storage error"}), 500


@api_bp.errorhandler(404)
def api_not_found(_e):
    return jsonify({"error": "not found"}), 404


@api_bp.errorhandler(400)
def api_bad_request(_e):
    return jsonify({"error": "bad request"}), 400


@api_bp.errorhandler(405)
def api_method_not_allowed(_e):
    return jsonify({"error": "method not allowed"}), 405


@api_bp.errorhandler(500)
def api_server_error(_e):
    return jsonify({"error": "internal server error"}), 500
