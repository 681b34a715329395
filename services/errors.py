"""
services.errors - Exceptions raised by the service layer.

Each carries the HTTP status the API layer should answer with, so
route handlers never translate errors by hand.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(ServiceError):
    """Missing or invalid field."""
    status_code = 400


class StructuralError(ServiceError):
    """Deletion blocked by dependent rows (children, order items)."""
    status_code = 400


class AuthError(ServiceError):
    status_code = 401


class PermissionDenied(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409
