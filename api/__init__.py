"""
api - REST API layer.

All route modules register on a single Flask Blueprint
with url_prefix /api.
"""

from flask import Blueprint, request

api_bp = Blueprint("api", __name__, url_prefix="/api")


def json_body() -> dict:
    """Request JSON as a dict; anything else is a validation error."""
    from services.errors import ValidationError

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# Import route modules so their @api_bp decorators execute
from api import auth              # noqa: F401, E402
from api import routes_auth       # noqa: F401, E402
from api import routes_users      # noqa: F401, E402
from api import routes_projects   # noqa: F401, E402
from api import routes_parts      # noqa: F401, E402
from api import routes_orders     # noqa: F401, E402
from api import routes_settings   # noqa: F401, E402
from api import errors            # noqa: F401, E402
