"""
services.status_pipeline - Part status changes.

designing → material → … → done is a suggested workflow only.  Any
status may be set from any other; the sole check is membership in
schema.statuses.PART_STATUSES.
"""

from __future__ import annotations

import logging

from db.models import Part
from schema.statuses import is_part_status
from services.errors import ValidationError

logger = logging.getLogger(__name__)


def validate_status(status) -> str:
    if not is_part_status(status):
        raise ValidationError("Invalid status")
    return status


def apply_status(part: Part, status) -> Part:
    """Validate and set ``status`` on ``part`` (no flush)."""
    new = validate_status(status)
    if part.status != new:
        logger.debug("Part %s status %s → %s", part.id, part.status, new)
    part.status = new
    return part
