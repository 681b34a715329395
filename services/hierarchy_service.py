"""
services.hierarchy_service - Parent/child rules for parts.

The hierarchy is a tree of parent pointers with no state of its own.
Creation checks the type, the name and the parent reference; deletion
is refused while any part still points at the target.  Descendants are
never removed here; callers delete children first, bottom-up.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from db.models import Part, Project
from schema.statuses import PART_TYPES
from services.errors import StructuralError, ValidationError

logger = logging.getLogger(__name__)


def validate_part_type(part_type) -> str:
    if not part_type:
        raise ValidationError("Type and name required")
    if part_type not in PART_TYPES:
        raise ValidationError("Invalid part type")
    return part_type


def validate_part_name(name) -> str:
    name = str(name or "").strip()
    if not name:
        raise ValidationError("Type and name required")
    if len(name) > 255:
        raise ValidationError("Name exceeds 255 characters")
    return name


def resolve_parent(
    session: Session, project: Project, parent_part_id
) -> Optional[Part]:
    """
    Look up the requested parent.  Empty means root.  A parent that does
    not exist, or lives in another project, is rejected.
    """
    if not parent_part_id:
        return None
    parent = session.get(Part, str(parent_part_id))
    if parent is None:
        raise ValidationError("Parent part not found")
    if parent.project_id != project.id:
        raise ValidationError("Parent part belongs to a different project")
    return parent


def has_children(session: Session, part: Part) -> bool:
    return session.query(Part.id).filter(
        Part.parent_part_id == part.id
    ).first() is not None


def children_of(session: Session, part: Part) -> list[Part]:
    return (
        session.query(Part)
        .filter(Part.parent_part_id == part.id)
        .order_by(Part.type, Part.part_number)
        .all()
    )


def ensure_deletable(session: Session, part: Part) -> None:
    """Raise StructuralError if ``part`` still has children."""
    if has_children(session, part):
        logger.warning("Refused to delete part %s: it has children", part.id)
        raise StructuralError("Can't delete assembly with existing children")
