"""
services.parts_service - CRUD operations on Part records.

All session management is the caller's responsibility (open before,
close/commit after).  This keeps the service testable and allows
the caller to batch multiple operations in one transaction.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.models import Part, Project
from schema.numbering import format_part_number, normalize_prefix, parse_part_number
from schema.statuses import (
    DEFAULT_PART_STATUS, DEFAULT_PRIORITY, DONE_STATUS, PART_STATUS_MAP,
    PART_STATUSES, is_part_status, is_priority,
)
from services import hierarchy_service
from services.errors import NotFound, ValidationError
from services.projects_service import ProjectsService
from services.sequence_service import next_part_number
from services.status_pipeline import apply_status

logger = logging.getLogger(__name__)

# Sortable columns for the project part list; anything else → part_number
SORTABLE_COLUMNS = ("part_number", "type", "name", "status")

# Free-text fields editable through update(): request key → column
_TEXT_FIELDS = {
    "notes":          "notes",
    "sourceMaterial": "source_material",
    "quantity":       "quantity",
    "cutLength":      "cut_length",
}
_BOOL_FIELDS = {
    "haveMaterial":   "have_material",
    "drawingCreated": "drawing_created",
}


def part_to_dict(part: Part, project: Project | None = None) -> dict:
    """Serialise a part with its formatted number."""
    project = project or part.project
    d = part.to_dict()
    d["formatted_number"] = format_part_number(
        project.part_number_prefix, part.type, part.part_number,
    )
    return d


class PartsService:

    # ── Create ─────────────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, project_id: str, data: dict) -> Part:
        """
        Create a part or assembly.  Required keys: type, name.
        Optional: parentPartId.  part_number is auto-assigned.
        """
        part_type = hierarchy_service.validate_part_type(data.get("type"))
        name = hierarchy_service.validate_part_name(data.get("name"))

        # Held until commit: serialises numbering within the project
        project = ProjectsService.lock(session, project_id)
        parent = hierarchy_service.resolve_parent(
            session, project, data.get("parentPartId"),
        )

        number = next_part_number(session, project.id, part_type, parent)
        part = Part(
            project_id=project.id,
            part_number=number,
            type=part_type,
            name=name,
            parent_part_id=parent.id if parent else None,
            status=DEFAULT_PART_STATUS,
            notes="",
            source_material="",
            have_material=False,
            quantity="",
            cut_length="",
            priority=DEFAULT_PRIORITY,
            drawing_created=False,
        )
        session.add(part)
        session.flush()
        logger.info(
            "Created %s %s in project %s",
            part_type,
            format_part_number(project.part_number_prefix, part_type, number),
            project.id,
        )
        return part

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, part_id: str) -> Part:
        part = session.get(Part, part_id)
        if part is None:
            raise NotFound("Part not found")
        return part

    @staticmethod
    def list_for_project(
        session: Session, project_id: str, sort: str = "part_number"
    ) -> list[Part]:
        if sort not in SORTABLE_COLUMNS:
            sort = "part_number"
        return (
            session.query(Part)
            .filter(Part.project_id == project_id)
            .order_by(getattr(Part, sort), Part.part_number)
            .all()
        )

    @staticmethod
    def find_by_number(session: Session, project: Project, text: str) -> list[Part]:
        """
        Parts of ``project`` whose display number is ``text``.  Children of
        different parents can share a number, so this returns a list.
        """
        parsed = parse_part_number(text)
        if parsed is None:
            raise ValidationError("Invalid part number")
        if parsed["prefix"] != normalize_prefix(project.part_number_prefix):
            return []
        return (
            session.query(Part)
            .filter(
                Part.project_id == project.id,
                Part.type == parsed["type"],
                Part.part_number == parsed["part_number"],
            )
            .order_by(Part.created_at)
            .all()
        )

    @staticmethod
    def dashboard(session: Session, project: Project, status: str | None = None) -> dict:
        """
        Unfinished parts of a project grouped by status.  An unknown
        ``status`` filter is ignored rather than rejected.
        """
        q = session.query(Part).filter(
            Part.project_id == project.id,
            Part.status != DONE_STATUS,
        )
        if status and is_part_status(status):
            q = q.filter(Part.status == status)
        parts = q.order_by(Part.priority, Part.part_number).all()

        by_status: dict[str, list[dict]] = {s: [] for s in PART_STATUSES}
        for p in parts:
            by_status[p.status].append(part_to_dict(p, project))

        return {
            "project": {
                "name": project.name,
                "part_number_prefix": project.part_number_prefix,
            },
            "partsByStatus": by_status,
            "statusMap": PART_STATUS_MAP,
            "totalParts": len(parts),
        }

    # ── Update ─────────────────────────────────────────────────────────

    @staticmethod
    def update(session: Session, part: Part, data: dict) -> Part:
        """
        Edit name, status, priority and the advisory material fields.
        type, part_number and parent are fixed at creation.
        """
        if data.get("name"):
            part.name = hierarchy_service.validate_part_name(data["name"])
        if data.get("status"):
            apply_status(part, data["status"])

        for key, attr in _TEXT_FIELDS.items():
            if key in data and data[key] is not None:
                setattr(part, attr, str(data[key]))
        for key, attr in _BOOL_FIELDS.items():
            if isinstance(data.get(key), bool):
                setattr(part, attr, data[key])

        if data.get("priority") is not None:
            if not is_priority(data["priority"]):
                raise ValidationError("Invalid priority")
            part.priority = data["priority"]

        session.flush()
        return part

    @staticmethod
    def set_status(session: Session, part: Part, status) -> Part:
        apply_status(part, status)
        session.flush()
        return part

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete(session: Session, part: Part) -> None:
        hierarchy_service.ensure_deletable(session, part)
        session.delete(part)
        session.flush()
        logger.info("Deleted part %s", part.id)
