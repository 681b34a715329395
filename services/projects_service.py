"""
services.projects_service - CRUD operations on Project records.

All session management is the caller's responsibility (open before,
close/commit after).
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.models import Project
from schema.numbering import normalize_prefix, validate_prefix
from services.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)


class ProjectsService:

    @staticmethod
    def list(session: Session) -> list[Project]:
        return session.query(Project).order_by(Project.name).all()

    @staticmethod
    def get(session: Session, project_id: str) -> Project:
        project = session.get(Project, project_id)
        if project is None:
            raise NotFound("Project not found")
        return project

    @staticmethod
    def lock(session: Session, project_id: str) -> Project:
        """
        Fetch the project row with FOR UPDATE so allocations scoped to
        this project are serialised until the transaction ends.  SQLite
        ignores the clause and serialises writers on its own.
        """
        project = (
            session.query(Project)
            .filter(Project.id == project_id)
            .with_for_update()
            .one_or_none()
        )
        if project is None:
            raise NotFound("Project not found")
        return project

    @staticmethod
    def create(session: Session, data: dict) -> Project:
        name = str(data.get("name") or "").strip()
        prefix = data.get("partNumberPrefix")
        if not name or not prefix:
            raise ValidationError("Name and part number prefix required")
        err = validate_prefix(prefix)
        if err:
            raise ValidationError(err)

        project = Project(
            name=name,
            part_number_prefix=normalize_prefix(prefix),
            hide_dashboards=False,
        )
        session.add(project)
        session.flush()
        logger.info("Created project %s (%s)", project.name, project.part_number_prefix)
        return project

    @staticmethod
    def update(session: Session, project: Project, data: dict) -> Project:
        if data.get("name"):
            project.name = str(data["name"]).strip()
        if data.get("partNumberPrefix"):
            err = validate_prefix(data["partNumberPrefix"])
            if err:
                raise ValidationError(err)
            project.part_number_prefix = normalize_prefix(data["partNumberPrefix"])
        if isinstance(data.get("hideDashboards"), bool):
            project.hide_dashboards = data["hideDashboards"]
        session.flush()
        return project

    @staticmethod
    def delete(session: Session, project: Project) -> None:
        """Cascades to the project's parts, orders and order items."""
        session.delete(project)
        session.flush()
        logger.info("Deleted project %s", project.id)
