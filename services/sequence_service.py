"""
services.sequence_service - part_number allocation.

Isolated so the API "create part" flow and any bulk tooling share the
same formula:

    assembly            max(assembly numbers in project) + 100, else 100
    part, no parent     max(root part numbers in project) + 1,  else 1
    part, with parent   max(sibling part numbers) + 1,  else parent + 1

Only the current maximum is consulted, never a count, so numbers freed
by deletions are not reused.  The read is not atomic with the caller's
insert; PartsService.create holds the project row lock across both.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

import config
from db.models import Part


def next_part_number(
    session: Session,
    project_id: str,
    part_type: str,
    parent: Optional[Part] = None,
) -> int:
    """
    Return the next part_number for a new part or assembly.

    ``parent`` is the resolved parent row, or None for a root part.  A
    parent is ignored for assemblies, which share one project-wide
    sequence.
    """
    if part_type == "assembly":
        db_max = session.query(func.max(Part.part_number)).filter(
            Part.project_id == project_id,
            Part.type == "assembly",
        ).scalar()
        return (db_max + config.ASSEMBLY_STEP) if db_max is not None \
            else config.ASSEMBLY_STEP

    if part_type != "part":
        raise ValueError(f"unknown part type: {part_type!r}")

    if parent is None:
        db_max = session.query(func.max(Part.part_number)).filter(
            Part.project_id == project_id,
            Part.type == "part",
            Part.parent_part_id.is_(None),
        ).scalar()
        return (db_max + 1) if db_max is not None else 1

    db_max = session.query(func.max(Part.part_number)).filter(
        Part.type == "part",
        Part.parent_part_id == parent.id,
    ).scalar()
    if db_max is not None:
        return db_max + 1
    return parent.part_number + 1
