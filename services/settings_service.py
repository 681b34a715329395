"""
services.settings_service - The single application-settings row.

Callers fetch the row once per request and pass the resulting value
along; nothing caches it between requests.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import Settings


def get_settings(session: Session) -> Settings:
    """Return the settings row, creating the default one if missing."""
    row = session.get(Settings, 1)
    if row is None:
        row = Settings(id=1, hide_unused_fields=False)
        session.add(row)
        session.flush()
    return row


def update_settings(session: Session, data: dict) -> Settings:
    row = get_settings(session)
    if isinstance(data.get("hideUnusedFields"), bool):
        row.hide_unused_fields = data["hideUnusedFields"]
    session.flush()
    return row
