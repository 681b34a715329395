"""
api.routes_projects - /api/projects CRUD endpoints.
"""

from flask import jsonify

from api import api_bp, json_body
from api.auth import editor_required
from db import get_session
from services.projects_service import ProjectsService


@api_bp.route("/projects")
def list_projects():
    session = get_session()
    try:
        return jsonify([p.to_dict() for p in ProjectsService.list(session)])
    finally:
        session.close()


@api_bp.route("/projects/<project_id>")
def get_project(project_id: str):
    session = get_session()
    try:
        return jsonify(ProjectsService.get(session, project_id).to_dict())
    finally:
        session.close()


@api_bp.route("/projects", methods=["POST"])
@editor_required
def create_project():
    """POST /api/projects  {name, partNumberPrefix}"""
    data = json_body()
    session = get_session()
    try:
        project = ProjectsService.create(session, data)
        session.commit()
        return jsonify(project.to_dict()), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects/<project_id>", methods=["PUT"])
@editor_required
def update_project(project_id: str):
    """PUT /api/projects/{id}  {name?, partNumberPrefix?, hideDashboards?}"""
    data = json_body()
    session = get_session()
    try:
        project = ProjectsService.get(session, project_id)
        ProjectsService.update(session, project, data)
        session.commit()
        return jsonify(project.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects/<project_id>", methods=["DELETE"])
@editor_required
def delete_project(project_id: str):
    """DELETE /api/projects/{id}  (cascades to parts, orders and items)"""
    session = get_session()
    try:
        ProjectsService.delete(session, ProjectsService.get(session, project_id))
        session.commit()
        return "", 204
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
