"""
api.routes_parts - Parts, assemblies and the status dashboard.
"""

from flask import jsonify, request

from api import api_bp, json_body
from api.auth import editor_required
from db import get_session
from services import hierarchy_service
from services.parts_service import PartsService, part_to_dict
from services.projects_service import ProjectsService
from services.settings_service import get_settings


@api_bp.route("/projects/<project_id>/parts")
def list_parts(project_id: str):
    """GET /api/projects/{id}/parts?sort=part_number|type|name|status&number=PREFIX-P-0001"""
    sort = request.args.get("sort", "part_number").strip()
    number = request.args.get("number", "").strip()
    session = get_session()
    try:
        project = ProjectsService.get(session, project_id)
        if number:
            parts = PartsService.find_by_number(session, project, number)
        else:
            parts = PartsService.list_for_project(session, project.id, sort)
        return jsonify([part_to_dict(p, project) for p in parts])
    finally:
        session.close()


@api_bp.route("/parts/<part_id>")
def get_part(part_id: str):
    """GET /api/parts/{id}  (with project, parent, children and settings)"""
    session = get_session()
    try:
        part = PartsService.get(session, part_id)
        d = part_to_dict(part)
        d["project"] = part.project.to_dict()
        d["parent"] = part_to_dict(part.parent) if part.parent else None
        d["children"] = [
            part_to_dict(c) for c in hierarchy_service.children_of(session, part)
        ]
        d["settings"] = get_settings(session).to_dict()
        session.commit()
        return jsonify(d)
    finally:
        session.close()


@api_bp.route("/projects/<project_id>/parts", methods=["POST"])
@editor_required
def create_part(project_id: str):
    """
    POST /api/projects/{id}/parts

    JSON body: {type, name, parentPartId?}.  part_number is auto-assigned.
    """
    data = json_body()
    session = get_session()
    try:
        part = PartsService.create(session, project_id, data)
        session.commit()
        return jsonify(part_to_dict(part)), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/parts/<part_id>", methods=["PUT"])
@editor_required
def update_part(part_id: str):
    """PUT /api/parts/{id}  (JSON body with fields to update)"""
    data = json_body()
    session = get_session()
    try:
        part = PartsService.get(session, part_id)
        PartsService.update(session, part, data)
        session.commit()
        return jsonify(part_to_dict(part))
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/parts/<part_id>/status", methods=["PATCH"])
@editor_required
def update_part_status(part_id: str):
    """PATCH /api/parts/{id}/status  {status}"""
    data = json_body()
    session = get_session()
    try:
        part = PartsService.get(session, part_id)
        PartsService.set_status(session, part, data.get("status"))
        session.commit()
        return jsonify(part_to_dict(part))
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/parts/<part_id>", methods=["DELETE"])
@editor_required
def delete_part(part_id: str):
    """DELETE /api/parts/{id}  (refused while the part has children)"""
    session = get_session()
    try:
        PartsService.delete(session, PartsService.get(session, part_id))
        session.commit()
        return "", 204
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects/<project_id>/dashboard")
def dashboard(project_id: str):
    """GET /api/projects/{id}/dashboard?status=  (parts not yet done)"""
    status = request.args.get("status", "").strip() or None
    session = get_session()
    try:
        project = ProjectsService.get(session, project_id)
        return jsonify(PartsService.dashboard(session, project, status))
    finally:
        session.close()
