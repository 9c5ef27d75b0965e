"""Project endpoints."""
from __future__ import annotations

from flask import Blueprint, request

from routes import (
    current_page,
    json_created,
    json_success,
    no_content,
    optional_identity,
    requires_identity,
)
from services import project_service

projects_bp = Blueprint("projects", __name__, url_prefix="/api")


def _payload():
    return request.get_json(silent=True) or {}


@projects_bp.route("/projects", methods=["GET"])
def list_projects():
    page = project_service.list_projects(current_page(), request.base_url)
    return json_success("Projects retrieved successfully", page)


@projects_bp.route("/user/projects", methods=["GET"])
@requires_identity
def list_user_projects(user):
    page = project_service.list_user_projects(user, current_page(), request.base_url)
    return json_success("User projects retrieved successfully", page)


@projects_bp.route("/projects", methods=["POST"])
@optional_identity
def create_project(user):
    project = project_service.create_project(user, _payload())
    return json_created("Project created successfully", project)


@projects_bp.route("/projects/<int:project_id>", methods=["GET"])
@optional_identity
def show_project(project_id: int, user):
    project = project_service.get_project(user, project_id)
    return json_success("Project retrieved successfully", project)


@projects_bp.route("/projects/<int:project_id>/detail", methods=["GET"])
@optional_identity
def project_detail(project_id: int, user):
    project = project_service.get_project(user, project_id)
    return json_success("Project detail retrieved successfully", project)


@projects_bp.route("/projects/<int:project_id>/tasks", methods=["GET"])
@requires_identity
def list_project_tasks(project_id: int, user):
    page = project_service.list_project_tasks(user, project_id, current_page(), request.base_url)
    return json_success("Project tasks retrieved successfully", page)


@projects_bp.route("/projects/<int:project_id>", methods=["PUT", "PATCH"])
@requires_identity
def update_project(project_id: int, user):
    project = project_service.update_project(user, project_id, _payload())
    return json_success("Project updated successfully", project)


@projects_bp.route("/projects/<int:project_id>", methods=["DELETE"])
@requires_identity
def delete_project(project_id: int, user):
    project_service.delete_project(user, project_id)
    return no_content()
