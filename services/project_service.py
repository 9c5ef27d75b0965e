"""Project endpoints: validate, authorize, persist and serialize."""
from __future__ import annotations

from typing import Any

from flask import current_app

from database import commit_or_rollback, db
from forms import ProjectForm, validate_or_raise
from models.project import Project
from models.user import User
from services.access_service import Action, authorize
from services.errors import NotFound, Unauthenticated
from services.queries import (
    project_with_owner_and_task_assignees,
    projects_owned_by,
    tasks_of_project,
)
from services.serializers import serialize_page, serialize_project, serialize_task


def _per_page() -> int:
    return int(current_app.config.get("PROJECTS_PER_PAGE", 15))


def load_project(project_id: int) -> Project:
    """Return the project with owner and task assignees, or raise ``NotFound``."""
    query = project_with_owner_and_task_assignees().where(Project.id == project_id)
    project = db.session.execute(query).scalar_one_or_none()
    if project is None:
        raise NotFound("Project not found")
    return project


def list_projects(page: int, path: str) -> dict[str, Any]:
    pagination = db.paginate(
        project_with_owner_and_task_assignees(),
        page=page,
        per_page=_per_page(),
        error_out=False,
    )
    return serialize_page(pagination, serialize_project, path)


def list_user_projects(user: User | None, page: int, path: str) -> dict[str, Any]:
    """Projects owned by ``user``."""
    if user is None:
        raise Unauthenticated()
    pagination = db.paginate(
        projects_owned_by(user.id),
        page=page,
        per_page=_per_page(),
        error_out=False,
    )
    return serialize_page(pagination, serialize_project, path)


def create_project(user: User | None, payload: Any) -> dict[str, Any]:
    """Create a project; the owner defaults to the caller when omitted."""
    data = validate_or_raise(ProjectForm(payload))
    if data.get("owner_id") is None and user is not None:
        data["owner_id"] = user.id

    project = Project(**data)
    db.session.add(project)
    commit_or_rollback("create project")
    return serialize_project(load_project(project.id))


def get_project(user: User | None, project_id: int) -> dict[str, Any]:
    project = load_project(project_id)
    authorize(user, Action.VIEW, project)
    return serialize_project(project)


def list_project_tasks(user: User | None, project_id: int, page: int, path: str) -> dict[str, Any]:
    project = load_project(project_id)
    authorize(user, Action.VIEW, project)
    pagination = db.paginate(
        tasks_of_project(project.id),
        page=page,
        per_page=int(current_app.config.get("TASKS_PER_PAGE", 20)),
        error_out=False,
    )
    return serialize_page(pagination, serialize_task, path)


def update_project(user: User | None, project_id: int, payload: Any) -> dict[str, Any]:
    """Update only the supplied fields of a project owned by ``user``."""
    project = load_project(project_id)
    authorize(user, Action.UPDATE, project)
    data = validate_or_raise(ProjectForm(payload, partial=True, instance=project))

    for name, value in data.items():
        setattr(project, name, value)
    commit_or_rollback("update project")
    return serialize_project(load_project(project.id))


def delete_project(user: User | None, project_id: int) -> None:
    project = load_project(project_id)
    authorize(user, Action.DELETE, project)
    db.session.delete(project)
    commit_or_rollback("delete project")
