"""Utilities supporting project and task access control."""
from __future__ import annotations

from enum import StrEnum

from sqlalchemy import inspect

from database import db
from models.project import Project
from models.task import Task
from models.user import User
from services.errors import Forbidden


class Action(StrEnum):
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"


def user_owns_project(user: User | None, project: Project | None) -> bool:
    """Return True if the project belongs to the supplied user."""
    return bool(user and project and project.owner_id is not None and project.owner_id == user.id)


def user_is_assigned_in_project(user: User | None, project: Project | None) -> bool:
    """Return True when any task of the project is assigned to the user."""

    if user is None or project is None:
        return False
    state = inspect(project)
    if state.transient or "tasks" not in state.unloaded:
        return any(task.assigned_to == user.id for task in project.tasks)
    query = db.select(Task.id).where(Task.project_id == project.id, Task.assigned_to == user.id)
    return db.session.execute(query.limit(1)).first() is not None


def user_can_view_project(user: User | None, project: Project | None) -> bool:
    """Return True when the given user can view the provided project."""
    return user_owns_project(user, project) or user_is_assigned_in_project(user, project)


def can(user: User | None, action: Action | str, resource) -> bool:
    """Return True when ``user`` may perform ``action`` on ``resource``.

    Projects can be viewed by their owner and by any user assigned to one of
    their tasks; only the owner can update or delete them. Tasks carry no
    restriction.
    """

    action = Action(action)
    if isinstance(resource, Project):
        if action == Action.VIEW:
            return user_can_view_project(user, resource)
        return user_owns_project(user, resource)
    if isinstance(resource, Task):
        return True
    return False


def authorize(user: User | None, action: Action | str, resource) -> None:
    """Raise ``Forbidden`` unless ``can(user, action, resource)``."""
    if not can(user, action, resource):
        raise Forbidden()
