"""Task endpoints: validate, persist and serialize.

Tasks go through ``authorize`` like projects, but the task policy currently
allows every action to every caller.
"""
from __future__ import annotations

from typing import Any

from flask import current_app

from database import commit_or_rollback, db
from forms import TaskForm, validate_or_raise
from models.task import Task
from models.user import User
from services.access_service import Action, authorize
from services.errors import NotFound, Unauthenticated
from services.queries import task_with_project_and_assignee, tasks_visible_to
from services.serializers import serialize_page, serialize_task


def _per_page() -> int:
    return int(current_app.config.get("TASKS_PER_PAGE", 20))


def load_task(task_id: int) -> Task:
    """Return the task with project and assignee, or raise ``NotFound``."""
    query = task_with_project_and_assignee().where(Task.id == task_id)
    task = db.session.execute(query).scalar_one_or_none()
    if task is None:
        raise NotFound("Task not found")
    return task


def list_tasks(page: int, path: str) -> dict[str, Any]:
    pagination = db.paginate(
        task_with_project_and_assignee(),
        page=page,
        per_page=_per_page(),
        error_out=False,
    )
    return serialize_page(pagination, serialize_task, path)


def list_user_tasks(user: User | None, page: int, path: str) -> dict[str, Any]:
    """Tasks assigned to ``user`` or belonging to one of the user's projects."""
    if user is None:
        raise Unauthenticated()
    pagination = db.paginate(
        tasks_visible_to(user.id),
        page=page,
        per_page=_per_page(),
        error_out=False,
    )
    return serialize_page(pagination, serialize_task, path)


def create_task(user: User | None, payload: Any) -> dict[str, Any]:
    data = validate_or_raise(TaskForm(payload))
    task = Task(**data)
    db.session.add(task)
    commit_or_rollback("create task")
    return serialize_task(load_task(task.id))


def get_task(user: User | None, task_id: int) -> dict[str, Any]:
    task = load_task(task_id)
    authorize(user, Action.VIEW, task)
    return serialize_task(task)


def update_task(user: User | None, task_id: int, payload: Any) -> dict[str, Any]:
    task = load_task(task_id)
    authorize(user, Action.UPDATE, task)
    data = validate_or_raise(TaskForm(payload, partial=True, instance=task))

    for name, value in data.items():
        setattr(task, name, value)
    commit_or_rollback("update task")
    return serialize_task(load_task(task.id))


def delete_task(user: User | None, task_id: int) -> None:
    task = load_task(task_id)
    authorize(user, Action.DELETE, task)
    db.session.delete(task)
    commit_or_rollback("delete task")
