"""JSON shapes returned by the project and task endpoints."""
from __future__ import annotations

from typing import Any, Callable

from models.project import Project
from models.task import Task
from models.user import User


def serialize_user_summary(user: User | None) -> dict[str, Any] | None:
    return user.to_summary() if user is not None else None


def serialize_project(project: Project) -> dict[str, Any]:
    """Project columns with ``owner`` and ``tasks[].assignee``."""
    payload = project.to_dict()
    payload["owner"] = serialize_user_summary(project.owner)
    payload["tasks"] = [
        {**task.to_dict(), "assignee": serialize_user_summary(task.assignee)}
        for task in project.tasks
    ]
    return payload


def serialize_task(task: Task) -> dict[str, Any]:
    """Task columns with ``project`` and ``assignee``."""
    payload = task.to_dict()
    payload["project"] = task.project.to_dict() if task.project is not None else None
    payload["assignee"] = serialize_user_summary(task.assignee)
    return payload


def _page_url(path: str, page: int) -> str:
    return f"{path}?page={page}"


def serialize_page(pagination, serializer: Callable[[Any], dict[str, Any]], path: str) -> dict[str, Any]:
    """Return a page of items plus the pagination metadata.

    Arguments:
        pagination -- ``flask_sqlalchemy.pagination.Pagination``
        serializer -- callable turning one item into a dict
        path -- absolute URL of the listing, without query string
    """
    items = [serializer(item) for item in pagination.items]
    last_page = max(pagination.pages, 1)
    first_index = (pagination.page - 1) * pagination.per_page + 1 if items else None
    last_index = first_index + len(items) - 1 if items else None
    return {
        "current_page": pagination.page,
        "data": items,
        "first_page_url": _page_url(path, 1),
        "from": first_index,
        "last_page": last_page,
        "last_page_url": _page_url(path, last_page),
        "next_page_url": _page_url(path, pagination.next_num) if pagination.has_next else None,
        "path": path,
        "per_page": pagination.per_page,
        "prev_page_url": _page_url(path, pagination.prev_num) if pagination.has_prev else None,
        "to": last_index,
        "total": pagination.total,
    }
