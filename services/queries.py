"""Named fetch shapes for projects and tasks.

Each function returns a ``select`` with the relations a response needs already
loaded, so serialization never triggers extra lazy loads.
"""
from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from models.project import Project
from models.task import Task


def project_with_owner_and_task_assignees():
    """Projects with ``owner`` and ``tasks[].assignee``."""
    return (
        select(Project)
        .options(
            selectinload(Project.owner),
            selectinload(Project.tasks).selectinload(Task.assignee),
        )
        .order_by(Project.id)
    )


def task_with_project_and_assignee():
    """Tasks with ``project`` and ``assignee``."""
    return (
        select(Task)
        .options(selectinload(Task.project), selectinload(Task.assignee))
        .order_by(Task.id)
    )


def projects_owned_by(user_id: int):
    return project_with_owner_and_task_assignees().where(Project.owner_id == user_id)


def tasks_of_project(project_id: int):
    return task_with_project_and_assignee().where(Task.project_id == project_id)


def tasks_visible_to(user_id: int):
    """Tasks assigned to the user or belonging to a project the user owns."""
    owned_projects = select(Project.id).where(Project.owner_id == user_id)
    return task_with_project_and_assignee().where(
        or_(Task.assigned_to == user_id, Task.project_id.in_(owned_projects))
    )
