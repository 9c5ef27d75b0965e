"""Task endpoints.

Only ``/api/user/tasks`` needs a bearer token; the other routes still resolve
the caller when one is supplied so the task policy receives it.
"""
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
from services import task_service

tasks_bp = Blueprint("tasks", __name__, url_prefix="/api")


def _payload():
    return request.get_json(silent=True) or {}


@tasks_bp.route("/tasks", methods=["GET"])
def list_tasks():
    page = task_service.list_tasks(current_page(), request.base_url)
    return json_success("Tasks retrieved successfully", page)


@tasks_bp.route("/user/tasks", methods=["GET"])
@requires_identity
def list_user_tasks(user):
    page = task_service.list_user_tasks(user, current_page(), request.base_url)
    return json_success("User tasks retrieved successfully", page)


@tasks_bp.route("/tasks", methods=["POST"])
@optional_identity
def create_task(user):
    task = task_service.create_task(user, _payload())
    return json_created("Task created successfully", task)


@tasks_bp.route("/tasks/<int:task_id>", methods=["GET"])
@optional_identity
def show_task(task_id: int, user):
    task = task_service.get_task(user, task_id)
    return json_success("Task retrieved successfully", task)


@tasks_bp.route("/tasks/<int:task_id>/detail", methods=["GET"])
@optional_identity
def task_detail(task_id: int, user):
    task = task_service.get_task(user, task_id)
    return json_success("Task detail retrieved successfully", task)


@tasks_bp.route("/tasks/<int:task_id>", methods=["PUT", "PATCH"])
@optional_identity
def update_task(task_id: int, user):
    task = task_service.update_task(user, task_id, _payload())
    return json_success("Task updated successfully", task)


@tasks_bp.route("/tasks/<int:task_id>", methods=["DELETE"])
@optional_identity
def delete_task(task_id: int, user):
    task_service.delete_task(user, task_id)
    return no_content()
