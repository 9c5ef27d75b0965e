"""A task represent an objective that needs to be completed inside a Project

A Task always belongs to an existing Project
A Task can be assigned to a single User
A User assigned to a Task can see the Project of the Task
Any caller can update or delete a Task

"""
from __future__ import annotations

from enum import StrEnum

from database import db, utcnow


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    assigned_to = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    priority = db.Column(db.String(20), nullable=True)
    due_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    project = db.relationship("Project", back_populates="tasks")
    assignee = db.relationship("User", back_populates="assigned_tasks")

    def __repr__(self):
        return f"<Task {self.id}>"

    @property
    def priority_enum(self) -> TaskPriority | None:
        return TaskPriority(self.priority) if self.priority else None

    @property
    def status_enum(self) -> TaskStatus | None:
        return TaskStatus(self.status) if self.status else None

    def to_dict(self) -> dict[str, object]:
        """Return the task columns without any relation."""

        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "assigned_to": self.assigned_to,
            "priority": self.priority,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
