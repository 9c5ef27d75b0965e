"""A Project groups Tasks under a common objective.

A User is the owner of the Project he creates
A Project can be seen by its owner and by any User assigned to one of its Tasks
Only the owner can update or delete a Project
Deleting a Project deletes its Tasks

"""
from __future__ import annotations

from enum import StrEnum

from database import db, utcnow


class ProjectStatus(StrEnum):
    """Lifecycle states of a project."""

    PLANNING = "planning"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    owner = db.relationship("User", back_populates="owned_projects")
    tasks = db.relationship(
        "Task",
        back_populates="project",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="Task.id",
    )

    def __repr__(self):
        return f"<Project {self.name}>"

    @property
    def status_enum(self) -> ProjectStatus | None:
        return ProjectStatus(self.status) if self.status else None

    def to_dict(self) -> dict[str, object]:
        """Return the project columns without any relation."""

        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "status": self.status,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
