""" Represents a user in the system.

A User registers with a name, an email and a password.
A User logs in with email and password to obtain a bearer token.
A User can edit its profile (name, email, password)
A User owns the Projects he creates (see Project)
A User can be assigned Tasks of any Project (see Task)

"""

from werkzeug.security import generate_password_hash, check_password_hash
from database import db, utcnow


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    owned_projects = db.relationship("Project", back_populates="owner", lazy=True)
    assigned_tasks = db.relationship("Task", back_populates="assignee", lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User {self.id}>"

    def to_summary(self) -> dict[str, object]:
        """Return the id/name pair embedded in project and task payloads."""

        return {"id": self.id, "name": self.name}

    def to_profile(self) -> dict[str, object]:
        return {"id": self.id, "name": self.name, "email": self.email}
