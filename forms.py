"""Validation rules for the JSON API.

Forms are fed from the decoded JSON body instead of HTML form posts. Each
field composes WTForms validators; ``partial`` forms only check and return the
keys that were actually supplied.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from werkzeug.datastructures import MultiDict
from flask_wtf import FlaskForm
from wtforms import (
    DateField,
    IntegerField,
    PasswordField,
    StringField,
    TextAreaField,
)
from wtforms.validators import (
    AnyOf,
    DataRequired,
    Email,
    InputRequired,
    Length,
    Optional,
    StopValidation,
    ValidationError,
)

from database import db
from models.project import Project, ProjectStatus
from models.task import TaskPriority, TaskStatus
from models.user import User
from services.errors import ValidationFailed

MIN_PASSWORD_LENGTH = 6
NAME_MAX_LENGTH = 255


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    return value


class IsString:
    """Reject JSON numbers, booleans, lists and objects for text fields."""

    def __init__(self, message=None):
        self.message = message

    def __call__(self, form, field):
        if field.data is None or isinstance(field.data, str):
            return
        message = self.message or f"The {field.label.text.lower()} must be a string."
        raise StopValidation(message)


class Unique:
    """Value must not exist yet in ``model.column``, ignoring the form's instance."""

    def __init__(self, model, column, message=None):
        self.model = model
        self.column = column
        self.message = message

    def __call__(self, form, field):
        column = getattr(self.model, self.column)
        query = self.model.query.filter(column == field.data)
        instance = getattr(form, "instance", None)
        if isinstance(instance, self.model) and instance.id is not None:
            query = query.filter(self.model.id != instance.id)
        if query.first() is not None:
            message = self.message or f"The {field.label.text.lower()} has already been taken."
            raise ValidationError(message)


class Exists:
    """Value must be the primary key of an existing ``model`` row."""

    def __init__(self, model, message=None):
        self.model = model
        self.message = message

    def __call__(self, form, field):
        if field.data is None or db.session.get(self.model, field.data) is not None:
            return
        message = self.message or f"The selected {field.label.text.lower()} is invalid."
        raise ValidationError(message)


class IdField(IntegerField):
    """Integer foreign key taken from JSON; empty values become ``None``."""

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        value = valuelist[0]
        if value == "":
            self.data = None
            return
        if isinstance(value, (bool, float, dict, list)):
            self.data = None
            raise ValueError(self.gettext("Not a valid integer value."))
        super().process_formdata(valuelist)


class IsoDateField(DateField):
    """``YYYY-MM-DD`` date; empty values become ``None``."""

    def __init__(self, label=None, validators=None, **kwargs):
        super().__init__(label, validators, format="%Y-%m-%d", **kwargs)

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        value = valuelist[0]
        if value == "":
            self.data = None
            return
        if not isinstance(value, str):
            self.data = None
            raise ValueError(f"The {self.label.text.lower()} is not a valid date.")
        try:
            self.data = datetime.strptime(value.strip(), self.format[0]).date()
        except ValueError as exc:
            self.data = None
            raise ValueError(f"The {self.label.text.lower()} is not a valid date.") from exc


class ApiForm(FlaskForm):
    """Base form bound to a JSON payload.

    Arguments:
        payload -- decoded JSON body (anything but a dict is treated as empty)
        partial -- "sometimes" semantics: absent keys are not validated
        instance -- row being updated, used by uniqueness and cross-field rules
    """

    def __init__(self, payload: Any = None, *, partial: bool = False, instance=None):
        self.payload = payload if isinstance(payload, dict) else {}
        self.partial = partial
        self.instance = instance
        formdata = MultiDict(
            [(key, "" if value is None else value) for key, value in self.payload.items()]
        )
        super().__init__(formdata=formdata, meta={"csrf": False})
        if partial:
            for name in list(self._fields):
                if name not in self.payload:
                    del self[name]

    def supplied(self, name: str) -> bool:
        return name in self.payload and name in self._fields

    def validated_data(self) -> dict[str, Any]:
        """Return supplied, validated values; empty strings are stored as ``None``."""

        data: dict[str, Any] = {}
        for name, field in self._fields.items():
            if name not in self.payload:
                continue
            value = field.data
            data[name] = None if value == "" else value
        return data


def _summary(errors: dict[str, list[str]]) -> str:
    messages = [message for field_errors in errors.values() for message in field_errors]
    if not messages:
        return ValidationFailed.message
    remaining = len(messages) - 1
    if remaining == 0:
        return messages[0]
    suffix = "error" if remaining == 1 else "errors"
    return f"{messages[0]} (and {remaining} more {suffix})"


def validate_or_raise(form: ApiForm) -> dict[str, Any]:
    """Validate ``form`` and return its data, raising ``ValidationFailed`` on errors."""

    if not form.validate():
        errors = {name: list(messages) for name, messages in form.errors.items() if name}
        raise ValidationFailed(errors, _summary(errors))
    return form.validated_data()


class RegisterForm(ApiForm):
    name = StringField(
        "Name",
        validators=[
            DataRequired(message="The name field is required."),
            IsString(),
            Length(max=NAME_MAX_LENGTH, message="The name must not be greater than 255 characters."),
        ],
        filters=[_strip],
    )
    email = StringField(
        "Email",
        validators=[
            DataRequired(message="The email field is required."),
            IsString(),
            Email(message="The email must be a valid email address."),
            Unique(User, "email"),
        ],
        filters=[_strip],
    )
    password = PasswordField(
        "Password",
        validators=[
            DataRequired(message="The password field is required."),
            IsString(),
            Length(
                min=MIN_PASSWORD_LENGTH,
                message=f"The password must be at least {MIN_PASSWORD_LENGTH} characters.",
            ),
        ],
    )


class LoginForm(ApiForm):
    email = StringField(
        "Email",
        validators=[DataRequired(message="The email field is required."), IsString()],
        filters=[_strip],
    )
    password = PasswordField(
        "Password",
        validators=[DataRequired(message="The password field is required."), IsString()],
    )


class ProfileForm(ApiForm):
    """Profile update; used with ``partial=True`` and ``instance=<current user>``."""

    name = StringField(
        "Name",
        validators=[
            DataRequired(message="The name field is required."),
            IsString(),
            Length(max=NAME_MAX_LENGTH, message="The name must not be greater than 255 characters."),
        ],
        filters=[_strip],
    )
    email = StringField(
        "Email",
        validators=[
            DataRequired(message="The email field is required."),
            IsString(),
            Email(message="The email must be a valid email address."),
            Unique(User, "email"),
        ],
        filters=[_strip],
    )
    password = PasswordField(
        "Password",
        validators=[
            Optional(),
            IsString(),
            Length(
                min=MIN_PASSWORD_LENGTH,
                message=f"The password must be at least {MIN_PASSWORD_LENGTH} characters.",
            ),
        ],
    )


class ProjectForm(ApiForm):
    name = StringField(
        "Name",
        validators=[
            DataRequired(message="The name field is required."),
            IsString(),
            Length(max=NAME_MAX_LENGTH, message="The name must not be greater than 255 characters."),
        ],
        filters=[_strip],
    )
    description = TextAreaField("Description", validators=[Optional(), IsString()])
    start_date = IsoDateField("Start date", validators=[Optional()])
    end_date = IsoDateField("End date", validators=[Optional()])
    status = StringField(
        "Status",
        validators=[
            Optional(),
            AnyOf(
                [status.value for status in ProjectStatus],
                message="The selected status is invalid.",
            ),
        ],
    )
    owner_id = IdField("Owner id", validators=[Optional(), Exists(User)])

    def _stored(self, name: str):
        if isinstance(self.instance, Project):
            return getattr(self.instance, name)
        return None

    def validate_start_date(self, field):
        # Only the stored end date is checked here; a supplied one is checked below.
        if self.supplied("end_date"):
            return
        end_date = self._stored("end_date")
        if field.data is not None and end_date is not None and field.data > end_date:
            raise ValidationError("The start date must be a date before or equal to end date.")

    def validate_end_date(self, field):
        if self.supplied("start_date"):
            start_date = self.start_date.data
        else:
            start_date = self._stored("start_date")
        if field.data is not None and start_date is not None and field.data < start_date:
            raise ValidationError("The end date must be a date after or equal to start date.")


class TaskForm(ApiForm):
    project_id = IdField(
        "Project id",
        validators=[InputRequired(message="The project id field is required."), Exists(Project)],
    )
    name = StringField(
        "Name",
        validators=[
            DataRequired(message="The name field is required."),
            IsString(),
            Length(max=NAME_MAX_LENGTH, message="The name must not be greater than 255 characters."),
        ],
        filters=[_strip],
    )
    description = TextAreaField("Description", validators=[Optional(), IsString()])
    assigned_to = IdField("Assigned to", validators=[Optional(), Exists(User)])
    priority = StringField(
        "Priority",
        validators=[
            Optional(),
            AnyOf(
                [priority.value for priority in TaskPriority],
                message="The selected priority is invalid.",
            ),
        ],
    )
    due_date = IsoDateField("Due date", validators=[Optional()])
    status = StringField(
        "Status",
        validators=[
            Optional(),
            AnyOf(
                [status.value for status in TaskStatus],
                message="The selected status is invalid.",
            ),
        ],
    )


__all__ = [
    "ApiForm",
    "LoginForm",
    "ProfileForm",
    "ProjectForm",
    "RegisterForm",
    "TaskForm",
    "validate_or_raise",
]
