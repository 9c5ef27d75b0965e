"""Failures raised by the service layer and rendered by the error router."""
from __future__ import annotations


class ApiError(Exception):
    """Base failure carrying the HTTP status and the client-facing message."""

    status_code = 500
    message = "Server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"message": self.message}


class Unauthenticated(ApiError):
    """No valid identity was established where one is required."""

    status_code = 401
    message = "Unauthenticated"


class TokenExpired(Unauthenticated):
    message = "Token expired"


class TokenInvalid(Unauthenticated):
    message = "Token invalid"


class Forbidden(ApiError, PermissionError):
    """The caller is known but the action is denied."""

    status_code = 403
    message = "Forbidden"


class NotFound(ApiError, LookupError):
    status_code = 404
    message = "Not Found"


class ValidationFailed(ApiError, ValueError):
    """Input violates the field rules; ``errors`` maps field -> messages."""

    status_code = 422
    message = "The given data was invalid."

    def __init__(self, errors: dict[str, list[str]], message: str | None = None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict[str, object]:
        return {"message": self.message, "errors": self.errors}
