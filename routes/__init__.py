"""Shared helpers for route blueprints."""

from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify, request

from services.auth_service import resolve_current_user

__all__ = [
    "current_page",
    "is_api_request",
    "json_created",
    "json_error",
    "json_success",
    "no_content",
    "optional_identity",
    "requires_identity",
]


def is_api_request(req) -> bool:
    """Return True when the request expects the JSON response contract."""
    accept = req.accept_mimetypes
    api_prefix = current_app.config.get("API_PREFIX", "/api")
    path = req.path or ""
    return bool(
        req.is_json
        or req.headers.get("X-Requested-With", "").lower() == "xmlhttprequest"
        or "application/json" in req.headers.get("Accept", "").lower()
        or accept.best == "application/json"
        or path == api_prefix
        or path.startswith(api_prefix + "/")
        or req.headers.get("Authorization")
    )


def json_success(message: str, data=None, status: int = 200):
    """Return the ``{message, data}`` envelope."""
    return jsonify({"message": message, "data": data}), status


def json_created(message: str, data=None):
    return json_success(message, data, status=201)


def no_content():
    return "", 204


def json_error(message: str, status: int, errors: dict | None = None):
    """Return the ``{message[, errors]}`` failure envelope."""
    payload = {"message": message}
    if errors is not None:
        payload["errors"] = errors
    return jsonify(payload), status


def current_page() -> int:
    """Return the ``page`` query argument, defaulting to the first page."""
    page = request.args.get("page", 1, type=int)
    return page if page and page > 0 else 1


def requires_identity(f):
    """Resolve the bearer token and pass the caller as the ``user`` keyword.

    Responds 401 when no valid identity can be established.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        kwargs["user"] = resolve_current_user(request, required=True)
        return f(*args, **kwargs)

    return decorated_function


def optional_identity(f):
    """Like ``requires_identity`` but passes ``user=None`` when no bearer token is sent."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        kwargs["user"] = resolve_current_user(request, required=False)
        return f(*args, **kwargs)

    return decorated_function
