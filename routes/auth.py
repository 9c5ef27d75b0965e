"""Registration, login and profile endpoints."""
from __future__ import annotations

from flask import Blueprint, request

from routes import json_created, json_error, json_success, requires_identity
from services.auth_service import (
    attempt,
    bearer_token,
    invalidate_token,
    register_user,
    update_profile,
)

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def _payload():
    return request.get_json(silent=True) or {}


@auth_bp.route("/register", methods=["POST"])
def register():
    user = register_user(_payload())
    return json_created("User registered successfully", user.to_profile())


@auth_bp.route("/login", methods=["POST"])
def login():
    token = attempt(_payload())
    if token is None:
        return json_error("Invalid login", 401)
    return {"message": "Login successfully", "token": token}, 200


@auth_bp.route("/profile", methods=["GET"])
@requires_identity
def profile(user):
    return json_success("Profile retrieved successfully", user.to_profile())


@auth_bp.route("/profile", methods=["PUT", "PATCH"])
@requires_identity
def update(user):
    user = update_profile(user, _payload())
    return json_success("Profile updated successfully", user.to_profile())


@auth_bp.route("/logout", methods=["POST"])
@requires_identity
def logout(user):
    invalidate_token(bearer_token(request))
    return {"message": "Logged out"}, 200
