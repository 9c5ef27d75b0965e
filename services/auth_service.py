"""Bearer token authentication and account management."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from flask import current_app

from database import commit_or_rollback, db, utcnow
from forms import LoginForm, ProfileForm, RegisterForm, validate_or_raise
from models.revoked_token import RevokedToken
from models.user import User
from services.errors import TokenExpired, TokenInvalid, Unauthenticated

BEARER_PREFIX = "bearer "


def _secret() -> str:
    return current_app.config.get("JWT_SECRET_KEY") or current_app.config["SECRET_KEY"]


def _algorithm() -> str:
    return current_app.config.get("JWT_ALGORITHM", "HS256")


def issue_token(user: User) -> str:
    """Return a signed token identifying ``user``."""
    now = datetime.now(timezone.utc)
    ttl = timedelta(minutes=int(current_app.config.get("JWT_TTL_MINUTES", 60)))
    claims = {
        "sub": str(user.id),
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(claims, _secret(), algorithm=_algorithm())


def decode_token(token: str) -> dict[str, Any]:
    """Return the claims of a valid, non-revoked token.

    Raises:
        TokenExpired -- the token is past its ``exp`` claim
        TokenInvalid -- bad signature, malformed token or revoked ``jti``
    """
    try:
        claims = jwt.decode(
            token,
            _secret(),
            algorithms=[_algorithm()],
            options={"require": ["sub", "jti", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except jwt.InvalidTokenError as exc:
        logging.warning("Rejected bearer token: %s", exc)
        raise TokenInvalid() from exc

    if RevokedToken.is_revoked(claims.get("jti")):
        raise TokenInvalid()
    return claims


def bearer_token(request) -> str | None:
    """Return the bearer credential of the request, if any."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX):].strip()
        return token or None
    return None


def resolve_current_user(request, *, required: bool = True) -> User | None:
    """Return the user identified by the request's bearer token.

    When ``required`` is False a request without a bearer token yields
    ``None``. A token that is presented must be valid either way.
    """
    token = bearer_token(request)
    if token is None:
        if required:
            raise Unauthenticated()
        return None

    claims = decode_token(token)
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise TokenInvalid() from exc
    user = db.session.get(User, user_id)
    if user is None:
        raise Unauthenticated()
    return user


def invalidate_token(token: str | None) -> None:
    """Revoke ``token`` until its natural expiry."""
    if not token:
        raise Unauthenticated()
    claims = decode_token(token)
    expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc).replace(tzinfo=None)

    RevokedToken.query.filter(RevokedToken.expires_at < utcnow()).delete(
        synchronize_session=False
    )
    db.session.add(
        RevokedToken(
            jti=claims["jti"],
            user_id=int(claims["sub"]),
            expires_at=expires_at,
        )
    )
    commit_or_rollback("revoke token")
    logging.info("Revoked token %s for user %s", claims["jti"], claims["sub"])


def register_user(payload: Any) -> User:
    data = validate_or_raise(RegisterForm(payload))
    user = User(name=data["name"], email=data["email"])
    user.set_password(data["password"])
    db.session.add(user)
    commit_or_rollback("register user")
    return user


def attempt(payload: Any) -> str | None:
    """Return a token for valid credentials, ``None`` otherwise."""
    data = validate_or_raise(LoginForm(payload))
    user = User.query.filter_by(email=data["email"]).first()
    if user is None or not user.check_password(data["password"]):
        return None
    return issue_token(user)


def update_profile(user: User, payload: Any) -> User:
    """Apply the supplied name/email/password to ``user``."""
    data = validate_or_raise(ProfileForm(payload, partial=True, instance=user))
    if "name" in data:
        user.name = data["name"]
    if "email" in data:
        user.email = data["email"]
    if data.get("password"):
        user.set_password(data["password"])
    commit_or_rollback("update profile")
    return user
