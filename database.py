import logging
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

from services.errors import ApiError

db = SQLAlchemy()


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def commit_or_rollback(action: str) -> None:
    """Commit the session, rolling back and raising ``ApiError`` on failure."""
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logging.error("Unable to %s: %s", action, exc, exc_info=True)
        raise ApiError() from exc
