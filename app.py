import os
import logging

from dotenv import load_dotenv
from flask import Flask, g, request
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException, InternalServerError, default_exceptions

from database import db
from services.errors import ApiError, ValidationFailed

load_dotenv()

# Initialize Flask app
app = Flask(__name__)
app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get(
    "DATABASE_URL", "sqlite:///projecthub.db"
)
app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
app.config.setdefault("JWT_SECRET_KEY", os.environ.get("JWT_SECRET_KEY"))
app.config.setdefault("JWT_ALGORITHM", os.environ.get("JWT_ALGORITHM", "HS256"))
app.config.setdefault("JWT_TTL_MINUTES", int(os.environ.get("JWT_TTL_MINUTES", "60")))
app.config.setdefault("API_PREFIX", "/api")
app.config.setdefault("PROJECTS_PER_PAGE", 15)
app.config.setdefault("TASKS_PER_PAGE", 20)

db.init_app(app)

# Models import should be after initializing db
from models.user import User  # noqa: E402,F401
from models.project import Project  # noqa: E402,F401
from models.task import Task  # noqa: E402,F401
from models.revoked_token import RevokedToken  # noqa: E402,F401

from routes import is_api_request, json_error  # noqa: E402
from routes.auth import auth_bp  # noqa: E402
from routes.projects import projects_bp  # noqa: E402
from routes.tasks import tasks_bp  # noqa: E402

# Create flask command lines to update the db based on the model
# Useage:
# Create a migration script in ./migrations/versions
# > flask db migrate -m "Update comments"
# Run the update
# > flask db upgrade
migrate = Migrate(app, db)
app.register_blueprint(auth_bp)
app.register_blueprint(projects_bp)
app.register_blueprint(tasks_bp)


def _classify_request() -> bool:
    """Return the cached API classification of the current request.

    Falls back to True when the classification itself fails.
    """
    if "api_request" not in g:
        try:
            g.api_request = is_api_request(request)
        except Exception:
            logging.exception("Unable to classify request, assuming an API request")
            g.api_request = True
    return g.api_request


@app.before_request
def classify_request():
    """Decide once per request whether it follows the JSON contract."""
    _classify_request()


@app.after_request
def vary_on_accept(response):
    if _classify_request():
        response.vary.add("Accept")
    return response


@app.errorhandler(Exception)
def handle_error(error):
    """Render every failure with the uniform JSON envelope for API requests.

    Non-API requests keep Werkzeug's default HTML error pages.
    """
    if isinstance(error, ApiError) and error.status_code >= 500:
        db.session.rollback()
        app.logger.error("Request failed: %s", error.__cause__ or error)
    elif not isinstance(error, (ApiError, HTTPException)):
        db.session.rollback()
        app.logger.exception("Unhandled error while processing %s %s", request.method, request.path)

    if not _classify_request():
        if isinstance(error, HTTPException):
            return error
        if isinstance(error, ApiError):
            return InternalServerError() if error.status_code >= 500 else _http_error(error)
        return InternalServerError()

    if isinstance(error, ValidationFailed):
        return json_error(error.message, error.status_code, error.errors)
    if isinstance(error, ApiError):
        return json_error(error.message, error.status_code)
    if isinstance(error, HTTPException):
        return json_error(error.description or error.name or "HTTP Error", error.code or 500)
    return json_error("Server error", 500)


def _http_error(error: ApiError) -> HTTPException:
    """Map a service failure onto the matching Werkzeug error page."""
    exception_class = default_exceptions.get(error.status_code, InternalServerError)
    return exception_class(description=error.message)


if __name__ == "__main__":
    app.run(debug=True)
