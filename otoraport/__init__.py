# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Flask application factory and initialization.

This module is the main entry point for initializing the OTORAPORT
application. It configures Flask extensions, registers JSON error handlers
and REST API routes, and creates the Flask application via the create_app
factory.

Functions:
    register_extensions: Initialize and register Flask extensions.
    register_error_handlers: Register JSON error handlers for the app.
    create_app: Application factory that creates and configures the Flask app.
"""

import os
from typing import Any

from flask import Flask, abort, g, request
from flask_cors import CORS
from flask_marshmallow import Marshmallow
from flask_migrate import Migrate
from prometheus_flask_exporter import PrometheusMetrics
from werkzeug.exceptions import InternalServerError
from werkzeug.utils import import_string

from otoraport import models  # noqa: F401  (registers the tables with SQLAlchemy)
from otoraport.models.db import db
from otoraport.routes import register_routes
from otoraport.utils.limiter import limiter
from otoraport.utils.logger import logger
from otoraport.utils.version import get_api_version

# Flask extensions
migrate = Migrate()
ma = Marshmallow()
metrics = PrometheusMetrics(app=None)

__all__ = ["create_app"]

# status code -> (error code, message, log message)
ERROR_RESPONSES = {
    400: ("bad_request", "Bad request", "Bad request received."),
    401: ("invalid_token", "Unauthorized", "Unauthorized access attempt detected."),
    403: ("forbidden", "Forbidden", "Forbidden access attempt detected."),
    404: ("not_found", "Resource not found", "Resource not found."),
    405: ("method_not_allowed", "Method not allowed", "Method not allowed."),
    409: ("conflict", "Conflict", "Conflict detected."),
    413: ("payload_too_large", "Uploaded file is too large", "Payload too large."),
    415: ("unsupported_media_type", "Unsupported media type", "Unsupported media type."),
    422: ("validation_error", "Unprocessable entity", "Unprocessable entity."),
    429: (
        "rate_limit_exceeded",
        "Rate limit exceeded. Please try again later.",
        "Rate limit exceeded.",
    ),
}

# Tokens whose absence disables part of the API
OPTIONAL_SECRETS = {
    "CRON_SECRET": "batch regeneration and trial warnings",
    "BATCH_SYNC_TOKEN": "batch sync",
    "N8N_WEBHOOK_URL": "batch sync",
    "P24_CRC": "payments",
    "MINISTRY_API_KEY": "ministry approval callback",
}


def register_test_routes(app):
    """Register test-only routes that trigger error handlers directly.

    Args:
        app (Flask): The Flask application instance.
    """

    @app.route("/unauthorized")
    def trigger_unauthorized():
        abort(401)

    @app.route("/forbidden")
    def trigger_forbidden():
        abort(403)

    @app.route("/bad")
    def trigger_bad():
        abort(400)

    @app.route("/fail")
    def trigger_fail():
        raise InternalServerError("Test internal error")


def register_extensions(app):
    """Initialize and register Flask extensions on the application.

    Args:
        app (Flask): The Flask application instance.
    """
    db.init_app(app)
    migrate.init_app(app, db)
    ma.init_app(app)

    # Creates the /{api_version}/metrics endpoint
    api_version = get_api_version()
    metrics.path = f"/{api_version}/metrics"
    metrics.init_app(app)
    logger.info("Prometheus metrics initialized.", path=metrics.path)

    # Flask-Limiter reads its settings from app.config
    rate_limit_storage = app.config.get("RATE_LIMIT_STORAGE", "memory")
    redis_url = app.config.get("REDIS_URL")
    if rate_limit_storage == "redis" and redis_url:
        app.config["RATELIMIT_STORAGE_URI"] = redis_url
    else:
        app.config["RATELIMIT_STORAGE_URI"] = "memory://"
    app.config["RATELIMIT_STRATEGY"] = app.config.get(
        "RATE_LIMIT_STRATEGY", "fixed-window"
    )
    app.config["RATELIMIT_ENABLED"] = app.config.get("RATE_LIMIT_ENABLED", False)

    limiter.init_app(app)

    if app.config["RATELIMIT_ENABLED"]:
        logger.info(
            "Rate limiter enabled.",
            storage=rate_limit_storage,
            strategy=app.config["RATELIMIT_STRATEGY"],
        )
    else:
        logger.info("Rate limiter initialized but disabled (no limits will be enforced).")

    logger.info("Extensions registered successfully.")


def _error_details() -> dict[str, Any]:
    return {
        "path": request.path,
        "method": request.method,
        "request_id": getattr(g, "request_id", None),
    }


def _make_error_handler(status_code: int):
    error_code, message, log_message = ERROR_RESPONSES[status_code]

    def handler(err):
        details = _error_details()
        logger.warning(log_message, error=str(err), **details)
        if status_code in (413, 415, 429):
            details["description"] = str(getattr(err, "description", err))
        return {"error": error_code, "message": message, "details": details}, status_code

    handler.__name__ = f"handle_{error_code}"
    return handler


def register_error_handlers(app):
    """Register JSON error handlers for the Flask application.

    Every handler answers ``{"error", "message", "details"}`` where details
    carries the request path, method and request id.

    Args:
        app (Flask): The Flask application instance.
    """
    for status_code in ERROR_RESPONSES:
        app.register_error_handler(status_code, _make_error_handler(status_code))

    @app.errorhandler(500)
    def internal_error(err):
        details = _error_details()
        logger.error("Internal server error", error=str(err), exc_info=True, **details)
        response: dict[str, Any] = {
            "error": "internal_error",
            "message": "Internal server error",
            "details": details,
        }

        if app.config.get("DEBUG"):
            response["details"]["exception"] = str(err)
        return response, 500

    logger.info("Error handlers registered successfully.")


def _get_endpoint_string(host, port):
    """Format endpoint as HOST:PORT if both exist, otherwise just host."""
    if host and port:
        return f"{host}:{port}"
    if host:
        return host
    return None


def _format_config_value(key, value, sensitive_keys):
    """Format a config value for logging, masking if sensitive.

    Args:
        key: The configuration key
        value: The configuration value
        sensitive_keys: Set of sensitive key patterns

    Returns:
        str: Formatted key=value string
    """
    if any(sensitive in key.upper() for sensitive in sensitive_keys):
        masked_value = "<MASKED>" if value else "<NOT SET>"
        return f"  {key}={masked_value}"

    if isinstance(value, (str, int, bool, float)) or value is None:
        return f"  {key}={value}"
    return f"  {key}={type(value).__name__}"


def _log_environment_variables(app):
    """Log the configuration at startup with sensitive values masked.

    Args:
        app (Flask): The Flask application instance.
    """
    sensitive_keys = {
        "SECRET",
        "SQLALCHEMY_DATABASE_URI",
        "DATABASE_URL",
        "PASSWORD",
        "REDIS_URL",
        "TOKEN",
        "API_KEY",
        "P24_CRC",
    }

    config = app.config
    env_vars = []

    db_endpoint = _get_endpoint_string(
        config.get("DATABASE_HOST"), config.get("DATABASE_PORT")
    )
    if db_endpoint:
        env_vars.append(f"  DATABASE_ENDPOINT={db_endpoint}")

    redis_endpoint = _get_endpoint_string(
        config.get("REDIS_HOST"), config.get("REDIS_PORT")
    )
    if redis_endpoint:
        env_vars.append(f"  REDIS_ENDPOINT={redis_endpoint}")

    for key in sorted(config.keys()):
        if not key.startswith("_"):
            env_vars.append(_format_config_value(key, config.get(key), sensitive_keys))

    config_str = "\n".join(sorted(set(env_vars)))
    logger.info(f"Application configuration:\n{config_str}")


def _configure_cors(app):
    if not app.config.get("CORS_ENABLED", True):
        logger.info("CORS disabled.")
        return

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if isinstance(cors_origins, str):
        origins_list = [origin.strip() for origin in cors_origins.split(",")]
    else:
        origins_list = cors_origins

    cors_allow_credentials = app.config.get("CORS_ALLOW_CREDENTIALS", True)
    cors_max_age = app.config.get("CORS_MAX_AGE", 3600)

    CORS(
        app,
        supports_credentials=cors_allow_credentials,
        origins=origins_list,
        max_age=cors_max_age,
    )
    logger.info(
        "CORS enabled.",
        origins=origins_list,
        credentials=cors_allow_credentials,
        max_age=cors_max_age,
    )


def _validate_startup_config(app: Flask) -> None:
    """Warn about unset secrets that leave part of the API locked.

    Args:
        app: Flask application instance.
    """
    for key, feature in OPTIONAL_SECRETS.items():
        if not app.config.get(key):
            logger.warning("Optional secret not configured.", key=key, disabled=feature)

    if not app.config.get("ADMIN_EMAILS"):
        logger.warning("ADMIN_EMAILS is empty; admin endpoints are unreachable.")

    logger.info("Startup configuration validated successfully.")


def create_app(config_class):
    """Factory to create and configure the Flask application.

    Args:
        config_class: The configuration class or import path to use for Flask.

    Returns:
        Flask: The configured and ready-to-use Flask application instance.
    """
    app = Flask(__name__)

    app.config.from_object(config_class)

    config_cls = (
        import_string(config_class) if isinstance(config_class, str) else config_class
    )
    if hasattr(config_cls, "validate"):
        config_cls.validate()

    logger.info("Creating app in environment.", environment=os.getenv("FLASK_ENV"))

    # Markdown report templates rely on block tags not leaving blank lines
    app.jinja_env.trim_blocks = True
    app.jinja_env.lstrip_blocks = True

    _configure_cors(app)
    register_extensions(app)
    register_error_handlers(app)
    register_routes(app)
    if app.config.get("TESTING"):
        register_test_routes(app)

    _validate_startup_config(app)
    _log_environment_variables(app)

    logger.info("App created successfully.")
    return app
