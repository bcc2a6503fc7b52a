# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Flask application configuration classes.

This module defines configuration classes for the Flask application based on
the deployment environment. Each class defines parameters such as secret keys,
database URLs, external service credentials (Resend, Przelewy24, n8n, GUS),
subscription settings and SQLAlchemy settings.

Classes:
    Config: Base configuration common to all environments.
    DevelopmentConfig: Configuration for development.
    TestingConfig: Configuration for testing.
    IntegrationConfig: Configuration for integration testing.
    StagingConfig: Configuration for staging.
    ProductionConfig: Configuration for production.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from otoraport.utils.constants import (
    BOOLEAN_TRUE_VALUES,
    DEFAULT_AUTH_ENABLED,
    DEFAULT_BASE_URL,
    DEFAULT_BATCH_SYNC_DELAY,
    DEFAULT_CORS_ALLOW_CREDENTIALS,
    DEFAULT_CORS_ENABLED,
    DEFAULT_CORS_MAX_AGE,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_DATABASE_HOST,
    DEFAULT_DATABASE_PATH,
    DEFAULT_DATABASE_PORT_MYSQL,
    DEFAULT_DATABASE_PORT_POSTGRESQL,
    DEFAULT_DATABASE_TYPE,
    DEFAULT_EMAIL_FROM,
    DEFAULT_EMAIL_PROVIDER,
    DEFAULT_EXTERNAL_SERVICES_TIMEOUT,
    DEFAULT_FRONTEND_URL,
    DEFAULT_GUS_API_URL,
    DEFAULT_JWT_ALGORITHM,
    DEFAULT_JWT_EXPIRATION_HOURS,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAGIC_LINK_EXPIRATION_MINUTES,
    DEFAULT_MAX_PAGE_LIMIT,
    DEFAULT_MAX_UPLOAD_SIZE,
    DEFAULT_MINISTRY_EMAIL,
    DEFAULT_MOCK_DEVELOPER_EMAIL,
    DEFAULT_MOCK_DEVELOPER_ID,
    DEFAULT_N8N_TIMEOUT,
    DEFAULT_N8N_WEBHOOK_URL,
    DEFAULT_P24_SANDBOX,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_RATE_LIMIT_CONFIGURATION,
    DEFAULT_RATE_LIMIT_ENABLED,
    DEFAULT_RATE_LIMIT_STORAGE,
    DEFAULT_RATE_LIMIT_STRATEGY,
    DEFAULT_RATE_LIMIT_STRICT,
    DEFAULT_SERVICE_PORT,
    DEFAULT_SQLALCHEMY_MAX_OVERFLOW,
    DEFAULT_SQLALCHEMY_POOL_RECYCLE,
    DEFAULT_SQLALCHEMY_POOL_SIZE,
    DEFAULT_SQLALCHEMY_POOL_TIMEOUT,
    DEFAULT_SUPPORT_EMAIL,
    DEFAULT_TRIAL_DAYS,
    DEFAULT_USE_REDIS_CACHE,
    ERROR_DATABASE_CONFIG_INCOMPLETE,
    ERROR_DATABASE_TYPE_INVALID,
    ERROR_DATABASE_URL_NOT_SET,
    ERROR_EMAIL_PROVIDER_INVALID,
    ERROR_JWT_ALGORITHM_NOT_SET,
    ERROR_JWT_SECRET_NOT_SET,
    ERROR_P24_CONFIG_INCOMPLETE,
    ERROR_REDIS_URL_REQUIRED,
    ERROR_RESEND_API_KEY_REQUIRED,
    VALID_DATABASE_TYPES,
    VALID_EMAIL_PROVIDERS,
    VALID_RATE_LIMIT_STORAGE,
    VALID_RATE_LIMIT_STRATEGIES,
)
from otoraport.utils.logger import logger

# Load .env file ONLY for local development (not in Docker)
if not os.environ.get("IN_DOCKER_CONTAINER") and not os.environ.get("APP_MODE"):
    ENV_FILE = ".env.development"
    if Path(ENV_FILE).exists():
        load_dotenv(ENV_FILE)
    else:
        logger.warning(
            f"{ENV_FILE} not found. Ensure environment variables are set manually."
        )


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in BOOLEAN_TRUE_VALUES


def _env_list(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class Config:
    """Base configuration common to all environments."""

    # Flask Configuration
    SERVICE_PORT = int(os.environ.get("SERVICE_PORT", DEFAULT_SERVICE_PORT))
    SECRET_KEY = os.environ.get("SECRET_KEY")
    BASE_URL = os.environ.get("BASE_URL", DEFAULT_BASE_URL).rstrip("/")
    FRONTEND_URL = os.environ.get("FRONTEND_URL", DEFAULT_FRONTEND_URL).rstrip("/")

    # Authentication
    AUTH_ENABLED = _env_bool("AUTH_ENABLED", DEFAULT_AUTH_ENABLED)
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY")
    JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", DEFAULT_JWT_ALGORITHM)
    JWT_EXPIRATION_HOURS = int(
        os.environ.get("JWT_EXPIRATION_HOURS", DEFAULT_JWT_EXPIRATION_HOURS)
    )
    MAGIC_LINK_EXPIRATION_MINUTES = int(
        os.environ.get(
            "MAGIC_LINK_EXPIRATION_MINUTES", DEFAULT_MAGIC_LINK_EXPIRATION_MINUTES
        )
    )
    COOKIE_SECURE = _env_bool("COOKIE_SECURE", "false")
    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID")
    GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET")
    ADMIN_EMAILS = _env_list("ADMIN_EMAILS")

    # Mock developer (used when AUTH_ENABLED is false)
    MOCK_DEVELOPER_ID = os.environ.get("MOCK_DEVELOPER_ID", DEFAULT_MOCK_DEVELOPER_ID)
    MOCK_DEVELOPER_EMAIL = os.environ.get(
        "MOCK_DEVELOPER_EMAIL", DEFAULT_MOCK_DEVELOPER_EMAIL
    )

    # Scheduled job tokens
    BATCH_SYNC_TOKEN = os.environ.get("BATCH_SYNC_TOKEN")
    CRON_SECRET = os.environ.get("CRON_SECRET")
    MINISTRY_API_KEY = os.environ.get("MINISTRY_API_KEY")

    # External Services Configuration
    EXTERNAL_SERVICES_TIMEOUT = float(
        os.environ.get("EXTERNAL_SERVICES_TIMEOUT", DEFAULT_EXTERNAL_SERVICES_TIMEOUT)
    )
    N8N_WEBHOOK_URL = os.environ.get("N8N_WEBHOOK_URL", DEFAULT_N8N_WEBHOOK_URL)
    N8N_API_KEY = os.environ.get("N8N_API_KEY")
    N8N_TIMEOUT = float(os.environ.get("N8N_TIMEOUT", DEFAULT_N8N_TIMEOUT))
    BATCH_SYNC_DELAY = float(
        os.environ.get("BATCH_SYNC_DELAY", DEFAULT_BATCH_SYNC_DELAY)
    )
    SEND_BATCH_NOTIFICATIONS = _env_bool("SEND_BATCH_NOTIFICATIONS", "false")
    GUS_API_URL = os.environ.get("GUS_API_URL", DEFAULT_GUS_API_URL).rstrip("/")
    GUS_API_KEY = os.environ.get("GUS_API_KEY")

    # Email
    EMAIL_PROVIDER = os.environ.get("EMAIL_PROVIDER", DEFAULT_EMAIL_PROVIDER).lower()
    RESEND_API_KEY = os.environ.get("RESEND_API_KEY")
    EMAIL_FROM = os.environ.get("EMAIL_FROM", DEFAULT_EMAIL_FROM)
    MINISTRY_EMAIL = os.environ.get("MINISTRY_EMAIL", DEFAULT_MINISTRY_EMAIL)
    SUPPORT_EMAIL = os.environ.get("SUPPORT_EMAIL", DEFAULT_SUPPORT_EMAIL)

    # Payments (Przelewy24)
    PAYMENTS_ENABLED = _env_bool("PAYMENTS_ENABLED", "false")
    P24_MERCHANT_ID = int(os.environ.get("P24_MERCHANT_ID", "0"))
    P24_POS_ID = int(os.environ.get("P24_POS_ID", "0"))
    P24_CRC = os.environ.get("P24_CRC", "")
    P24_API_KEY = os.environ.get("P24_API_KEY", "")
    P24_SANDBOX = _env_bool("P24_SANDBOX", DEFAULT_P24_SANDBOX)

    # Subscriptions and uploads
    TRIAL_DAYS = int(os.environ.get("TRIAL_DAYS", DEFAULT_TRIAL_DAYS))
    MAX_UPLOAD_SIZE = int(os.environ.get("MAX_UPLOAD_SIZE", DEFAULT_MAX_UPLOAD_SIZE))
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE

    # Redis Cache Configuration
    USE_REDIS_CACHE = _env_bool("USE_REDIS_CACHE", DEFAULT_USE_REDIS_CACHE)
    REDIS_HOST = os.environ.get("REDIS_HOST")
    REDIS_PORT = os.environ.get("REDIS_PORT")
    REDIS_DB = os.environ.get("REDIS_DB", "0")
    REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD")

    REDIS_URL = os.environ.get("REDIS_URL")
    if not REDIS_URL and USE_REDIS_CACHE and REDIS_HOST and REDIS_PORT:
        if REDIS_PASSWORD:
            REDIS_URL = (
                f"redis://:{REDIS_PASSWORD}@{REDIS_HOST}:{REDIS_PORT}/{REDIS_DB}"
            )
        else:
            REDIS_URL = f"redis://{REDIS_HOST}:{REDIS_PORT}/{REDIS_DB}"

    # SQLAlchemy Configuration
    SQLALCHEMY_TRACK_MODIFICATIONS = _env_bool("SQLALCHEMY_TRACK_MODIFICATIONS", "false")
    SQLALCHEMY_POOL_SIZE = int(
        os.environ.get("SQLALCHEMY_POOL_SIZE", DEFAULT_SQLALCHEMY_POOL_SIZE)
    )
    SQLALCHEMY_POOL_RECYCLE = int(
        os.environ.get("SQLALCHEMY_POOL_RECYCLE", DEFAULT_SQLALCHEMY_POOL_RECYCLE)
    )
    SQLALCHEMY_POOL_TIMEOUT = int(
        os.environ.get("SQLALCHEMY_POOL_TIMEOUT", DEFAULT_SQLALCHEMY_POOL_TIMEOUT)
    )
    SQLALCHEMY_MAX_OVERFLOW = int(
        os.environ.get("SQLALCHEMY_MAX_OVERFLOW", DEFAULT_SQLALCHEMY_MAX_OVERFLOW)
    )

    # Database Configuration
    # Priority 1: DATABASE_URL, priority 2: individual components
    DATABASE_TYPE = os.environ.get("DATABASE_TYPE", DEFAULT_DATABASE_TYPE).lower()
    DATABASE_HOST = os.environ.get("DATABASE_HOST", DEFAULT_DATABASE_HOST)
    DATABASE_PORT = os.environ.get("DATABASE_PORT")
    DATABASE_USER = os.environ.get("DATABASE_USER")
    DATABASE_PASSWORD = os.environ.get("DATABASE_PASSWORD")
    DATABASE_NAME = os.environ.get("DATABASE_NAME")
    DATABASE_PATH = os.environ.get("DATABASE_PATH", DEFAULT_DATABASE_PATH)

    SQLALCHEMY_DATABASE_URI: str | None = None

    # Logging Configuration
    LOG_LEVEL = os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", DEFAULT_LOG_FORMAT).lower()

    # CORS Configuration
    CORS_ENABLED = _env_bool("CORS_ENABLED", DEFAULT_CORS_ENABLED)
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    CORS_ALLOW_CREDENTIALS = _env_bool(
        "CORS_ALLOW_CREDENTIALS", DEFAULT_CORS_ALLOW_CREDENTIALS
    )
    CORS_MAX_AGE = int(os.environ.get("CORS_MAX_AGE", DEFAULT_CORS_MAX_AGE))

    # Rate Limiting Configuration
    RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", DEFAULT_RATE_LIMIT_ENABLED)
    RATE_LIMIT_CONFIGURATION = os.environ.get(
        "RATE_LIMIT_CONFIGURATION", DEFAULT_RATE_LIMIT_CONFIGURATION
    )
    RATE_LIMIT_STRICT = os.environ.get("RATE_LIMIT_STRICT", DEFAULT_RATE_LIMIT_STRICT)
    RATE_LIMIT_STRATEGY = os.environ.get(
        "RATE_LIMIT_STRATEGY", DEFAULT_RATE_LIMIT_STRATEGY
    ).lower()
    RATE_LIMIT_STORAGE = os.environ.get(
        "RATE_LIMIT_STORAGE", DEFAULT_RATE_LIMIT_STORAGE
    ).lower()

    # Pagination Configuration
    PAGE_LIMIT = int(os.environ.get("PAGE_LIMIT", DEFAULT_PAGE_LIMIT))
    MAX_PAGE_LIMIT = int(os.environ.get("MAX_PAGE_LIMIT", DEFAULT_MAX_PAGE_LIMIT))

    @classmethod
    def validate(cls):
        """Validate configuration consistency after loading.

        This method should be called after the configuration is loaded
        to ensure all required variables are present and consistent.
        """
        cls._build_database_uri()
        cls._override_from_environment()

        cls._validate_database_type()
        cls._validate_log_format()
        cls._validate_rate_limiting()
        cls._validate_jwt()
        cls._validate_email()
        cls._validate_payments()
        cls._validate_redis()
        cls._validate_database_uri()

        cls._log_validation_status()

    @classmethod
    def _override_from_environment(cls):
        """Override per-environment defaults with environment variables if set."""
        env_auth = os.environ.get("AUTH_ENABLED")
        if env_auth is not None:
            cls.AUTH_ENABLED = env_auth.lower() in BOOLEAN_TRUE_VALUES

    @classmethod
    def _validate_database_type(cls):
        """Validate DATABASE_TYPE configuration."""
        if cls.DATABASE_TYPE not in VALID_DATABASE_TYPES:
            raise ValueError(ERROR_DATABASE_TYPE_INVALID)

    @classmethod
    def _validate_log_format(cls):
        """Validate LOG_FORMAT configuration."""
        if cls.LOG_FORMAT not in ["json", "text"]:
            logger.warning(
                f"Invalid LOG_FORMAT '{cls.LOG_FORMAT}'. Using default 'text'."
            )
            cls.LOG_FORMAT = "text"

    @classmethod
    def _validate_rate_limiting(cls):
        """Validate rate limiting configuration."""
        if cls.RATE_LIMIT_STRATEGY not in VALID_RATE_LIMIT_STRATEGIES:
            logger.warning(
                f"Invalid RATE_LIMIT_STRATEGY '{cls.RATE_LIMIT_STRATEGY}'. "
                f"Using default '{DEFAULT_RATE_LIMIT_STRATEGY}'."
            )
            cls.RATE_LIMIT_STRATEGY = DEFAULT_RATE_LIMIT_STRATEGY

        if cls.RATE_LIMIT_STORAGE not in VALID_RATE_LIMIT_STORAGE:
            logger.warning(
                f"Invalid RATE_LIMIT_STORAGE '{cls.RATE_LIMIT_STORAGE}'. "
                f"Using default '{DEFAULT_RATE_LIMIT_STORAGE}'."
            )
            cls.RATE_LIMIT_STORAGE = DEFAULT_RATE_LIMIT_STORAGE

        # The in-memory store is process-local, so multiple workers each count
        # their own hits.
        if cls.RATE_LIMIT_ENABLED and cls.RATE_LIMIT_STORAGE == "memory":
            logger.warning(
                "RATE_LIMIT_STORAGE is set to 'memory'. Limits are per process. "
                "Use 'redis' when running several workers."
            )

    @classmethod
    def _validate_jwt(cls):
        """Validate JWT configuration."""
        if not cls.JWT_ALGORITHM:
            raise ValueError(ERROR_JWT_ALGORITHM_NOT_SET)
        if cls.AUTH_ENABLED and not cls.JWT_SECRET_KEY:
            raise ValueError(ERROR_JWT_SECRET_NOT_SET)

    @classmethod
    def _validate_email(cls):
        """Validate the email provider configuration."""
        if cls.EMAIL_PROVIDER not in VALID_EMAIL_PROVIDERS:
            raise ValueError(ERROR_EMAIL_PROVIDER_INVALID)
        if cls.EMAIL_PROVIDER == "resend" and not cls.RESEND_API_KEY:
            raise ValueError(ERROR_RESEND_API_KEY_REQUIRED)

    @classmethod
    def _validate_payments(cls):
        """Validate Przelewy24 credentials when payments are enabled."""
        if not cls.PAYMENTS_ENABLED:
            return
        if not all([cls.P24_MERCHANT_ID, cls.P24_POS_ID, cls.P24_CRC, cls.P24_API_KEY]):
            raise ValueError(ERROR_P24_CONFIG_INCOMPLETE)

    @classmethod
    def _validate_redis(cls):
        """Validate Redis configuration."""
        if cls.USE_REDIS_CACHE and not cls.REDIS_URL:
            logger.error(ERROR_REDIS_URL_REQUIRED)
            raise ValueError(ERROR_REDIS_URL_REQUIRED)

        if not cls.USE_REDIS_CACHE and cls.REDIS_URL:
            logger.info("USE_REDIS_CACHE is disabled. REDIS_URL will be ignored.")
            cls.REDIS_URL = None

    @classmethod
    def _validate_database_uri(cls):
        """Validate SQLALCHEMY_DATABASE_URI if required."""
        if (
            getattr(cls, "REQUIRES_DATABASE_URL", False)
            and not cls.SQLALCHEMY_DATABASE_URI
        ):
            raise ValueError(ERROR_DATABASE_URL_NOT_SET)

    @classmethod
    def _log_validation_status(cls):
        """Log the validation status for debugging."""
        logger.debug(
            f"Validating {cls.__name__}: "
            f"AUTH_ENABLED={cls.AUTH_ENABLED}, "
            f"EMAIL_PROVIDER={cls.EMAIL_PROVIDER}, "
            f"PAYMENTS_ENABLED={cls.PAYMENTS_ENABLED}, "
            f"CORS_ENABLED={cls.CORS_ENABLED}, "
            f"RATE_LIMIT_ENABLED={cls.RATE_LIMIT_ENABLED}, "
            f"JWT_SECRET_KEY={'SET' if cls.JWT_SECRET_KEY else 'NOT SET'}"
        )

    @classmethod
    def _build_database_uri(cls):
        """Build SQLALCHEMY_DATABASE_URI from environment variables.

        Priority:
        1. Use SQLALCHEMY_DATABASE_URI if already set in the class (e.g., TestingConfig)
        2. Use DATABASE_URL if provided (e.g., from cloud providers)
        3. Build from individual components (DATABASE_TYPE, DATABASE_HOST, etc.)
        4. Use class default (for development/testing)
        """
        if cls.SQLALCHEMY_DATABASE_URI:
            return

        database_url = os.environ.get("DATABASE_URL")
        if database_url:
            # Hosted Postgres providers still hand out the legacy scheme
            if database_url.startswith("postgres://"):
                database_url = "postgresql://" + database_url[len("postgres://") :]
            cls.SQLALCHEMY_DATABASE_URI = database_url
            return

        cls._validate_production_database_config()

        if cls.DATABASE_TYPE == "sqlite":
            cls._build_sqlite_uri()
        elif cls.DATABASE_TYPE in ("postgresql", "mysql"):
            cls._build_sql_server_uri()

    @classmethod
    def _validate_production_database_config(cls):
        """Validate database configuration for production/staging environments."""
        if not getattr(cls, "REQUIRES_DATABASE_URL", False):
            return

        if cls.DATABASE_TYPE == "sqlite":
            raise ValueError(ERROR_DATABASE_CONFIG_INCOMPLETE)

        if not all(
            [
                cls.DATABASE_HOST,
                cls.DATABASE_USER,
                cls.DATABASE_PASSWORD,
                cls.DATABASE_NAME,
            ]
        ):
            raise ValueError(ERROR_DATABASE_CONFIG_INCOMPLETE)

    @classmethod
    def _build_sqlite_uri(cls):
        """Build SQLite database URI."""
        db_path = Path(cls.DATABASE_PATH).resolve()
        cls.SQLALCHEMY_DATABASE_URI = f"sqlite:///{db_path}"

    @classmethod
    def _build_sql_server_uri(cls):
        """Build PostgreSQL or MySQL database URI."""
        if not all(
            [
                cls.DATABASE_HOST,
                cls.DATABASE_USER,
                cls.DATABASE_PASSWORD,
                cls.DATABASE_NAME,
            ]
        ):
            return

        if not cls.DATABASE_PORT:
            if cls.DATABASE_TYPE == "postgresql":
                cls.DATABASE_PORT = DEFAULT_DATABASE_PORT_POSTGRESQL
            elif cls.DATABASE_TYPE == "mysql":
                cls.DATABASE_PORT = DEFAULT_DATABASE_PORT_MYSQL

        driver = "postgresql" if cls.DATABASE_TYPE == "postgresql" else "mysql+pymysql"
        cls.SQLALCHEMY_DATABASE_URI = (
            f"{driver}://{cls.DATABASE_USER}:{cls.DATABASE_PASSWORD}"
            f"@{cls.DATABASE_HOST}:{cls.DATABASE_PORT}/{cls.DATABASE_NAME}"
        )


class DevelopmentConfig(Config):
    """Configuration for the development environment."""

    # Mock developer in development unless AUTH_ENABLED is set explicitly
    AUTH_ENABLED = False

    DEBUG = True
    LOG_LEVEL = "DEBUG"
    SQLALCHEMY_DATABASE_URI = f"sqlite:///{Path('dev.db').resolve()}"


class TestingConfig(Config):
    """Configuration for the testing environment."""

    AUTH_ENABLED = False
    JWT_SECRET_KEY = "test-jwt-secret-key-with-at-least-32-bytes"  # nosec B105

    # Rate limiting disabled in testing to avoid interference with tests
    RATE_LIMIT_ENABLED = False

    EMAIL_PROVIDER = "console"
    BATCH_SYNC_DELAY = 0.0
    BATCH_SYNC_TOKEN = "test-batch-sync-token"  # nosec B105
    CRON_SECRET = "test-cron-secret"  # nosec B105
    MINISTRY_API_KEY = "test-ministry-api-key"  # nosec B105
    ADMIN_EMAILS = ["admin@otoraport.pl"]

    TESTING = True
    LOG_LEVEL = "DEBUG"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"


class IntegrationConfig(Config):
    """Configuration for the integration testing environment."""

    AUTH_ENABLED = True
    JWT_SECRET_KEY = os.environ.get(
        "JWT_SECRET_KEY", "integration-jwt-secret-key-with-32-bytes"
    )

    RATE_LIMIT_ENABLED = False
    EMAIL_PROVIDER = "console"
    BATCH_SYNC_DELAY = 0.0

    TESTING = True
    LOG_LEVEL = "DEBUG"
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///:memory:")


class StagingConfig(Config):
    """Configuration for the staging environment."""

    AUTH_ENABLED = True
    REQUIRES_DATABASE_URL = True
    COOKIE_SECURE = True

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")


class ProductionConfig(Config):
    """Configuration for the production environment."""

    AUTH_ENABLED = True
    REQUIRES_DATABASE_URL = True
    COOKIE_SECURE = True
    P24_SANDBOX = _env_bool("P24_SANDBOX", "false")

    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
