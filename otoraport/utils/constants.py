# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Application constants.

This module defines constant values used throughout the application.
These constants help avoid code duplication and make the codebase easier
to maintain.
"""

# Configuration error messages
ERROR_JWT_SECRET_NOT_SET = "JWT_SECRET_KEY environment variable is not set."  # nosec B105
ERROR_JWT_ALGORITHM_NOT_SET = "JWT_ALGORITHM environment variable is not set."
ERROR_DATABASE_URL_NOT_SET = (
    "DATABASE_URL or database connection variables are not set."
)
ERROR_DATABASE_TYPE_INVALID = "DATABASE_TYPE must be one of: sqlite, postgresql, mysql."
ERROR_DATABASE_CONFIG_INCOMPLETE = "Database configuration incomplete. Provide either DATABASE_URL or all required connection variables (HOST, PORT, USER, PASSWORD, NAME for postgresql/mysql)."
ERROR_REDIS_URL_REQUIRED = (
    "REDIS_URL or REDIS_HOST is required when USE_REDIS_CACHE is enabled."
)
ERROR_EMAIL_PROVIDER_INVALID = "EMAIL_PROVIDER must be one of: console, resend."
ERROR_RESEND_API_KEY_REQUIRED = (
    "RESEND_API_KEY is required when EMAIL_PROVIDER is 'resend'."
)
ERROR_P24_CONFIG_INCOMPLETE = (
    "P24_MERCHANT_ID, P24_POS_ID, P24_CRC and P24_API_KEY are required "
    "when payments are enabled."
)

# Default configuration values
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "text"
DEFAULT_SERVICE_PORT = "5000"
DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_FRONTEND_URL = "http://localhost:3000"

# Pagination defaults
DEFAULT_PAGE_LIMIT = 20
DEFAULT_MAX_PAGE_LIMIT = 100

# Authentication defaults
DEFAULT_AUTH_ENABLED = "true"
DEFAULT_JWT_ALGORITHM = "HS256"
DEFAULT_JWT_EXPIRATION_HOURS = "24"
DEFAULT_MAGIC_LINK_EXPIRATION_MINUTES = "15"
DEFAULT_MOCK_DEVELOPER_ID = "00000000-0000-0000-0000-000000000001"
DEFAULT_MOCK_DEVELOPER_EMAIL = "developer@example.com"
ACCESS_TOKEN_COOKIE = "access_token"  # nosec B105
GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"  # nosec B105
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"

# External Services Configuration
DEFAULT_EXTERNAL_SERVICES_TIMEOUT = "5"
DEFAULT_N8N_TIMEOUT = "60"
DEFAULT_USE_REDIS_CACHE = "false"
DEFAULT_N8N_WEBHOOK_URL = "http://localhost:5678/webhook"
DEFAULT_BATCH_SYNC_DELAY = "1"
DEFAULT_GUS_API_URL = "https://wl-api.mf.gov.pl/api"

# Email defaults
DEFAULT_EMAIL_PROVIDER = "console"
DEFAULT_EMAIL_FROM = "OTORAPORT <noreply@otoraport.pl>"
DEFAULT_MINISTRY_EMAIL = "raportowanie@gov.pl"
DEFAULT_SUPPORT_EMAIL = "support@otoraport.pl"
RESEND_API_URL = "https://api.resend.com/emails"
VALID_EMAIL_PROVIDERS = ("console", "resend")

# Subscription defaults
DEFAULT_TRIAL_DAYS = "14"
DEFAULT_MAX_UPLOAD_SIZE = str(10 * 1024 * 1024)

# Przelewy24
P24_SANDBOX_API_URL = "https://sandbox.przelewy24.pl/api/v1"
P24_PRODUCTION_API_URL = "https://secure.przelewy24.pl/api/v1"
DEFAULT_P24_SANDBOX = "true"

# Database default values
DEFAULT_DATABASE_TYPE = "sqlite"
DEFAULT_DATABASE_HOST = "localhost"
DEFAULT_DATABASE_PORT_POSTGRESQL = "5432"
DEFAULT_DATABASE_PORT_MYSQL = "3306"
DEFAULT_DATABASE_PATH = "dev.db"

# SQLAlchemy default values
DEFAULT_SQLALCHEMY_POOL_SIZE = "5"
DEFAULT_SQLALCHEMY_POOL_RECYCLE = "3600"
DEFAULT_SQLALCHEMY_POOL_TIMEOUT = "30"
DEFAULT_SQLALCHEMY_MAX_OVERFLOW = "10"

# CORS default values
DEFAULT_CORS_ENABLED = "true"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"
DEFAULT_CORS_ALLOW_CREDENTIALS = "true"
DEFAULT_CORS_MAX_AGE = "3600"

# Rate Limiting default values
DEFAULT_RATE_LIMIT_ENABLED = "true"
DEFAULT_RATE_LIMIT_CONFIGURATION = "60 per minute"
DEFAULT_RATE_LIMIT_STRICT = "10 per minute"
DEFAULT_RATE_LIMIT_STRATEGY = "fixed-window"
DEFAULT_RATE_LIMIT_STORAGE = "memory"

# Valid database types
VALID_DATABASE_TYPES = ("sqlite", "postgresql", "mysql")

# Valid rate limit strategies
VALID_RATE_LIMIT_STRATEGIES = ("fixed-window", "moving-window", "sliding-window-counter")
VALID_RATE_LIMIT_STORAGE = ("redis", "memory")

# Boolean value representations
BOOLEAN_TRUE_VALUES = ("true", "yes", "1")
