# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Utility modules for the application.

This package contains utility functions and classes used throughout the application:
- bearer: Shared-secret guard for scheduled job endpoints
- constants: Application-wide constants and error messages
- jwt_utils: JWT session tokens, cookie handling and auth decorators
- limiter: Flask-Limiter instance for rate limiting
- logger: Structured logging configuration
- responses: JSON error responses for decorators
"""

from otoraport.utils.bearer import require_bearer_token
from otoraport.utils.jwt_utils import admin_required, require_jwt_auth
from otoraport.utils.limiter import limiter
from otoraport.utils.logger import logger
from otoraport.utils.responses import json_error

__all__ = [
    # Authentication
    "require_jwt_auth",
    "admin_required",
    "require_bearer_token",
    # Rate limiting
    "limiter",
    # Logging
    "logger",
    # Responses
    "json_error",
]
