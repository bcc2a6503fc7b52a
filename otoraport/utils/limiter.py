# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Flask-Limiter instance for rate limiting.

Authenticated requests are bucketed per developer, anonymous ones (public
feeds, NIP lookup, magic links) per client address.
"""

from flask import current_app, g
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


def rate_limit_key() -> str:
    """Return the rate limit bucket for the current request."""
    user_context = getattr(g, "user_context", None)
    if user_context and user_context.get("developer_id"):
        return f"developer:{user_context['developer_id']}"
    return get_remote_address()


def default_limit() -> str:
    """Limit applied to regular API endpoints."""
    return current_app.config["RATE_LIMIT_CONFIGURATION"]


def strict_limit() -> str:
    """Limit applied to unauthenticated endpoints that send email or call out."""
    return current_app.config["RATE_LIMIT_STRICT"]


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=[],
)

__all__ = ["limiter", "default_limit", "strict_limit", "rate_limit_key"]
