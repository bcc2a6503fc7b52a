# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Shared-secret bearer tokens for machine callers (cron jobs, batch sync)."""

import hmac
from functools import wraps

from flask import current_app, request

from otoraport.utils.logger import logger
from otoraport.utils.responses import json_error


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def require_bearer_token(config_key: str):
    """Require ``Authorization: Bearer <app.config[config_key]>``.

    An unset secret locks the endpoint: every call gets 401.

    Examples:
        >>> class BatchSyncResource(Resource):
        ...     @require_bearer_token("BATCH_SYNC_TOKEN")
        ...     def post(self):
        ...         ...
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            expected = current_app.config.get(config_key)
            provided = _bearer_token()
            if not expected or not provided or not hmac.compare_digest(
                provided.encode(), expected.encode()
            ):
                logger.warning(
                    "bearer_token_rejected",
                    endpoint=request.endpoint,
                    configured=bool(expected),
                    remote_addr=request.remote_addr,
                )
                return json_error(401, error="Unauthorized", message="Invalid token")
            return f(*args, **kwargs)

        return decorated_function

    return decorator
