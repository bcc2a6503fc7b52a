# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""``limit`` / ``offset`` query string handling shared by list endpoints."""

from flask import current_app, request

from otoraport.resources.constants import (
    MSG_INVALID_PAGINATION,
    MSG_LIMIT_TOO_SMALL,
    MSG_OFFSET_NEGATIVE,
)
from otoraport.utils.logger import logger


def parse_pagination():
    """Read ``limit`` and ``offset`` from the query string.

    ``limit`` defaults to ``PAGE_LIMIT`` and is capped at ``MAX_PAGE_LIMIT``.

    Returns:
        tuple: ``(limit, offset, None)`` on success or
        ``(None, None, (body, 400))`` when a value is invalid.
    """
    try:
        limit = request.args.get(
            "limit", default=current_app.config["PAGE_LIMIT"], type=int
        )
        offset = request.args.get("offset", default=0, type=int)
    except (TypeError, ValueError) as e:
        logger.error("Invalid pagination parameters: %s", str(e))
        return None, None, ({"message": MSG_INVALID_PAGINATION, "error": str(e)}, 400)

    if limit < 1:
        return None, None, ({"message": MSG_LIMIT_TOO_SMALL}, 400)
    if offset < 0:
        return None, None, ({"message": MSG_OFFSET_NEGATIVE}, 400)
    return min(limit, current_app.config["MAX_PAGE_LIMIT"]), offset, None
