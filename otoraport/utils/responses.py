# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Response helpers for decorators that short-circuit a request."""

from typing import Any

from flask import Response, jsonify


def json_error(status_code: int, **payload: Any) -> Response:
    """JSON response with its status already set.

    Flask-RESTful passes Response objects through untouched, so decorators on
    Resource methods can return this directly.
    """
    response = jsonify(payload)
    response.status_code = status_code
    return response
