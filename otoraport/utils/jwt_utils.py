# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""JWT authentication utilities.

Developers authenticate with a JWT carried in the httpOnly ``access_token``
cookie. The token is issued by the magic-link and Google sign-in flows and
carries the ``developer_id`` claim that scopes every tenant query.

When ``AUTH_ENABLED`` is false (development and unit tests), validation is
skipped and the request runs as ``MOCK_DEVELOPER_ID``.
"""

import uuid
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any

import jwt
from flask import Response, current_app, g, request

from otoraport.utils.constants import ACCESS_TOKEN_COOKIE
from otoraport.utils.logger import logger
from otoraport.utils.responses import json_error

MAGIC_LINK_PURPOSE = "magic_link"


def _encode(
    claims: dict[str, Any], lifetime: timedelta, now: datetime | None = None
) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + lifetime}
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET_KEY"],
        algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"),
    )


def create_access_token(developer) -> str:
    """Issue the session token for a developer."""
    return _encode(
        {"developer_id": str(developer.id), "email": developer.email},
        timedelta(hours=current_app.config["JWT_EXPIRATION_HOURS"]),
    )


def create_magic_link_token(developer) -> str:
    """Issue a short-lived sign-in token to be emailed as a link.

    ``iat`` only has whole seconds, so the token also carries ``issued_at``
    with microseconds for the single-use check.
    """
    now = datetime.now(timezone.utc)
    return _encode(
        {
            "developer_id": str(developer.id),
            "email": developer.email,
            "purpose": MAGIC_LINK_PURPOSE,
            "issued_at": now.timestamp(),
        },
        timedelta(minutes=current_app.config["MAGIC_LINK_EXPIRATION_MINUTES"]),
        now=now,
    )


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a token.

    Raises:
        jwt.InvalidTokenError: If the signature, expiry or format is invalid.
    """
    return jwt.decode(
        token,
        current_app.config["JWT_SECRET_KEY"],
        algorithms=[current_app.config.get("JWT_ALGORITHM", "HS256")],
    )


def set_auth_cookie(response, token: str):
    """Attach the session cookie to a response."""
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token,
        max_age=current_app.config["JWT_EXPIRATION_HOURS"] * 3600,
        httponly=True,
        secure=current_app.config.get("COOKIE_SECURE", False),
        samesite="Lax",
    )
    return response


def clear_auth_cookie(response):
    response.delete_cookie(ACCESS_TOKEN_COOKIE, httponly=True, samesite="Lax")
    return response


def _extract_token() -> tuple[str | None, Response | None]:
    """Extract JWT token from access_token httpOnly cookie.

    Returns:
        A tuple of (token, error_response). If successful, token is the JWT
        string and error_response is None. If failed, token is None and
        error_response is a 401 JSON response.
    """
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)

    if not token:
        return None, json_error(
            401,
            error="Missing authentication token",
            message=f"{ACCESS_TOKEN_COOKIE} cookie required",
        )

    return token, None


def _decode_jwt_token(token: str) -> tuple[dict | None, Response | None]:
    try:
        return decode_token(token), None

    except jwt.ExpiredSignatureError:
        return None, json_error(
            401, error="Token expired", message="JWT token has expired"
        )

    except jwt.InvalidTokenError as e:
        logger.warning("invalid_jwt_token", error=str(e))
        return None, json_error(
            401, error="Invalid token", message="JWT token is invalid"
        )


def _validate_token_claims(payload: dict) -> Response | None:
    """Reject tokens without a usable developer_id or issued for sign-in links."""
    if payload.get("purpose") == MAGIC_LINK_PURPOSE:
        return json_error(
            401,
            error="Invalid token payload",
            message="sign-in link token cannot be used as a session",
        )

    try:
        uuid.UUID(str(payload.get("developer_id")))
    except ValueError:
        return json_error(
            401,
            error="Invalid token payload",
            message="developer_id missing in token",
        )
    return None


def _build_user_context(payload: dict) -> dict:
    return {
        "developer_id": uuid.UUID(str(payload["developer_id"])),
        "email": payload.get("email"),
        "token_issued_at": payload.get("iat"),
        "token_expires_at": payload.get("exp"),
    }


def require_jwt_auth(f):
    """Decorator to require JWT authentication on Flask routes.

    Validates the ``access_token`` cookie and stores the developer context in
    ``g.user_context`` (``developer_id``, ``email``, token timestamps). In mock
    mode the context is filled from ``MOCK_DEVELOPER_ID`` and
    ``MOCK_DEVELOPER_EMAIL``.

    Raises:
        401: If the cookie is missing or the token is invalid or expired.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_app.config.get("AUTH_ENABLED", True):
            g.user_context = {
                "developer_id": uuid.UUID(current_app.config["MOCK_DEVELOPER_ID"]),
                "email": current_app.config.get("MOCK_DEVELOPER_EMAIL"),
            }
            return f(*args, **kwargs)

        token, error = _extract_token()
        if error:
            return error
        assert token is not None

        payload, error = _decode_jwt_token(token)
        if error:
            return error
        assert payload is not None

        error = _validate_token_claims(payload)
        if error:
            return error

        g.user_context = _build_user_context(payload)

        if current_app.config.get("LOG_JWT_VALIDATION", False):
            logger.debug(
                "jwt_validated",
                developer_id=str(g.user_context["developer_id"]),
                endpoint=request.endpoint,
            )

        return f(*args, **kwargs)

    return decorated_function


def get_developer_id_from_jwt() -> uuid.UUID:
    """Return the developer_id of the authenticated request.

    Raises:
        RuntimeError: If called before @require_jwt_auth.
    """
    if not hasattr(g, "user_context") or "developer_id" not in g.user_context:
        raise RuntimeError(
            "get_developer_id_from_jwt() called before JWT authentication. "
            "Ensure @require_jwt_auth decorator is applied to the route."
        )
    return g.user_context["developer_id"]


def get_current_developer():
    """Developer of the authenticated request, or None if it no longer exists."""
    from otoraport.models.developer import Developer

    return Developer.get_by_id(get_developer_id_from_jwt())


def is_admin(developer) -> bool:
    admins = current_app.config.get("ADMIN_EMAILS") or []
    return developer is not None and developer.email.lower() in admins


def admin_required(f):
    """Allow only developers whose email is listed in ``ADMIN_EMAILS``.

    Must be applied after @require_jwt_auth.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        developer = get_current_developer()
        if not is_admin(developer):
            logger.warning(
                "admin_access_denied",
                developer_id=str(get_developer_id_from_jwt()),
            )
            return json_error(
                403, error="Forbidden", message="Administrator access required"
            )
        return f(*args, **kwargs)

    return decorated_function
