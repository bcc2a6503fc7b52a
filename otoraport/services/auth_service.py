# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Developer sign-up and sign-in.

Three ways in, all ending with the same session JWT:

- password, when one was chosen at registration
- magic link: a short-lived, single-use JWT emailed as a link
- Google OAuth (authorization code flow)

A magic link is single use because its issue time (``issued_at``, with
microseconds) must not be earlier than the developer's ``last_login_at``,
which every sign-in moves forward.
"""

from datetime import timezone
from typing import Any
from urllib.parse import urlencode

import jwt
import requests
from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from otoraport.models.activity_log import ActivityLog
from otoraport.models.db import db
from otoraport.models.developer import Developer
from otoraport.models.types import utcnow
from otoraport.services.email_service import send_magic_link_email, send_welcome_email
from otoraport.services.file_regeneration import public_file_url
from otoraport.services.validation import generate_client_id, normalize_identifier
from otoraport.utils.constants import (
    GOOGLE_AUTHORIZE_URL,
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
)
from otoraport.utils.jwt_utils import (
    MAGIC_LINK_PURPOSE,
    create_magic_link_token,
    decode_token,
)
from otoraport.utils.logger import logger
from otoraport.utils.version import get_api_version

CLIENT_ID_ATTEMPTS = 5
GOOGLE_SCOPES = "openid email profile"


class AuthError(Exception):
    """Sign-in attempt rejected; the message is safe to show to the user."""


def _api_url(path: str) -> str:
    return f"{current_app.config['BASE_URL']}/{get_api_version()}{path}"


def _unique_client_id(company_name: str) -> str:
    for _ in range(CLIENT_ID_ATTEMPTS):
        client_id = generate_client_id(company_name)
        if Developer.get_by_client_id(client_id) is None:
            return client_id
    raise RuntimeError("Could not generate a unique client_id")


def register_developer(data: dict[str, Any], oauth_provider: str | None = None) -> Developer:
    """Create a developer on a fresh trial and send the welcome email.

    Args:
        data: Validated registration fields (``email``, ``company_name`` and
            optionally ``name``, ``nip``, ``regon``, ``phone``, ``password``).
        oauth_provider: Set when the account comes from an OAuth sign-in.

    Raises:
        sqlalchemy.exc.IntegrityError: If the email or NIP is already taken.
    """
    fields = {
        key: data[key]
        for key in ("name", "phone", "website", "regon")
        if data.get(key) is not None
    }
    if data.get("nip"):
        fields["nip"] = normalize_identifier(data["nip"])
    if data.get("password"):
        fields["password_hash"] = generate_password_hash(data["password"])

    client_id = _unique_client_id(data["company_name"])
    developer = Developer.create(
        email=data["email"],
        company_name=data["company_name"],
        client_id=client_id,
        trial_days=current_app.config["TRIAL_DAYS"],
        oauth_provider=oauth_provider,
        xml_url=public_file_url(client_id, "xml"),
        md_url=public_file_url(client_id, "md"),
        **fields,
    )
    ActivityLog.record(
        "register",
        developer_id=developer.id,
        message="Utworzono konto z okresem próbnym",
    )
    db.session.commit()

    logger.info(
        "developer_registered",
        developer_id=str(developer.id),
        client_id=developer.client_id,
        oauth_provider=oauth_provider,
    )
    send_welcome_email(developer)
    return developer


def record_login(developer: Developer, method: str) -> None:
    developer.last_login_at = utcnow()
    ActivityLog.record("login", developer_id=developer.id, details={"method": method})
    db.session.commit()
    logger.info("developer_logged_in", developer_id=str(developer.id), method=method)


def authenticate_password(email: str, password: str) -> Developer:
    """Check an email and password pair.

    Raises:
        AuthError: For an unknown email, an account without a password or a
            wrong password. The message does not reveal which.
    """
    developer = Developer.get_by_email(email)
    if (
        developer is None
        or not developer.password_hash
        or not check_password_hash(developer.password_hash, password)
    ):
        logger.info("password_login_rejected", email=email)
        raise AuthError("Nieprawidłowy email lub hasło")
    record_login(developer, "password")
    return developer


def request_magic_link(email: str) -> bool:
    """Email a sign-in link if the address belongs to a developer.

    Returns:
        True if a link was sent. Callers answer the same way either way.
    """
    developer = Developer.get_by_email(email)
    if developer is None:
        logger.info("magic_link_unknown_email", email=email)
        return False

    token = create_magic_link_token(developer)
    link = f"{_api_url('/auth/magic-link/verify')}?{urlencode({'token': token})}"
    return send_magic_link_email(
        developer, link, current_app.config["MAGIC_LINK_EXPIRATION_MINUTES"]
    )


def verify_magic_link(token: str) -> Developer:
    """Exchange a magic-link token for its developer and record the sign-in.

    Raises:
        AuthError: If the token is invalid, expired, not a magic-link token,
            already used, or its developer no longer exists.
    """
    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Link logowania wygasł") from e
    except jwt.InvalidTokenError as e:
        raise AuthError("Nieprawidłowy link logowania") from e

    if payload.get("purpose") != MAGIC_LINK_PURPOSE:
        raise AuthError("Nieprawidłowy link logowania")

    developer = Developer.get_by_id(str(payload.get("developer_id")))
    if developer is None:
        raise AuthError("Nieprawidłowy link logowania")

    if developer.last_login_at is not None:
        last_login = developer.last_login_at.replace(tzinfo=timezone.utc).timestamp()
        issued_at = payload.get("issued_at", payload.get("iat", 0))
        if issued_at < last_login:
            logger.info("magic_link_reused", developer_id=str(developer.id))
            raise AuthError("Link logowania został już wykorzystany")

    record_login(developer, "magic_link")
    return developer


def google_redirect_uri() -> str:
    return _api_url("/auth/oauth/google/callback")


def google_authorization_url(state: str) -> str:
    """URL the browser is sent to for Google sign-in."""
    params = {
        "client_id": current_app.config["GOOGLE_CLIENT_ID"],
        "redirect_uri": google_redirect_uri(),
        "response_type": "code",
        "scope": GOOGLE_SCOPES,
        "state": state,
        "access_type": "online",
        "prompt": "select_account",
    }
    return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"


def _google_userinfo(code: str) -> dict[str, Any]:
    config = current_app.config
    timeout = config.get("EXTERNAL_SERVICES_TIMEOUT", 5)
    try:
        token_response = requests.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": config["GOOGLE_CLIENT_ID"],
                "client_secret": config["GOOGLE_CLIENT_SECRET"],
                "redirect_uri": google_redirect_uri(),
                "grant_type": "authorization_code",
            },
            timeout=timeout,
        )
        if token_response.status_code != 200:
            logger.warning(
                "google_token_exchange_failed", status_code=token_response.status_code
            )
            raise AuthError("Logowanie przez Google nie powiodło się")

        access_token = token_response.json().get("access_token")
        userinfo_response = requests.get(
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error("google_oauth_request_failed", error=str(e))
        raise AuthError("Logowanie przez Google nie powiodło się") from e

    if userinfo_response.status_code != 200:
        logger.warning(
            "google_userinfo_failed", status_code=userinfo_response.status_code
        )
        raise AuthError("Logowanie przez Google nie powiodło się")
    return userinfo_response.json()


def complete_google_login(code: str) -> tuple[Developer, bool]:
    """Finish the OAuth flow: find or create the developer for the Google account.

    Returns:
        Tuple of (developer, created).

    Raises:
        AuthError: If Google rejects the code or the email is unverified.
    """
    userinfo = _google_userinfo(code)
    email = userinfo.get("email")
    if not email or not userinfo.get("email_verified", False):
        raise AuthError("Konto Google nie ma zweryfikowanego adresu email")

    developer = Developer.get_by_email(email)
    created = developer is None
    if created:
        name = userinfo.get("name")
        developer = register_developer(
            {"email": email, "name": name, "company_name": name or email.split("@")[0]},
            oauth_provider="google",
        )

    record_login(developer, "google")
    return developer, created
