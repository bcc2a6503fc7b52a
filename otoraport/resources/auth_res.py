# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Authentication REST API resources.

Registration, password and magic-link sign-in, Google OAuth and logout.
Every successful sign-in answers with the ``access_token`` httpOnly cookie;
the browser flows (magic link, Google callback) redirect to the dashboard.
"""

import hmac
import secrets

from flask import current_app, jsonify, make_response, redirect, request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from otoraport.models.db import db
from otoraport.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    ERROR_INTEGRITY,
    ERROR_INTEGRITY_LOG,
    ERROR_VALIDATION,
    ERROR_VALIDATION_LOG,
    MSG_LOGGED_IN,
    MSG_LOGGED_OUT,
    MSG_MAGIC_LINK_SENT,
    MSG_MISSING_CODE,
    MSG_MISSING_TOKEN,
    MSG_NO_INPUT_DATA,
    MSG_OAUTH_NOT_CONFIGURED,
    MSG_OAUTH_STATE_MISMATCH,
    MSG_REGISTERED,
    OAUTH_STATE_COOKIE,
)
from otoraport.schemas.auth_schema import LoginSchema, MagicLinkRequestSchema
from otoraport.schemas.developer_schema import DeveloperRegisterSchema, DeveloperSchema
from otoraport.services.auth_service import (
    AuthError,
    authenticate_password,
    complete_google_login,
    google_authorization_url,
    register_developer,
    request_magic_link,
    verify_magic_link,
)
from otoraport.utils.jwt_utils import (
    clear_auth_cookie,
    create_access_token,
    require_jwt_auth,
    set_auth_cookie,
)
from otoraport.utils.limiter import default_limit, limiter, strict_limit
from otoraport.utils.logger import logger

OAUTH_STATE_MAX_AGE = 600


def _signed_in_response(developer, message, status_code=200):
    response = make_response(
        jsonify({"message": message, "developer": DeveloperSchema().dump(developer)}),
        status_code,
    )
    return set_auth_cookie(response, create_access_token(developer))


def _dashboard_redirect(developer, path="/dashboard"):
    response = redirect(f"{current_app.config['FRONTEND_URL']}{path}")
    return set_auth_cookie(response, create_access_token(developer))


class RegisterResource(Resource):
    """POST /auth/register: create a developer on a fresh trial."""

    @limiter.limit(strict_limit)
    def post(self):
        """Register a developer and sign them in.

        Expected JSON body:
            email (str): Login address.
            company_name (str): Company name.
            name, nip, regon, phone, website (str, optional)
            password (str, optional): At least 8 characters.

        Returns:
            Response: Developer profile with the session cookie and HTTP 201,
            422 on validation error, 409 if the account already exists.
        """
        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        try:
            data = DeveloperRegisterSchema().load(json_data)
        except ValidationError as err:
            logger.error(ERROR_VALIDATION_LOG, err.messages)
            return {"message": ERROR_VALIDATION, "errors": err.messages}, 422

        try:
            developer = register_developer(data)
        except IntegrityError as e:
            db.session.rollback()
            logger.error(ERROR_INTEGRITY_LOG, str(e))
            return {"message": ERROR_INTEGRITY, "error": str(e)}, 409
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        return _signed_in_response(developer, MSG_REGISTERED, 201)


class LoginResource(Resource):
    """POST /auth/login: password sign-in."""

    @limiter.limit(strict_limit)
    def post(self):
        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        try:
            data = LoginSchema().load(json_data)
        except ValidationError as err:
            return {"message": ERROR_VALIDATION, "errors": err.messages}, 422

        try:
            developer = authenticate_password(data["email"], data["password"])
        except AuthError as e:
            return {"error": "Unauthorized", "message": str(e)}, 401

        return _signed_in_response(developer, MSG_LOGGED_IN)


class MagicLinkResource(Resource):
    """POST /auth/magic-link: email a single-use sign-in link.

    The answer is the same whether or not the address is registered.
    """

    @limiter.limit(strict_limit)
    def post(self):
        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        try:
            data = MagicLinkRequestSchema().load(json_data)
        except ValidationError as err:
            return {"message": ERROR_VALIDATION, "errors": err.messages}, 422

        request_magic_link(data["email"])
        return {"message": MSG_MAGIC_LINK_SENT}, 200


class MagicLinkVerifyResource(Resource):
    """GET /auth/magic-link/verify?token=: follow the emailed link."""

    @limiter.limit(strict_limit)
    def get(self):
        """Exchange the link token for a session.

        Returns:
            Response: Redirect to the dashboard with the session cookie,
            400 without a token, 401 if the link is invalid or used.
        """
        token = request.args.get("token")
        if not token:
            return {"message": MSG_MISSING_TOKEN}, 400

        try:
            developer = verify_magic_link(token)
        except AuthError as e:
            return {"error": "Unauthorized", "message": str(e)}, 401

        return _dashboard_redirect(developer)


class GoogleOAuthResource(Resource):
    """GET /auth/oauth/google: start Google sign-in."""

    @limiter.limit(default_limit)
    def get(self):
        """Return the Google authorization URL.

        A random ``state`` is stored in a short-lived cookie and checked on
        the callback.
        """
        if not current_app.config.get("GOOGLE_CLIENT_ID"):
            return {"message": MSG_OAUTH_NOT_CONFIGURED}, 503

        state = secrets.token_urlsafe(16)
        response = make_response(
            jsonify({"authorization_url": google_authorization_url(state)}), 200
        )
        response.set_cookie(
            OAUTH_STATE_COOKIE,
            state,
            max_age=OAUTH_STATE_MAX_AGE,
            httponly=True,
            secure=current_app.config.get("COOKIE_SECURE", False),
            samesite="Lax",
        )
        return response


class GoogleOAuthCallbackResource(Resource):
    """GET /auth/oauth/google/callback?code=&state=: finish Google sign-in."""

    @limiter.limit(default_limit)
    def get(self):
        code = request.args.get("code")
        if not code:
            return {"message": MSG_MISSING_CODE}, 400

        expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
        state = request.args.get("state", "")
        if not expected_state or not hmac.compare_digest(state, expected_state):
            logger.warning("oauth_state_mismatch", remote_addr=request.remote_addr)
            return {"message": MSG_OAUTH_STATE_MISMATCH}, 400

        try:
            developer, created = complete_google_login(code)
        except AuthError as e:
            return {"error": "Unauthorized", "message": str(e)}, 401

        response = _dashboard_redirect(
            developer, "/onboarding" if created else "/dashboard"
        )
        response.delete_cookie(OAUTH_STATE_COOKIE)
        return response


class LogoutResource(Resource):
    """POST /auth/logout: clear the session cookie."""

    @require_jwt_auth
    def post(self):
        return clear_auth_cookie(make_response(jsonify({"message": MSG_LOGGED_OUT}), 200))
