# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the authentication endpoints."""

from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest
from werkzeug.security import generate_password_hash

from otoraport.models.developer import Developer
from otoraport.resources.constants import (
    MSG_MAGIC_LINK_SENT,
    MSG_OAUTH_NOT_CONFIGURED,
    MSG_OAUTH_STATE_MISMATCH,
    OAUTH_STATE_COOKIE,
)
from otoraport.utils.constants import ACCESS_TOKEN_COOKIE
from otoraport.utils.jwt_utils import decode_token

REGISTRATION = {
    "email": "Nowy@Example.com",
    "company_name": "Nowe Inwestycje Sp. z o.o.",
    "nip": "1234563218",
    "password": "secret-password",
}


@pytest.fixture
def password_developer(make_developer):
    return make_developer(
        "haslo@example.com",
        "Firma z hasłem",
        password_hash=generate_password_hash("secret-password"),
    )


class TestRegisterResource:
    """Test cases for POST /auth/register."""

    def test_register_success(self, client, api_url):
        response = client.post(api_url("auth/register"), json=REGISTRATION)

        assert response.status_code == 201
        data = response.get_json()
        assert data["developer"]["email"] == "nowy@example.com"
        assert data["developer"]["subscription_status"] == "trial"
        assert "password" not in data["developer"]

        cookie = client.get_cookie(ACCESS_TOKEN_COOKIE)
        assert cookie is not None
        assert cookie.http_only is True
        developer = Developer.get_by_email("nowy@example.com")
        assert decode_token(cookie.value)["developer_id"] == str(developer.id)
        assert developer.password_hash != "secret-password"

    def test_register_no_data(self, client, api_url):
        response = client.post(api_url("auth/register"), json={})
        assert response.status_code == 400

    def test_register_validation_error(self, client, api_url):
        response = client.post(
            api_url("auth/register"),
            json={"email": "not-an-email", "company_name": ""},
        )

        assert response.status_code == 422
        errors = response.get_json()["errors"]
        assert "email" in errors
        assert "company_name" in errors

    def test_register_duplicate_email(self, client, api_url, developer):
        response = client.post(
            api_url("auth/register"),
            json={"email": developer.email, "company_name": "Kopia"},
        )
        assert response.status_code == 422
        assert "email" in response.get_json()["errors"]


class TestLoginResource:
    """Test cases for POST /auth/login."""

    def test_login_success(self, client, api_url, password_developer):
        response = client.post(
            api_url("auth/login"),
            json={"email": "HASLO@example.com", "password": "secret-password"},
        )

        assert response.status_code == 200
        assert response.get_json()["developer"]["email"] == "haslo@example.com"
        assert client.get_cookie(ACCESS_TOKEN_COOKIE) is not None

    def test_login_wrong_password(self, client, api_url, password_developer):
        response = client.post(
            api_url("auth/login"),
            json={"email": "haslo@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert client.get_cookie(ACCESS_TOKEN_COOKIE) is None

    def test_login_account_without_password(self, client, api_url, developer):
        response = client.post(
            api_url("auth/login"),
            json={"email": developer.email, "password": "anything"},
        )
        assert response.status_code == 401

    def test_login_missing_password(self, client, api_url):
        response = client.post(api_url("auth/login"), json={"email": "a@example.com"})
        assert response.status_code == 422


class TestMagicLinkResources:
    """Test cases for the magic-link request and verification."""

    @patch("otoraport.services.auth_service.send_magic_link_email", return_value=True)
    def test_full_flow(self, mock_send, client, api_url, developer):
        response = client.post(
            api_url("auth/magic-link"), json={"email": "Developer@Example.com"}
        )
        assert response.status_code == 200
        assert response.get_json()["message"] == MSG_MAGIC_LINK_SENT

        link = mock_send.call_args.args[1]
        token = parse_qs(urlparse(link).query)["token"][0]
        assert link.startswith("http://localhost:5000/v1/auth/magic-link/verify?")

        response = client.get(
            api_url("auth/magic-link/verify"), query_string={"token": token}
        )

        assert response.status_code == 302
        assert response.headers["Location"] == "http://localhost:3000/dashboard"
        assert client.get_cookie(ACCESS_TOKEN_COOKIE) is not None

        # The same link cannot be used twice
        response = client.get(
            api_url("auth/magic-link/verify"), query_string={"token": token}
        )
        assert response.status_code == 401

    @patch("otoraport.services.auth_service.send_magic_link_email")
    def test_unknown_email_same_answer(self, mock_send, client, api_url):
        response = client.post(
            api_url("auth/magic-link"), json={"email": "nobody@example.com"}
        )

        assert response.status_code == 200
        assert response.get_json()["message"] == MSG_MAGIC_LINK_SENT
        mock_send.assert_not_called()

    def test_invalid_email(self, client, api_url):
        response = client.post(api_url("auth/magic-link"), json={"email": "nope"})
        assert response.status_code == 422

    def test_verify_without_token(self, client, api_url):
        response = client.get(api_url("auth/magic-link/verify"))
        assert response.status_code == 400

    def test_verify_invalid_token(self, client, api_url):
        response = client.get(
            api_url("auth/magic-link/verify"), query_string={"token": "garbage"}
        )
        assert response.status_code == 401
        assert client.get_cookie(ACCESS_TOKEN_COOKIE) is None


class TestGoogleOAuthResources:
    """Test cases for the Google sign-in endpoints."""

    def test_not_configured(self, app, client, api_url):
        app.config["GOOGLE_CLIENT_ID"] = None

        response = client.get(api_url("auth/oauth/google"))

        assert response.status_code == 503
        assert response.get_json()["message"] == MSG_OAUTH_NOT_CONFIGURED

    def test_authorization_url_sets_state(self, app, client, api_url):
        app.config["GOOGLE_CLIENT_ID"] = "google-client-id"

        response = client.get(api_url("auth/oauth/google"))

        assert response.status_code == 200
        url = urlparse(response.get_json()["authorization_url"])
        params = parse_qs(url.query)
        state = client.get_cookie(OAUTH_STATE_COOKIE)
        assert state is not None
        assert params["state"] == [state.value]
        assert params["client_id"] == ["google-client-id"]

    def test_callback_without_code(self, client, api_url):
        response = client.get(api_url("auth/oauth/google/callback"))
        assert response.status_code == 400

    def test_callback_state_mismatch(self, client, api_url):
        client.set_cookie(OAUTH_STATE_COOKIE, "expected-state")

        response = client.get(
            api_url("auth/oauth/google/callback"),
            query_string={"code": "abc", "state": "other-state"},
        )

        assert response.status_code == 400
        assert response.get_json()["message"] == MSG_OAUTH_STATE_MISMATCH

    def test_callback_new_account_goes_to_onboarding(self, client, api_url, developer):
        client.set_cookie(OAUTH_STATE_COOKIE, "state-123")

        with patch(
            "otoraport.resources.auth_res.complete_google_login",
            return_value=(developer, True),
        ) as mock_login:
            response = client.get(
                api_url("auth/oauth/google/callback"),
                query_string={"code": "abc", "state": "state-123"},
            )

        mock_login.assert_called_once_with("abc")
        assert response.status_code == 302
        assert response.headers["Location"] == "http://localhost:3000/onboarding"
        assert client.get_cookie(ACCESS_TOKEN_COOKIE) is not None
        assert client.get_cookie(OAUTH_STATE_COOKIE) is None

    def test_callback_existing_account_goes_to_dashboard(
        self, client, api_url, developer
    ):
        client.set_cookie(OAUTH_STATE_COOKIE, "state-123")

        with patch(
            "otoraport.resources.auth_res.complete_google_login",
            return_value=(developer, False),
        ):
            response = client.get(
                api_url("auth/oauth/google/callback"),
                query_string={"code": "abc", "state": "state-123"},
            )

        assert response.headers["Location"] == "http://localhost:3000/dashboard"


class TestLogoutResource:
    def test_logout_clears_cookie(self, authenticated_client, api_url):
        authenticated_client.set_cookie(ACCESS_TOKEN_COOKIE, "some-token")

        response = authenticated_client.post(api_url("auth/logout"))

        assert response.status_code == 200
        assert authenticated_client.get_cookie(ACCESS_TOKEN_COOKIE) is None
