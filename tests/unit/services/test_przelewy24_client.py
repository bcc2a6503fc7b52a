# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the Przelewy24 client.

All HTTP calls are patched; no request leaves the test process.
"""

import hashlib
from unittest.mock import MagicMock, patch

import pytest
import requests

from otoraport.services.przelewy24_client import PaymentError, Przelewy24Client


@pytest.fixture
def p24():
    return Przelewy24Client(
        merchant_id=12345, pos_id=12345, crc="crc-key", api_key="api-key", sandbox=True
    )


def _response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = body if body is not None else {}
    return response


def _register(p24):
    return p24.register_transaction(
        session_id="sess-1",
        amount=9900,
        description="OTORAPORT - starter monthly subscription",
        email="developer@example.com",
        client="Zielone Tarasy",
        url_return="http://localhost:3000/dashboard?payment=success",
        url_status="http://localhost:5000/v1/payments/webhook",
    )


class TestSignatures:
    """Test suite for request signatures and URLs."""

    def test_registration_sign(self, p24):
        expected = hashlib.md5(b"sess-1|12345|9900|PLN|crc-key").hexdigest()
        assert p24.registration_sign("sess-1", 9900) == expected

    def test_verification_sign(self, p24):
        expected = hashlib.md5(b"sess-1|987|9900|PLN|crc-key").hexdigest()
        assert p24.verification_sign("sess-1", 987, 9900) == expected

    def test_redirect_url(self, p24):
        assert p24.redirect_url("TOKEN") == "https://sandbox.przelewy24.pl/trnRequest/TOKEN"

    def test_production_urls(self):
        client = Przelewy24Client(1, 1, "crc", "key", sandbox=False)
        assert client.base_url == "https://secure.przelewy24.pl/api/v1"
        assert client.redirect_url("T") == "https://przelewy24.pl/trnRequest/T"

    def test_from_config(self, app):
        app.config.update(P24_MERCHANT_ID=555, P24_POS_ID=556, P24_CRC="c", P24_API_KEY="k")
        client = Przelewy24Client.from_config()
        assert client.merchant_id == 555
        assert client.pos_id == 556
        assert client.sandbox is True


class TestRegisterTransaction:
    """Test suite for register_transaction."""

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_success(self, mock_post, p24):
        mock_post.return_value = _response(200, {"data": {"token": "ABC-123"}})

        result = _register(p24)

        assert result == {
            "token": "ABC-123",
            "redirect_url": "https://sandbox.przelewy24.pl/trnRequest/ABC-123",
        }
        url = mock_post.call_args.args[0]
        payload = mock_post.call_args.kwargs["json"]
        assert url == "https://sandbox.przelewy24.pl/api/v1/transaction/register"
        assert payload["sessionId"] == "sess-1"
        assert payload["amount"] == 9900
        assert payload["currency"] == "PLN"
        assert payload["sign"] == p24.registration_sign("sess-1", 9900)
        assert mock_post.call_args.kwargs["auth"] == ("12345", "api-key")

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_rejected(self, mock_post, p24):
        mock_post.return_value = _response(400, {"error": "Incorrect CRC"})

        with pytest.raises(PaymentError, match="Incorrect CRC"):
            _register(p24)

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_missing_token(self, mock_post, p24):
        mock_post.return_value = _response(200, {"data": {}})

        with pytest.raises(PaymentError):
            _register(p24)

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_invalid_json(self, mock_post, p24):
        response = _response(502)
        response.json.side_effect = ValueError("no json")
        mock_post.return_value = response

        with pytest.raises(PaymentError):
            _register(p24)

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_network_error(self, mock_post, p24):
        mock_post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(PaymentError, match="unavailable"):
            _register(p24)


class TestVerifyTransaction:
    """Test suite for verify_transaction."""

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_success(self, mock_post, p24):
        mock_post.return_value = _response(200, {"data": {"status": "success"}})

        assert p24.verify_transaction("sess-1", 987, 9900) is True
        payload = mock_post.call_args.kwargs["json"]
        assert payload["orderId"] == 987
        assert payload["sign"] == p24.verification_sign("sess-1", 987, 9900)

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_not_successful(self, mock_post, p24):
        mock_post.return_value = _response(200, {"data": {"status": "pending"}})
        assert p24.verify_transaction("sess-1", 987, 9900) is False

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_http_error(self, mock_post, p24):
        mock_post.return_value = _response(400, {"data": {"status": "success"}})
        assert p24.verify_transaction("sess-1", 987, 9900) is False

    @patch("otoraport.services.przelewy24_client.requests.post")
    def test_network_error(self, mock_post, p24):
        mock_post.side_effect = requests.Timeout("slow")

        with pytest.raises(PaymentError):
            p24.verify_transaction("sess-1", 987, 9900)
