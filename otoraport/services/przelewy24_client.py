# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Przelewy24 REST API client.

Only the two calls the subscription flow needs are implemented: registering
a transaction (which returns the token the payer is redirected with) and
verifying it once Przelewy24 reports the payment status.
"""

import hashlib
from typing import Any

import requests
from flask import current_app

from otoraport.utils.constants import P24_PRODUCTION_API_URL, P24_SANDBOX_API_URL
from otoraport.utils.logger import logger

CURRENCY = "PLN"


class PaymentError(Exception):
    """Raised when Przelewy24 cannot be reached or rejects a transaction."""


def _md5(text: str) -> str:
    return hashlib.md5(text.encode("utf-8"), usedforsecurity=False).hexdigest()


class Przelewy24Client:
    """Thin wrapper over the Przelewy24 v1 API.

    Args:
        merchant_id: Merchant identifier.
        pos_id: Point-of-sale identifier (usually the merchant id).
        crc: CRC key used to sign requests.
        api_key: Report key used for Basic authentication.
        sandbox: Use the sandbox environment.
        timeout: HTTP timeout in seconds.
    """

    def __init__(
        self,
        merchant_id: int,
        pos_id: int,
        crc: str,
        api_key: str,
        sandbox: bool = True,
        timeout: float = 5,
    ):
        self.merchant_id = merchant_id
        self.pos_id = pos_id
        self.crc = crc
        self.api_key = api_key
        self.sandbox = sandbox
        self.timeout = timeout
        self.base_url = P24_SANDBOX_API_URL if sandbox else P24_PRODUCTION_API_URL

    @classmethod
    def from_config(cls) -> "Przelewy24Client":
        config = current_app.config
        return cls(
            merchant_id=config["P24_MERCHANT_ID"],
            pos_id=config["P24_POS_ID"],
            crc=config["P24_CRC"],
            api_key=config["P24_API_KEY"],
            sandbox=config.get("P24_SANDBOX", True),
            timeout=config.get("EXTERNAL_SERVICES_TIMEOUT", 5),
        )

    def registration_sign(self, session_id: str, amount: int) -> str:
        return _md5(f"{session_id}|{self.merchant_id}|{amount}|{CURRENCY}|{self.crc}")

    def verification_sign(self, session_id: str, order_id: int, amount: int) -> str:
        return _md5(f"{session_id}|{order_id}|{amount}|{CURRENCY}|{self.crc}")

    def redirect_url(self, token: str) -> str:
        host = "sandbox.przelewy24.pl" if self.sandbox else "przelewy24.pl"
        return f"https://{host}/trnRequest/{token}"

    def _post(self, path: str, payload: dict[str, Any]) -> requests.Response:
        try:
            return requests.post(
                f"{self.base_url}{path}",
                json=payload,
                auth=(str(self.pos_id), self.api_key),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("przelewy24_request_failed", path=path, error=str(e))
            raise PaymentError(f"Przelewy24 unavailable: {e}") from e

    def register_transaction(
        self,
        session_id: str,
        amount: int,
        description: str,
        email: str,
        client: str,
        url_return: str,
        url_status: str,
    ) -> dict[str, str]:
        """Register a transaction.

        Args:
            session_id: Our unique id of the payment.
            amount: Amount in grosze.
            description: Text shown to the payer.
            email: Payer email.
            client: Payer name.
            url_return: Where the payer lands after paying.
            url_status: Webhook notified with the payment status.

        Returns:
            ``{"token", "redirect_url"}``

        Raises:
            PaymentError: If the call fails or no token is returned.
        """
        payload = {
            "merchantId": self.merchant_id,
            "posId": self.pos_id,
            "sessionId": session_id,
            "amount": amount,
            "currency": CURRENCY,
            "description": description,
            "email": email,
            "client": client,
            "country": "PL",
            "language": "pl",
            "urlReturn": url_return,
            "urlStatus": url_status,
            "sign": self.registration_sign(session_id, amount),
        }
        response = self._post("/transaction/register", payload)

        try:
            body = response.json()
        except ValueError:
            body = {}
        token = (body.get("data") or {}).get("token")
        if response.status_code >= 400 or not token:
            logger.error(
                "przelewy24_registration_rejected",
                session_id=session_id,
                status_code=response.status_code,
                error=body.get("error"),
            )
            raise PaymentError(body.get("error") or "Transaction registration failed")

        logger.info("przelewy24_transaction_registered", session_id=session_id)
        return {"token": token, "redirect_url": self.redirect_url(token)}

    def verify_transaction(self, session_id: str, order_id: int, amount: int) -> bool:
        """Confirm a transaction reported by the status webhook.

        Returns:
            True when Przelewy24 reports ``status == "success"``.

        Raises:
            PaymentError: If Przelewy24 cannot be reached.
        """
        payload = {
            "merchantId": self.merchant_id,
            "posId": self.pos_id,
            "sessionId": session_id,
            "amount": amount,
            "currency": CURRENCY,
            "orderId": order_id,
            "sign": self.verification_sign(session_id, order_id, amount),
        }
        response = self._post("/transaction/verify", payload)
        try:
            body = response.json()
        except ValueError:
            body = {}
        verified = response.ok and (body.get("data") or {}).get("status") == "success"
        logger.info(
            "przelewy24_transaction_verified",
            session_id=session_id,
            order_id=order_id,
            verified=verified,
        )
        return verified
