# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Transactional email.

Messages are rendered from ``templates/emails/<name>.html`` and ``.txt`` and
sent through the configured provider:

- ``console``: logs the message, nothing leaves the process (dev, tests)
- ``resend``: posts to the Resend HTTP API

Sending never raises into the caller; failures are logged and reported as
``False`` so that an email problem cannot fail the request that caused it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import requests
from flask import current_app, render_template
from jinja2 import TemplateError

from otoraport.utils.constants import RESEND_API_URL
from otoraport.utils.logger import logger


@dataclass
class EmailMessage:
    """Rendered email ready to send."""

    to: list[str]
    subject: str
    html_body: str
    text_body: str | None = None
    from_address: str | None = None
    tags: dict[str, str] = field(default_factory=dict)


class EmailProvider(ABC):
    """Email delivery backend."""

    @abstractmethod
    def send(self, message: EmailMessage) -> bool:
        """Deliver the message; True when the provider accepted it."""


class ConsoleEmailProvider(EmailProvider):
    """Logs emails instead of sending them."""

    def send(self, message: EmailMessage) -> bool:
        logger.info(
            "email_logged_not_sent",
            to=message.to,
            subject=message.subject,
            from_address=message.from_address,
            text_body=message.text_body,
        )
        return True


class ResendEmailProvider(EmailProvider):
    """Sends through the Resend HTTP API."""

    def __init__(self, api_key: str, from_address: str, timeout: float):
        self.api_key = api_key
        self.from_address = from_address
        self.timeout = timeout

    def send(self, message: EmailMessage) -> bool:
        payload: dict[str, Any] = {
            "from": message.from_address or self.from_address,
            "to": message.to,
            "subject": message.subject,
            "html": message.html_body,
        }
        if message.text_body:
            payload["text"] = message.text_body
        if message.tags:
            payload["tags"] = [
                {"name": name, "value": value} for name, value in message.tags.items()
            ]

        try:
            response = requests.post(
                RESEND_API_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("email_send_failed", to=message.to, error=str(e))
            return False

        if response.status_code >= 400:
            logger.error(
                "email_rejected_by_provider",
                to=message.to,
                status_code=response.status_code,
                body=response.text[:500],
            )
            return False

        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None
        logger.info(
            "email_sent", to=message.to, subject=message.subject, message_id=message_id
        )
        return True


def get_email_provider() -> EmailProvider:
    """Provider selected by ``EMAIL_PROVIDER`` in the app config."""
    config = current_app.config
    if config.get("EMAIL_PROVIDER") == "resend":
        return ResendEmailProvider(
            api_key=config["RESEND_API_KEY"],
            from_address=config["EMAIL_FROM"],
            timeout=config.get("EXTERNAL_SERVICES_TIMEOUT", 5),
        )
    return ConsoleEmailProvider()


def send_email(to: str | list[str], subject: str, template: str, **context: Any) -> bool:
    """Render ``emails/<template>`` and send it.

    Args:
        to: Recipient address or addresses.
        subject: Subject line.
        template: Template base name, without extension.
        **context: Template variables.

    Returns:
        True if the provider accepted the message, False otherwise.
    """
    recipients = [to] if isinstance(to, str) else list(to)
    context.setdefault("frontend_url", current_app.config.get("FRONTEND_URL"))
    context.setdefault("support_email", current_app.config.get("SUPPORT_EMAIL"))

    try:
        message = EmailMessage(
            to=recipients,
            subject=subject,
            html_body=render_template(f"emails/{template}.html", **context),
            text_body=render_template(f"emails/{template}.txt", **context),
            from_address=current_app.config.get("EMAIL_FROM"),
            tags={"template": template},
        )
    except TemplateError as e:
        logger.error("email_template_error", template=template, error=str(e))
        return False

    return get_email_provider().send(message)


def send_magic_link_email(developer, link: str, expires_minutes: int) -> bool:
    return send_email(
        developer.email,
        "OTORAPORT - link do logowania",
        "magic_link",
        developer=developer,
        link=link,
        expires_minutes=expires_minutes,
    )


def send_welcome_email(developer) -> bool:
    return send_email(
        developer.email,
        f"Witamy w OTORAPORT! Twoje konto {developer.subscription_plan} jest aktywne",
        "welcome",
        developer=developer,
    )


def send_ministry_registration_email(developer, xml_url: str, md_url: str) -> bool:
    """Register the developer's public feed with the ministry harvester."""
    return send_email(
        current_app.config["MINISTRY_EMAIL"],
        "Zgłoszenie dewelopera do systemu raportowania cen - "
        f"{developer.company_name or developer.name}",
        "ministry_registration",
        developer=developer,
        xml_url=xml_url,
        md_url=md_url,
    )


def send_data_update_email(developer, properties_count: int, created: int, updated: int) -> bool:
    return send_email(
        developer.email,
        f"OTORAPORT - Dane zaktualizowane pomyślnie ({properties_count} nieruchomości)",
        "data_update",
        developer=developer,
        properties_count=properties_count,
        created=created,
        updated=updated,
    )


def send_trial_warning_email(developer, days_left: int) -> bool:
    return send_email(
        developer.email,
        f"Twój okres próbny OTORAPORT wygasa za {days_left} dni",
        "trial_warning",
        developer=developer,
        days_left=days_left,
    )


def send_batch_sync_notification(developer, success: bool, details: dict[str, Any]) -> bool:
    subject = (
        "OTORAPORT - Synchronizacja zakończona pomyślnie"
        if success
        else "OTORAPORT - Błąd synchronizacji"
    )
    return send_email(
        developer.email,
        subject,
        "batch_sync",
        developer=developer,
        success=success,
        details=details,
    )


def send_ministry_decision_email(developer, approved: bool) -> bool:
    """Tell the developer whether the ministry accepted the registration."""
    name = developer.company_name or developer.name
    subject = (
        f"Potwierdzenie rejestracji w systemie ministerstwa - {name}"
        if approved
        else "Rejestracja w systemie ministerstwa wymaga dodatkowych informacji"
    )
    return send_email(
        developer.email,
        subject,
        "ministry_decision",
        developer=developer,
        approved=approved,
    )
