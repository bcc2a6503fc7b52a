# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Trial expiry reminders, sent 7, 3 and 1 days before the trial ends."""

from datetime import datetime
from typing import Any

from otoraport.models.db import db
from otoraport.models.developer import Developer
from otoraport.models.types import utcnow
from otoraport.services.email_service import send_trial_warning_email
from otoraport.services.subscription import days_until
from otoraport.utils.logger import logger

WARNING_DAYS = (7, 3, 1)


def warning_key(days_left: int) -> str:
    return f"trial_warning_{days_left}d"


def send_trial_warnings(now: datetime | None = None) -> dict[str, Any]:
    """Email every trial developer whose trial ends on a warning day.

    Each warning is sent at most once per developer; the key is stored in
    ``Developer.email_notifications_sent``.

    Returns:
        ``{"processed", "sent", "skipped", "errors"}`` where ``errors`` lists
        the addresses whose email could not be sent.
    """
    now = now or utcnow()
    developers = Developer.get_all(subscription_status="trial")
    summary: dict[str, Any] = {
        "processed": len(developers),
        "sent": 0,
        "skipped": 0,
        "errors": [],
    }

    for developer in developers:
        if developer.trial_ends_at is None:
            summary["skipped"] += 1
            continue

        days_left = days_until(developer.trial_ends_at, now)
        key = warning_key(days_left)
        if days_left not in WARNING_DAYS or developer.notification_sent(key):
            summary["skipped"] += 1
            continue

        if not send_trial_warning_email(developer, days_left):
            summary["errors"].append(developer.email)
            continue

        developer.mark_notification_sent(key)
        db.session.commit()
        summary["sent"] += 1
        logger.info(
            "trial_warning_sent", developer_id=str(developer.id), days_left=days_left
        )

    logger.info(
        "trial_warnings_completed",
        processed=summary["processed"],
        sent=summary["sent"],
        skipped=summary["skipped"],
        errors=len(summary["errors"]),
    )
    return summary
