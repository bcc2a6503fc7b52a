# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Subscription plans, usage limits and the plan gate for resources.

Prices are in grosze (1 PLN = 100 gr). A limit of ``-1`` means unlimited.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from functools import wraps
from typing import Any

from flask import g

from otoraport.models.db import db
from otoraport.models.project import Project
from otoraport.models.property import Property
from otoraport.models.types import utcnow
from otoraport.utils.jwt_utils import get_current_developer
from otoraport.utils.logger import logger
from otoraport.utils.responses import json_error

UNLIMITED = -1
UPGRADE_URL = "/pricing"

BASE_FEATURES = ["xml_export", "md_export", "ministry_notification"]

PLANS: dict[str, dict[str, Any]] = {
    "trial": {
        "name": "Okres próbny",
        "price_monthly": 0,
        "price_yearly": 0,
        "limits": {"projects": 1, "properties": 200},
        "features": BASE_FEATURES,
    },
    "starter": {
        "name": "Starter",
        "price_monthly": 9900,
        "price_yearly": 99000,
        "limits": {"projects": 1, "properties": 500},
        "features": BASE_FEATURES,
    },
    "professional": {
        "name": "Professional",
        "price_monthly": 19900,
        "price_yearly": 199000,
        "limits": {"projects": 10, "properties": UNLIMITED},
        "features": BASE_FEATURES + ["advanced_analytics"],
    },
}
PAID_PLANS = ("starter", "professional")

# A cancelled subscription keeps working until the paid period ends
ACTIVE_STATUSES = ("trial", "active", "cancelled")


def get_plan(plan: str | None) -> dict[str, Any]:
    return PLANS.get(plan or "trial", PLANS["trial"])


def plan_price(plan: str, billing_period: str) -> int:
    """Price of a paid plan in grosze.

    Raises:
        KeyError: For an unknown plan or billing period.
    """
    if plan not in PAID_PLANS:
        raise KeyError(plan)
    key = {"monthly": "price_monthly", "yearly": "price_yearly"}[billing_period]
    return PLANS[plan][key]


def days_until(end: datetime | None, now: datetime | None = None) -> int:
    """Whole days left until ``end``, rounded up; 0 once it has passed."""
    if end is None:
        return 0
    seconds = (end - (now or utcnow())).total_seconds()
    if seconds <= 0:
        return 0
    return math.ceil(seconds / 86400)


def subscription_info(developer, now: datetime | None = None) -> dict[str, Any]:
    """Describe the developer's plan and whether it is usable right now.

    A trial or paid period that has ended flips the status to ``expired``
    and the change is committed.
    """
    now = now or utcnow()
    period_end = developer.period_end()
    status = developer.subscription_status

    if status in ACTIVE_STATUSES and (period_end is None or period_end <= now):
        logger.info(
            "subscription_expired",
            developer_id=str(developer.id),
            previous_status=status,
            period_end=period_end.isoformat() if period_end else None,
        )
        developer.subscription_status = "expired"
        db.session.commit()
        status = "expired"

    plan = get_plan(developer.subscription_plan)
    return {
        "plan": developer.subscription_plan,
        "plan_name": plan["name"],
        "status": status,
        "is_active": status in ACTIVE_STATUSES,
        "period_end": period_end.isoformat() if period_end else None,
        "days_remaining": days_until(period_end, now) if status != "expired" else 0,
        "limits": dict(plan["limits"]),
        "features": list(plan["features"]),
    }


@dataclass
class UsageCheck:
    allowed: bool
    limit: int
    current: int
    error: str | None = None

    def to_response(self) -> tuple[dict[str, Any], int]:
        return {
            "error": self.error,
            "code": "PLAN_LIMIT_REACHED",
            "limit": self.limit,
            "current": self.current,
            "upgrade_url": UPGRADE_URL,
        }, 403


def check_usage_limit(developer, resource: str, additional: int = 1) -> UsageCheck:
    """Check whether ``additional`` more projects or properties fit the plan.

    Args:
        developer: The developer creating resources.
        resource: ``"projects"`` or ``"properties"``.
        additional: How many would be added.

    Raises:
        ValueError: For an unknown resource name.
    """
    if resource == "projects":
        current = Project.count_by_developer(developer.id)
    elif resource == "properties":
        current = Property.count_by_developer(developer.id)
    else:
        raise ValueError(f"Unknown resource: {resource}")

    limit = get_plan(developer.subscription_plan)["limits"][resource]
    if limit == UNLIMITED or current + additional <= limit:
        return UsageCheck(allowed=True, limit=limit, current=current)

    noun = "projektów" if resource == "projects" else "nieruchomości"
    return UsageCheck(
        allowed=False,
        limit=limit,
        current=current,
        error=f"Osiągnięto limit planu: {limit} {noun}",
    )


def subscription_required(feature: str | None = None):
    """Reject requests from developers without a usable subscription.

    Must be applied after @require_jwt_auth. The subscription summary is
    stored in ``g.subscription`` for the handler.

    Returns 402 ``SUBSCRIPTION_REQUIRED`` when the plan is inactive and 403
    ``FEATURE_RESTRICTED`` when the plan lacks ``feature``.
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            developer = get_current_developer()
            if developer is None:
                return json_error(
                    404, error="Not found", message="Developer account not found"
                )

            info = subscription_info(developer)
            if not info["is_active"]:
                logger.info(
                    "subscription_required",
                    developer_id=str(developer.id),
                    status=info["status"],
                )
                return json_error(
                    402,
                    error="Subskrypcja wygasła. Wybierz plan, aby kontynuować.",
                    code="SUBSCRIPTION_REQUIRED",
                    upgrade_url=UPGRADE_URL,
                )

            if feature and feature not in info["features"]:
                return json_error(
                    403,
                    error=f"Ta funkcja wymaga wyższego planu. Obecny plan: {info['plan']}",
                    code="FEATURE_RESTRICTED",
                    current_plan=info["plan"],
                    upgrade_url=UPGRADE_URL,
                )

            g.subscription = info
            return f(*args, **kwargs)

        return decorated_function

    return decorator
