# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Subscription purchase flow: payment creation and the Przelewy24 webhook."""

import calendar
import uuid
from datetime import datetime

from flask import current_app

from otoraport.models.activity_log import ActivityLog
from otoraport.models.db import db
from otoraport.models.payment import Payment
from otoraport.models.types import utcnow
from otoraport.services.email_service import send_welcome_email
from otoraport.services.przelewy24_client import PaymentError, Przelewy24Client
from otoraport.services.subscription import plan_price
from otoraport.utils.logger import logger
from otoraport.utils.version import get_api_version


def add_months(start: datetime, months: int) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def extend_subscription(
    developer, plan: str, billing_period: str, now: datetime | None = None
) -> datetime:
    """Activate ``plan`` and push the paid period forward by one month or year.

    The extension starts from the later of now and the current end date, so
    paying early never loses days.
    """
    now = now or utcnow()
    current_end = developer.subscription_end_date
    start = current_end if current_end and current_end > now else now
    months = 12 if billing_period == "yearly" else 1

    developer.subscription_plan = plan
    developer.subscription_status = "active"
    developer.subscription_end_date = add_months(start, months)
    return developer.subscription_end_date


def create_payment(developer, plan: str, billing_period: str) -> tuple[Payment, str]:
    """Store a pending payment and register it with Przelewy24.

    Returns:
        Tuple of (payment, redirect_url).

    Raises:
        KeyError: For an unknown plan or billing period.
        PaymentError: If Przelewy24 rejects the registration. The payment is
            kept with status ``failed``.
    """
    amount = plan_price(plan, billing_period)
    payment = Payment(
        developer_id=developer.id,
        amount=amount,
        currency="PLN",
        status="pending",
        plan_type=plan,
        billing_period=billing_period,
        przelewy24_session_id=str(uuid.uuid4()),
    )
    db.session.add(payment)
    db.session.commit()

    config = current_app.config
    api_prefix = f"{config['BASE_URL']}/{get_api_version()}"
    try:
        registration = Przelewy24Client.from_config().register_transaction(
            session_id=payment.przelewy24_session_id,
            amount=amount,
            description=f"OTORAPORT - {plan} {billing_period} subscription",
            email=developer.email,
            client=developer.name or developer.company_name,
            url_return=f"{config['FRONTEND_URL']}/dashboard?payment=success",
            url_status=f"{api_prefix}/payments/webhook",
        )
    except PaymentError:
        payment.status = "failed"
        db.session.commit()
        raise

    payment.przelewy24_token = registration["token"]
    payment.status = "initialized"
    db.session.commit()

    logger.info(
        "payment_created",
        payment_id=str(payment.id),
        developer_id=str(developer.id),
        plan=plan,
        billing_period=billing_period,
        amount=amount,
    )
    return payment, registration["redirect_url"]


def process_webhook(payment: Payment, order_id: int, amount: int) -> bool:
    """Verify a reported transaction and activate the subscription.

    Returns:
        True if the payment was verified and completed. A payment that is
        already completed is left untouched, so repeated notifications do
        not extend the subscription again.

    Raises:
        PaymentError: If Przelewy24 cannot be reached for verification.
    """
    if payment.status == "completed":
        logger.info("payment_already_completed", payment_id=str(payment.id))
        return True

    verified = Przelewy24Client.from_config().verify_transaction(
        payment.przelewy24_session_id, order_id, amount
    )

    payment.przelewy24_order_id = str(order_id)
    developer = payment.developer
    if not verified:
        payment.status = "failed"
        ActivityLog.record(
            "payment",
            developer_id=payment.developer_id,
            status="error",
            message="Płatność nie została zweryfikowana",
            details={"payment_id": str(payment.id), "order_id": order_id},
        )
        db.session.commit()
        logger.warning("payment_verification_failed", payment_id=str(payment.id))
        return False

    payment.status = "completed"
    payment.completed_at = utcnow()
    end_date = extend_subscription(developer, payment.plan_type, payment.billing_period)
    ActivityLog.record(
        "payment",
        developer_id=payment.developer_id,
        message=f"Aktywowano plan {payment.plan_type} ({payment.billing_period})",
        details={"payment_id": str(payment.id), "amount": payment.amount},
    )
    db.session.commit()

    logger.info(
        "subscription_activated",
        developer_id=str(developer.id),
        plan=payment.plan_type,
        subscription_end_date=end_date.isoformat(),
    )
    send_welcome_email(developer)
    return True
