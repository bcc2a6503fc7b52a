# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Payment model for Przelewy24 subscription transactions."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import relationship

from otoraport.models.constants import (
    DEFAULT_CURRENCY,
    PAYMENT_SESSION_ID_MAX_LENGTH,
    PAYMENT_TOKEN_MAX_LENGTH,
)
from otoraport.models.db import db
from otoraport.models.types import GUID, TimestampMixin, UUIDMixin


class Payment(UUIDMixin, TimestampMixin, db.Model):
    """Subscription payment.

    Attributes:
        amount: Amount in grosze (1 PLN = 100 grosze).
        status: ``pending`` -> ``initialized`` once registered with
            Przelewy24 -> ``completed`` or ``failed`` after the webhook.
        przelewy24_session_id: Our transaction id sent to Przelewy24.
    """

    __tablename__ = "payments"

    developer_id = db.Column(
        GUID(),
        db.ForeignKey("developers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = db.Column(db.Integer, nullable=False)
    currency = db.Column(db.String(3), nullable=False, default=DEFAULT_CURRENCY)
    status = db.Column(db.String(16), nullable=False, default="pending", index=True)
    plan_type = db.Column(db.String(32), nullable=False)
    billing_period = db.Column(db.String(16), nullable=False)
    przelewy24_session_id = db.Column(
        db.String(PAYMENT_SESSION_ID_MAX_LENGTH), nullable=False, unique=True
    )
    przelewy24_order_id = db.Column(db.String(PAYMENT_SESSION_ID_MAX_LENGTH), nullable=True)
    przelewy24_token = db.Column(db.String(PAYMENT_TOKEN_MAX_LENGTH), nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    developer = relationship("Developer", back_populates="payments")

    def __repr__(self) -> str:
        return (
            f"<Payment {self.przelewy24_session_id} {self.plan_type}/"
            f"{self.billing_period} status={self.status}>"
        )

    @classmethod
    def get_by_session_id(cls, session_id: str) -> "Payment | None":
        return cls.query.filter_by(przelewy24_session_id=session_id).first()

    @classmethod
    def total_revenue(cls, since: datetime | None = None) -> int:
        """Sum of completed payments in grosze, optionally since a date."""
        query = db.session.query(func.coalesce(func.sum(cls.amount), 0)).filter(
            cls.status == "completed"
        )
        if since is not None:
            query = query.filter(cls.completed_at >= since)
        return int(query.scalar() or 0)
