# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Developer model.

A developer is the tenant of the platform: a real-estate company that
publishes its price list. Every project, generated file, payment and
activity entry belongs to exactly one developer.
"""

import uuid
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import relationship

from otoraport.models.constants import (
    DEVELOPER_ADDRESS_FIELD_MAX_LENGTH,
    DEVELOPER_CLIENT_ID_MAX_LENGTH,
    DEVELOPER_COMPANY_NAME_MAX_LENGTH,
    DEVELOPER_EMAIL_MAX_LENGTH,
    DEVELOPER_NAME_MAX_LENGTH,
    DEVELOPER_NIP_LENGTH,
    DEVELOPER_PHONE_MAX_LENGTH,
    DEVELOPER_REGON_MAX_LENGTH,
    DEVELOPER_SHORT_FIELD_MAX_LENGTH,
    DEVELOPER_URL_MAX_LENGTH,
)
from otoraport.models.db import db
from otoraport.models.types import JSONB, TimestampMixin, UUIDMixin, utcnow


class Developer(UUIDMixin, TimestampMixin, db.Model):
    """Real-estate developer account.

    Attributes:
        email: Login address, unique.
        name: Contact person.
        company_name: Registered company name shown in reports.
        nip: Tax identifier (10 digits), unique.
        regon: Business registry number (9 or 14 digits), optional.
        client_id: Public identifier used in the feed URLs, unique.
        subscription_plan: ``trial``, ``starter`` or ``professional``.
        subscription_status: ``trial``, ``active``, ``cancelled`` or ``expired``.
        trial_ends_at: End of the free trial.
        subscription_end_date: End of the paid period.
        email_notifications_sent: Keys of reminder emails already sent.
    """

    __tablename__ = "developers"

    email = db.Column(
        db.String(DEVELOPER_EMAIL_MAX_LENGTH), nullable=False, unique=True, index=True
    )
    name = db.Column(db.String(DEVELOPER_NAME_MAX_LENGTH), nullable=True)
    company_name = db.Column(db.String(DEVELOPER_COMPANY_NAME_MAX_LENGTH), nullable=False)
    nip = db.Column(db.String(DEVELOPER_NIP_LENGTH), nullable=True, unique=True)
    regon = db.Column(db.String(DEVELOPER_REGON_MAX_LENGTH), nullable=True)
    phone = db.Column(db.String(DEVELOPER_PHONE_MAX_LENGTH), nullable=True)
    website = db.Column(db.String(DEVELOPER_URL_MAX_LENGTH), nullable=True)
    legal_form = db.Column(db.String(DEVELOPER_SHORT_FIELD_MAX_LENGTH), nullable=True)
    krs = db.Column(db.String(DEVELOPER_SHORT_FIELD_MAX_LENGTH), nullable=True)
    ceidg = db.Column(db.String(DEVELOPER_SHORT_FIELD_MAX_LENGTH), nullable=True)

    # Registered office
    street = db.Column(db.String(DEVELOPER_ADDRESS_FIELD_MAX_LENGTH), nullable=True)
    house_number = db.Column(db.String(DEVELOPER_SHORT_FIELD_MAX_LENGTH), nullable=True)
    apartment_number = db.Column(
        db.String(DEVELOPER_SHORT_FIELD_MAX_LENGTH), nullable=True
    )
    postal_code = db.Column(db.String(DEVELOPER_SHORT_FIELD_MAX_LENGTH), nullable=True)
    city = db.Column(db.String(DEVELOPER_ADDRESS_FIELD_MAX_LENGTH), nullable=True)
    municipality = db.Column(
        db.String(DEVELOPER_ADDRESS_FIELD_MAX_LENGTH), nullable=True
    )
    county = db.Column(db.String(DEVELOPER_ADDRESS_FIELD_MAX_LENGTH), nullable=True)
    voivodeship = db.Column(
        db.String(DEVELOPER_ADDRESS_FIELD_MAX_LENGTH), nullable=True
    )

    client_id = db.Column(
        db.String(DEVELOPER_CLIENT_ID_MAX_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash = db.Column(db.String(255), nullable=True)
    oauth_provider = db.Column(db.String(DEVELOPER_SHORT_FIELD_MAX_LENGTH), nullable=True)
    onboarding_completed = db.Column(db.Boolean, nullable=False, default=False)

    subscription_plan = db.Column(db.String(32), nullable=False, default="trial")
    subscription_status = db.Column(
        db.String(32), nullable=False, default="trial", index=True
    )
    trial_ends_at = db.Column(db.DateTime, nullable=True)
    subscription_end_date = db.Column(db.DateTime, nullable=True)

    ministry_approved = db.Column(db.Boolean, nullable=False, default=False)
    ministry_email_sent = db.Column(db.Boolean, nullable=False, default=False)
    xml_url = db.Column(db.String(DEVELOPER_URL_MAX_LENGTH), nullable=True)
    md_url = db.Column(db.String(DEVELOPER_URL_MAX_LENGTH), nullable=True)
    email_notifications_sent = db.Column(JSONB(), nullable=True)
    last_login_at = db.Column(db.DateTime, nullable=True)

    projects = relationship(
        "Project",
        back_populates="developer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="Project.created_at",
    )
    generated_files = relationship(
        "GeneratedFile",
        back_populates="developer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    payments = relationship(
        "Payment",
        back_populates="developer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    activity_logs = relationship(
        "ActivityLog",
        back_populates="developer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __init__(self, email: str, company_name: str, client_id: str, **kwargs: Any):
        super().__init__(**kwargs)
        self.email = email.strip().lower()
        self.company_name = company_name
        self.client_id = client_id

    def __repr__(self) -> str:
        return f"<Developer {self.company_name} ({self.client_id})> (ID: {self.id})"

    @classmethod
    def get_by_id(cls, developer_id: uuid.UUID | str) -> "Developer | None":
        """Retrieve a developer by primary key; malformed ids yield None."""
        if isinstance(developer_id, str):
            try:
                developer_id = uuid.UUID(developer_id)
            except ValueError:
                return None
        return db.session.get(cls, developer_id)

    @classmethod
    def get_by_email(cls, email: str) -> "Developer | None":
        return cls.query.filter_by(email=email.strip().lower()).first()

    @classmethod
    def get_by_client_id(cls, client_id: str) -> "Developer | None":
        return cls.query.filter_by(client_id=client_id).first()

    @classmethod
    def get_by_nip(cls, nip: str) -> "Developer | None":
        return cls.query.filter_by(nip=nip).first()

    @classmethod
    def get_all(
        cls,
        subscription_status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list["Developer"]:
        """Retrieve developers, optionally filtered by subscription status."""
        query = cls.query.order_by(cls.created_at)
        if subscription_status is not None:
            query = query.filter_by(subscription_status=subscription_status)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @classmethod
    def create(
        cls,
        email: str,
        company_name: str,
        client_id: str,
        trial_days: int,
        **kwargs: Any,
    ) -> "Developer":
        """Create and persist a developer with a fresh trial period.

        Args:
            email: Login address.
            company_name: Company name.
            client_id: Public feed identifier.
            trial_days: Length of the trial in days.
            **kwargs: Any other column value.

        Returns:
            The committed Developer.
        """
        developer = cls(
            email=email,
            company_name=company_name,
            client_id=client_id,
            subscription_plan="trial",
            subscription_status="trial",
            trial_ends_at=utcnow() + timedelta(days=trial_days),
            email_notifications_sent={},
            **kwargs,
        )
        db.session.add(developer)
        db.session.commit()
        return developer

    @property
    def properties(self) -> list:
        """All properties across every project of the developer."""
        return [prop for project in self.projects for prop in project.properties]

    def period_end(self) -> datetime | None:
        """End of the current trial or paid period."""
        if self.subscription_status == "trial":
            return self.trial_ends_at
        return self.subscription_end_date

    def mark_notification_sent(self, key: str) -> None:
        """Record a reminder email so that it is not sent twice."""
        sent = dict(self.email_notifications_sent or {})
        sent[key] = utcnow().isoformat()
        # Reassign so the JSON column is flagged as modified
        self.email_notifications_sent = sent

    def notification_sent(self, key: str) -> bool:
        return key in (self.email_notifications_sent or {})
