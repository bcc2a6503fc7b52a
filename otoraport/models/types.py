# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Custom SQLAlchemy column types and mixins.

The types keep native PostgreSQL UUID / JSONB columns on the hosted database
while the unit tests run on SQLite.
"""

import json
import uuid
from datetime import UTC, datetime

from sqlalchemy import String, Text, TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB as PostgreSQLJSONB  # noqa: N811
from sqlalchemy.dialects.postgresql import UUID as PostgreSQLUUID  # noqa: N811

from otoraport.models.db import db


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Timestamps are stored without timezone so that values read back from
    SQLite and PostgreSQL compare equal.
    """
    return datetime.now(UTC).replace(tzinfo=None)


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Native ``UUID`` on PostgreSQL, ``VARCHAR(36)`` elsewhere. Always returns
    :class:`uuid.UUID` objects.
    """

    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PostgreSQLUUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(
        self, value: uuid.UUID | str | None, dialect
    ) -> uuid.UUID | str | None:
        """Accept UUID objects or their string form (e.g. from JSON payloads)."""
        if value is None:
            return value

        if isinstance(value, str):
            value = uuid.UUID(value)

        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(
        self, value: uuid.UUID | str | None, dialect
    ) -> uuid.UUID | None:
        if value is None:
            return value
        if not isinstance(value, uuid.UUID):
            return uuid.UUID(value)
        return value


class JSONB(TypeDecorator):
    """Platform-independent JSONB type.

    Native ``JSONB`` on PostgreSQL, JSON-encoded ``TEXT`` elsewhere. Used for
    the raw CSV row kept on each property and for activity log details.

    Example:
        >>> prop = Property(property_number="A1", raw_data={"Nr lokalu": "A1"})
        >>> prop.raw_data["Nr lokalu"]
        'A1'
    """

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PostgreSQLJSONB())
        return dialect.type_descriptor(Text())

    def process_bind_param(
        self, value: dict | list | None, dialect
    ) -> dict | list | str | None:
        if value is None or dialect.name == "postgresql":
            return value
        return json.dumps(value, ensure_ascii=False, default=str)

    def process_result_value(
        self, value: str | dict | list | None, dialect
    ) -> dict | list | None:
        if value is None:
            return value
        if dialect.name == "postgresql":
            return value  # type: ignore[return-value]
        return json.loads(value) if isinstance(value, str) else value


class UUIDMixin:
    """Mixin adding a UUID primary key generated with :func:`uuid.uuid4`."""

    id = db.Column(GUID(), primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """Mixin adding ``created_at`` and ``updated_at`` columns.

    Both are set on the Python side so that a freshly created row can be
    serialized before it is reloaded from the database.
    """

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
