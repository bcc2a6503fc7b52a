# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Activity log model.

Records user-visible events (uploads, regenerations, ministry notifications,
payments) and every batch sync attempt, successful or not.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.orm import relationship

from otoraport.models.constants import ACTIVITY_ACTION_MAX_LENGTH
from otoraport.models.db import db
from otoraport.models.types import GUID, JSONB, utcnow


class ActivityLog(db.Model):
    """Append-only activity entry."""

    __tablename__ = "activity_logs"

    id = db.Column(GUID, primary_key=True, default=uuid.uuid4)
    developer_id = db.Column(
        GUID,
        db.ForeignKey("developers.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    action = db.Column(String(ACTIVITY_ACTION_MAX_LENGTH), nullable=False, index=True)
    status = db.Column(String(16), nullable=False, default="success")
    message = db.Column(Text, nullable=True)
    records_count = db.Column(db.Integer, nullable=True)
    details = db.Column(JSONB, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    developer = relationship("Developer", back_populates="activity_logs")

    def __repr__(self):
        return (
            f"<ActivityLog {self.action} status={self.status} "
            f"developer={self.developer_id}>"
        )

    @classmethod
    def record(
        cls,
        action: str,
        developer_id: uuid.UUID | None = None,
        status: str = "success",
        message: str | None = None,
        records_count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> "ActivityLog":
        """Add an entry to the session; the caller commits."""
        entry = cls(
            action=action,
            developer_id=developer_id,
            status=status,
            message=message,
            records_count=records_count,
            details=details,
        )
        db.session.add(entry)
        return entry

    @classmethod
    def get_recent(
        cls,
        developer_id: uuid.UUID | None = None,
        action: str | None = None,
        status: str | None = None,
        since: datetime | None = None,
        limit: int | None = 50,
    ) -> list["ActivityLog"]:
        query = cls.query
        if developer_id is not None:
            query = query.filter_by(developer_id=developer_id)
        if action is not None:
            query = query.filter_by(action=action)
        if status is not None:
            query = query.filter_by(status=status)
        if since is not None:
            query = query.filter(cls.created_at >= since)
        query = query.order_by(cls.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def to_dict(self):
        return {
            "id": str(self.id),
            "developer_id": str(self.developer_id) if self.developer_id else None,
            "action": self.action,
            "status": self.status,
            "message": self.message,
            "records_count": self.records_count,
            "details": self.details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
