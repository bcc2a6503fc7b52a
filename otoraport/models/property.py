# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Property model: one apartment or house on the published price list."""

import uuid
from datetime import datetime

from sqlalchemy.orm import relationship

from otoraport.models.constants import (
    PROPERTY_NUMBER_MAX_LENGTH,
    PROPERTY_PARKING_MAX_LENGTH,
    PROPERTY_TYPE_MAX_LENGTH,
)
from otoraport.models.db import db
from otoraport.models.project import Project
from otoraport.models.types import GUID, JSONB, TimestampMixin, UUIDMixin


class Property(UUIDMixin, TimestampMixin, db.Model):
    """Apartment or house offered within a project.

    Prices are in PLN, area in square metres. ``raw_data`` keeps the CSV row
    the property was imported from.
    """

    __tablename__ = "properties"

    project_id = db.Column(
        GUID(),
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_number = db.Column(db.String(PROPERTY_NUMBER_MAX_LENGTH), nullable=False)
    property_type = db.Column(
        db.String(PROPERTY_TYPE_MAX_LENGTH), nullable=False, default="Lokal mieszkalny"
    )
    price_per_m2 = db.Column(db.Float, nullable=True)
    total_price = db.Column(db.Float, nullable=True)
    final_price = db.Column(db.Float, nullable=True)
    area = db.Column(db.Float, nullable=True)
    parking_space = db.Column(db.String(PROPERTY_PARKING_MAX_LENGTH), nullable=True)
    parking_price = db.Column(db.Float, nullable=True)
    storage_room = db.Column(db.String(PROPERTY_PARKING_MAX_LENGTH), nullable=True)
    storage_price = db.Column(db.Float, nullable=True)
    price_valid_from = db.Column(db.Date, nullable=True)
    price_valid_to = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(32), nullable=False, default="available", index=True)
    raw_data = db.Column(JSONB(), nullable=True)

    project = relationship("Project", back_populates="properties")

    __table_args__ = (
        db.UniqueConstraint(
            "project_id", "property_number", name="uq_property_project_number"
        ),
    )

    def __repr__(self) -> str:
        return f"<Property {self.property_number} (project={self.project_id})>"

    @classmethod
    def _developer_query(cls, developer_id: uuid.UUID):
        return cls.query.join(Project).filter(Project.developer_id == developer_id)

    @classmethod
    def get_all(
        cls,
        developer_id: uuid.UUID,
        project_id: uuid.UUID | None = None,
        status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list["Property"]:
        """Retrieve a developer's properties with optional filters and paging."""
        query = cls._developer_query(developer_id)
        if project_id is not None:
            query = query.filter(cls.project_id == project_id)
        if status is not None:
            query = query.filter(cls.status == status)
        query = query.order_by(Project.name, cls.property_number)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @classmethod
    def get_by_id(
        cls, property_id: uuid.UUID | str, developer_id: uuid.UUID
    ) -> "Property | None":
        try:
            property_id = uuid.UUID(str(property_id))
        except ValueError:
            return None
        return cls._developer_query(developer_id).filter(cls.id == property_id).first()

    @classmethod
    def count_by_developer(cls, developer_id: uuid.UUID) -> int:
        return cls._developer_query(developer_id).count()

    @classmethod
    def count(
        cls,
        developer_id: uuid.UUID,
        project_id: uuid.UUID | None = None,
        status: str | None = None,
    ) -> int:
        """Count a developer's properties with the same filters as get_all."""
        query = cls._developer_query(developer_id)
        if project_id is not None:
            query = query.filter(cls.project_id == project_id)
        if status is not None:
            query = query.filter(cls.status == status)
        return query.count()

    @classmethod
    def count_created_since(cls, developer_id: uuid.UUID, since: datetime) -> int:
        return cls._developer_query(developer_id).filter(cls.created_at >= since).count()

    @classmethod
    def get_by_number(cls, project_id: uuid.UUID, property_number: str) -> "Property | None":
        return cls.query.filter_by(
            project_id=project_id, property_number=property_number
        ).first()
