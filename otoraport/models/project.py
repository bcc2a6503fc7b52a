# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Project (investment) model.

A project groups the properties of one housing investment. Its address is
published as the ``investment_location`` of every record in the harvester XML.
"""

import uuid
from typing import Any

from sqlalchemy.orm import relationship

from otoraport.models.constants import (
    PROJECT_ADDRESS_MAX_LENGTH,
    PROJECT_LOCATION_MAX_LENGTH,
    PROJECT_NAME_MAX_LENGTH,
    PROJECT_SHORT_FIELD_MAX_LENGTH,
)
from otoraport.models.db import db
from otoraport.models.types import GUID, TimestampMixin, UUIDMixin


class Project(UUIDMixin, TimestampMixin, db.Model):
    """Housing investment owned by a developer.

    Attributes:
        developer_id: Owning developer (tenant isolation).
        name: Investment name, unique per developer.
        location: City of the investment.
        address: Street and number.
        status: ``active``, ``inactive`` or ``completed``.
    """

    __tablename__ = "projects"

    developer_id = db.Column(
        GUID(),
        db.ForeignKey("developers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(PROJECT_NAME_MAX_LENGTH), nullable=False)
    location = db.Column(db.String(PROJECT_LOCATION_MAX_LENGTH), nullable=True)
    address = db.Column(db.String(PROJECT_ADDRESS_MAX_LENGTH), nullable=True)
    postal_code = db.Column(db.String(PROJECT_SHORT_FIELD_MAX_LENGTH), nullable=True)
    municipality = db.Column(db.String(PROJECT_LOCATION_MAX_LENGTH), nullable=True)
    county = db.Column(db.String(PROJECT_LOCATION_MAX_LENGTH), nullable=True)
    voivodeship = db.Column(db.String(PROJECT_LOCATION_MAX_LENGTH), nullable=True)
    status = db.Column(db.String(32), nullable=False, default="active")

    developer = relationship("Developer", back_populates="projects")
    properties = relationship(
        "Property",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="Property.property_number",
    )

    __table_args__ = (
        db.UniqueConstraint("developer_id", "name", name="uq_project_developer_name"),
    )

    def __repr__(self) -> str:
        return f"<Project {self.name} (developer={self.developer_id})> (ID: {self.id})"

    @classmethod
    def get_all(
        cls,
        developer_id: uuid.UUID,
        limit: int | None = None,
        offset: int | None = None,
        status: str | None = None,
    ) -> list["Project"]:
        """Retrieve the projects of a developer with optional pagination."""
        query = cls.query.filter_by(developer_id=developer_id).order_by(cls.created_at)
        if status is not None:
            query = query.filter_by(status=status)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @classmethod
    def get_by_id(
        cls, project_id: uuid.UUID | str, developer_id: uuid.UUID
    ) -> "Project | None":
        """Retrieve a project within the developer's scope."""
        try:
            project_id = uuid.UUID(str(project_id))
        except ValueError:
            return None
        return cls.query.filter_by(id=project_id, developer_id=developer_id).first()

    @classmethod
    def get_by_name(cls, name: str, developer_id: uuid.UUID) -> "Project | None":
        return cls.query.filter_by(name=name, developer_id=developer_id).first()

    @classmethod
    def count_by_developer(cls, developer_id: uuid.UUID) -> int:
        return cls.query.filter_by(developer_id=developer_id).count()

    @classmethod
    def get_or_create(
        cls, name: str, developer_id: uuid.UUID, **kwargs: Any
    ) -> tuple["Project", bool]:
        """Return the developer's project with this name, creating it if needed.

        The new project is added to the session but not committed.

        Returns:
            Tuple of (project, created).
        """
        project = cls.get_by_name(name, developer_id)
        if project:
            return project, False
        project = cls(name=name, developer_id=developer_id, **kwargs)
        db.session.add(project)
        db.session.flush()
        return project, True
