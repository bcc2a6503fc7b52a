# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Generated report files (harvester XML and Markdown) stored per developer."""

import uuid

from sqlalchemy.orm import relationship

from otoraport.models.db import db
from otoraport.models.types import GUID, TimestampMixin, UUIDMixin, utcnow


class GeneratedFile(UUIDMixin, TimestampMixin, db.Model):
    """Latest generated document of one type for a developer.

    There is at most one row per ``(developer_id, file_type)``; regeneration
    overwrites it in place.
    """

    __tablename__ = "generated_files"

    developer_id = db.Column(
        GUID(),
        db.ForeignKey("developers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_type = db.Column(db.String(8), nullable=False)
    content = db.Column(db.Text, nullable=False)
    md5 = db.Column(db.String(32), nullable=False)
    file_size = db.Column(db.Integer, nullable=False, default=0)
    properties_count = db.Column(db.Integer, nullable=False, default=0)
    last_generated = db.Column(db.DateTime, nullable=False, default=utcnow)

    developer = relationship("Developer", back_populates="generated_files")

    __table_args__ = (
        db.UniqueConstraint(
            "developer_id", "file_type", name="uq_generated_file_developer_type"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<GeneratedFile {self.file_type} developer={self.developer_id} "
            f"properties={self.properties_count}>"
        )

    @classmethod
    def get_for_developer(
        cls, developer_id: uuid.UUID, file_type: str
    ) -> "GeneratedFile | None":
        return cls.query.filter_by(developer_id=developer_id, file_type=file_type).first()

    @classmethod
    def upsert(
        cls,
        developer_id: uuid.UUID,
        file_type: str,
        content: str,
        md5: str,
        properties_count: int,
    ) -> "GeneratedFile":
        """Insert or overwrite the developer's file of this type (no commit)."""
        generated = cls.get_for_developer(developer_id, file_type)
        if generated is None:
            generated = cls(developer_id=developer_id, file_type=file_type)
            db.session.add(generated)
        generated.content = content
        generated.md5 = md5
        generated.file_size = len(content.encode("utf-8"))
        generated.properties_count = properties_count
        generated.last_generated = utcnow()
        return generated

    @classmethod
    def delete_for_developer(cls, developer_id: uuid.UUID) -> int:
        """Remove every stored file of a developer (no commit)."""
        return cls.query.filter_by(developer_id=developer_id).delete()

    def to_dict(self) -> dict:
        return {
            "file_type": self.file_type,
            "md5": self.md5,
            "file_size": self.file_size,
            "properties_count": self.properties_count,
            "last_generated": self.last_generated.isoformat(),
        }
