# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas for projects (investments).

Project names are unique per developer, so every input schema takes the
owning ``developer_id`` as a constructor argument and, for updates, the
``project`` being modified.
"""

from marshmallow import EXCLUDE, ValidationError, fields, pre_load, validate, validates
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from otoraport.models.constants import PROJECT_NAME_MAX_LENGTH, PROJECT_STATUSES
from otoraport.models.project import Project
from otoraport.schemas.constants import (
    FIELD_EMPTY,
    PROJECT_NAME_NOT_UNIQUE,
    PROJECT_NAME_TOO_LONG,
    PROJECT_STATUS_INVALID,
)

READ_ONLY_FIELDS = ("id", "developer_id", "created_at", "updated_at")

_status_validator = validate.OneOf(
    PROJECT_STATUSES, error=PROJECT_STATUS_INVALID.format(choices=", ".join(PROJECT_STATUSES))
)


class ProjectSchema(SQLAlchemyAutoSchema):
    """Serialization of a project with its property count."""

    property_count = fields.Method("get_property_count", dump_only=True)

    class Meta:
        model = Project
        load_instance = False
        include_fk = True
        dump_only = READ_ONLY_FIELDS
        unknown = EXCLUDE

    def get_property_count(self, obj):
        return len(obj.properties)


class _ProjectInputSchema(SQLAlchemyAutoSchema):
    """Shared behaviour of the create, replace and update schemas."""

    def __init__(self, *args, **kwargs):
        self.developer_id = kwargs.pop("developer_id", None)
        self.project = kwargs.pop("project", None)
        super().__init__(*args, **kwargs)

    status = fields.Str(required=False, validate=_status_validator)

    @pre_load
    def strip_strings(self, data, **kwargs):
        """Strip whitespace from every string field before validation."""
        if not isinstance(data, dict):
            return data
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
        }

    @validates("name")
    def validate_name(self, value, **kwargs):
        """Reject empty names and names used by another project of the developer.

        Raises:
            ValidationError: If the name is empty or already taken.
        """
        if not value:
            raise ValidationError(FIELD_EMPTY)

        if self.developer_id is not None:
            existing = Project.get_by_name(value, self.developer_id)
            # Keeping its own name is allowed on update
            if existing and (not self.project or existing.id != self.project.id):
                raise ValidationError(PROJECT_NAME_NOT_UNIQUE)
        return value


class ProjectCreateSchema(_ProjectInputSchema):
    """Input for ``POST /projects``."""

    name = fields.Str(
        required=True,
        validate=validate.Length(max=PROJECT_NAME_MAX_LENGTH, error=PROJECT_NAME_TOO_LONG),
    )

    class Meta:
        model = Project
        load_instance = False
        exclude = READ_ONLY_FIELDS
        unknown = EXCLUDE


class ProjectReplaceSchema(_ProjectInputSchema):
    """Input for ``PUT /projects/{id}``: every required field must be sent."""

    name = fields.Str(
        required=True,
        validate=validate.Length(max=PROJECT_NAME_MAX_LENGTH, error=PROJECT_NAME_TOO_LONG),
    )
    status = fields.Str(required=True, validate=_status_validator)

    class Meta:
        model = Project
        load_instance = False
        exclude = READ_ONLY_FIELDS
        unknown = EXCLUDE


class ProjectUpdateSchema(_ProjectInputSchema):
    """Input for ``PATCH /projects/{id}``: every field optional."""

    name = fields.Str(
        required=False,
        validate=validate.Length(max=PROJECT_NAME_MAX_LENGTH, error=PROJECT_NAME_TOO_LONG),
    )

    class Meta:
        model = Project
        load_instance = False
        exclude = READ_ONLY_FIELDS
        unknown = EXCLUDE
