# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas for properties.

Properties are created by CSV import; the API only reads, edits and deletes
them, so there is no create schema.
"""

from marshmallow import EXCLUDE, fields, pre_load, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from otoraport.models.constants import PROPERTY_STATUSES
from otoraport.models.property import Property
from otoraport.schemas.constants import PROPERTY_STATUS_INVALID, VALUE_MUST_BE_POSITIVE

_positive = validate.Range(min=0, min_inclusive=False, error=VALUE_MUST_BE_POSITIVE)
_non_negative = validate.Range(min=0, error=VALUE_MUST_BE_POSITIVE)


class PropertySchema(SQLAlchemyAutoSchema):
    """Serialization of a property with the name of its project."""

    project_name = fields.Method("get_project_name", dump_only=True)

    class Meta:
        model = Property
        load_instance = False
        include_fk = True
        exclude = ("raw_data",)
        dump_only = ("id", "project_id", "created_at", "updated_at")
        unknown = EXCLUDE

    def get_project_name(self, obj):
        return obj.project.name if obj.project else None


class PropertyUpdateSchema(SQLAlchemyAutoSchema):
    """Partial update of a property (``PATCH /properties/{id}``).

    The property number and project are fixed once imported.
    """

    price_per_m2 = fields.Float(allow_none=True, validate=_positive)
    total_price = fields.Float(allow_none=True, validate=_positive)
    final_price = fields.Float(allow_none=True, validate=_positive)
    area = fields.Float(allow_none=True, validate=_positive)
    parking_price = fields.Float(allow_none=True, validate=_non_negative)
    storage_price = fields.Float(allow_none=True, validate=_non_negative)
    status = fields.Str(
        required=False,
        validate=validate.OneOf(
            PROPERTY_STATUSES,
            error=PROPERTY_STATUS_INVALID.format(choices=", ".join(PROPERTY_STATUSES)),
        ),
    )

    class Meta:
        model = Property
        load_instance = False
        exclude = (
            "id",
            "project_id",
            "property_number",
            "raw_data",
            "created_at",
            "updated_at",
        )
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
        }
