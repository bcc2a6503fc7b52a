# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas for sign-in requests and the NIP lookup."""

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validates

from otoraport.schemas.constants import FIELD_EMPTY, INVALID_EMAIL, NIP_INVALID
from otoraport.services import validation


class MagicLinkRequestSchema(Schema):
    """Schema for magic-link request."""

    email = fields.Email(required=True, error_messages={"invalid": INVALID_EMAIL})

    class Meta:
        """Schema configuration."""

        unknown = EXCLUDE

    @pre_load
    def normalize_email(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("email"), str):
            data = {**data, "email": data["email"].strip().lower()}
        return data


class LoginSchema(MagicLinkRequestSchema):
    """Schema for password sign-in."""

    password = fields.Str(required=True, load_only=True)

    @validates("password")
    def validate_password(self, value: str, **kwargs) -> None:
        if not value:
            raise ValidationError(FIELD_EMPTY)


class NipLookupSchema(Schema):
    """Schema for NIP lookup request.

    The NIP may be sent with dashes or spaces; it is loaded as 10 digits.
    """

    nip = fields.Str(required=True)

    class Meta:
        """Schema configuration."""

        unknown = EXCLUDE

    @pre_load
    def normalize_nip(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("nip"), str):
            data = {**data, "nip": validation.normalize_identifier(data["nip"])}
        return data

    @validates("nip")
    def validate_nip(self, value: str, **kwargs) -> None:
        """Validate the NIP checksum.

        Raises:
            ValidationError: If the NIP is not 10 digits with a valid
                control digit.
        """
        if not validation.validate_nip(value):
            raise ValidationError(NIP_INVALID)
