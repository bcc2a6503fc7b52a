# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas for developer accounts.

Registration and profile updates normalize NIP and REGON (dashes and spaces
removed) before length and checksum validation.
"""

from marshmallow import EXCLUDE, ValidationError, fields, pre_load, validate, validates
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from otoraport.models.constants import DEVELOPER_COMPANY_NAME_MAX_LENGTH
from otoraport.models.developer import Developer
from otoraport.schemas.constants import (
    COMPANY_NAME_TOO_LONG,
    EMAIL_NOT_UNIQUE,
    FIELD_EMPTY,
    INVALID_EMAIL,
    NIP_INVALID,
    NIP_NOT_UNIQUE,
    PASSWORD_MIN_LENGTH,
    PASSWORD_TOO_SHORT,
    REGON_INVALID,
)
from otoraport.services import validation

EDITABLE_PROFILE_FIELDS = (
    "name",
    "company_name",
    "nip",
    "regon",
    "phone",
    "website",
    "legal_form",
    "krs",
    "ceidg",
    "street",
    "house_number",
    "apartment_number",
    "postal_code",
    "city",
    "municipality",
    "county",
    "voivodeship",
)


def _strip_and_normalize(data):
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for key, value in data.items():
        if isinstance(value, str):
            data[key] = value.strip()
    for key in ("nip", "regon"):
        if isinstance(data.get(key), str):
            data[key] = validation.normalize_identifier(data[key]) or None
    if isinstance(data.get("email"), str):
        data["email"] = data["email"].lower()
    return data


class DeveloperSchema(SQLAlchemyAutoSchema):
    """Read-only serialization of a developer profile.

    Credentials and internal bookkeeping (password hash, reminder keys) are
    never dumped.
    """

    class Meta:
        model = Developer
        load_instance = False
        exclude = ("password_hash", "email_notifications_sent")
        dump_only = ("id", "created_at", "updated_at", "client_id")
        unknown = EXCLUDE


class DeveloperRegisterSchema(SQLAlchemyAutoSchema):
    """Input for ``POST /auth/register``.

    Attributes:
        email: Login address, must not be registered yet.
        company_name: Required company name.
        name: Contact person.
        nip: Optional tax id, checksum-validated and unique.
        regon: Optional business registry number, checksum-validated.
        phone: Optional phone number.
        password: Optional, at least 8 characters. Without it the account
            signs in with magic links only.
    """

    email = fields.Email(required=True, error_messages={"invalid": INVALID_EMAIL})
    company_name = fields.Str(
        required=True,
        validate=validate.Length(
            max=DEVELOPER_COMPANY_NAME_MAX_LENGTH, error=COMPANY_NAME_TOO_LONG
        ),
    )
    nip = fields.Str(required=False, allow_none=True)
    regon = fields.Str(required=False, allow_none=True)
    password = fields.Str(
        required=False,
        allow_none=True,
        load_only=True,
        validate=validate.Length(min=PASSWORD_MIN_LENGTH, error=PASSWORD_TOO_SHORT),
    )

    class Meta:
        model = Developer
        load_instance = False
        fields = (
            "email",
            "company_name",
            "name",
            "nip",
            "regon",
            "phone",
            "website",
            "password",
        )
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        return _strip_and_normalize(data)

    @validates("email")
    def validate_email(self, value, **kwargs):
        if Developer.get_by_email(value):
            raise ValidationError(EMAIL_NOT_UNIQUE)
        return value

    @validates("company_name")
    def validate_company_name(self, value, **kwargs):
        if not value:
            raise ValidationError(FIELD_EMPTY)
        return value

    @validates("nip")
    def validate_nip(self, value, **kwargs):
        if value is None:
            return value
        if not validation.validate_nip(value):
            raise ValidationError(NIP_INVALID)
        if Developer.get_by_nip(value):
            raise ValidationError(NIP_NOT_UNIQUE)
        return value

    @validates("regon")
    def validate_regon(self, value, **kwargs):
        if value is not None and not validation.validate_regon(value):
            raise ValidationError(REGON_INVALID)
        return value


class DeveloperUpdateSchema(SQLAlchemyAutoSchema):
    """Partial profile update (``PATCH /developers/me``).

    Email, client_id and subscription fields are not editable here.
    The developer being updated is passed as ``developer`` so that keeping
    the current NIP does not trip the uniqueness check.
    """

    def __init__(self, *args, **kwargs):
        self.developer = kwargs.pop("developer", None)
        super().__init__(*args, **kwargs)

    company_name = fields.Str(
        required=False,
        validate=validate.Length(
            max=DEVELOPER_COMPANY_NAME_MAX_LENGTH, error=COMPANY_NAME_TOO_LONG
        ),
    )
    nip = fields.Str(required=False, allow_none=True)
    regon = fields.Str(required=False, allow_none=True)

    class Meta:
        model = Developer
        load_instance = False
        fields = EDITABLE_PROFILE_FIELDS
        partial = True
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        return _strip_and_normalize(data)

    @validates("company_name")
    def validate_company_name(self, value, **kwargs):
        if not value:
            raise ValidationError(FIELD_EMPTY)
        return value

    @validates("nip")
    def validate_nip(self, value, **kwargs):
        if value is None:
            return value
        if not validation.validate_nip(value):
            raise ValidationError(NIP_INVALID)
        existing = Developer.get_by_nip(value)
        if existing and (not self.developer or existing.id != self.developer.id):
            raise ValidationError(NIP_NOT_UNIQUE)
        return value

    @validates("regon")
    def validate_regon(self, value, **kwargs):
        if value is not None and not validation.validate_regon(value):
            raise ValidationError(REGON_INVALID)
        return value
