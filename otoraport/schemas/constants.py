# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Validation error messages for schema validation.

Messages are in Polish, the language of the dashboard that shows them.
"""

from otoraport.models.constants import (
    DEVELOPER_COMPANY_NAME_MAX_LENGTH,
    PROJECT_NAME_MAX_LENGTH,
    PROPERTY_NUMBER_MAX_LENGTH,
)

# Shared
FIELD_EMPTY = "Pole nie może być puste."
INVALID_EMAIL = "Nieprawidłowy format adresu email."

# Developer
EMAIL_NOT_UNIQUE = "Użytkownik z tym adresem email już istnieje."
NIP_INVALID = "Nieprawidłowy numer NIP."
NIP_NOT_UNIQUE = "Firma z tym numerem NIP jest już zarejestrowana."
REGON_INVALID = "Nieprawidłowy numer REGON."
PASSWORD_TOO_SHORT = "Hasło musi mieć co najmniej 8 znaków."
COMPANY_NAME_TOO_LONG = (
    f"Nazwa firmy nie może przekraczać {DEVELOPER_COMPANY_NAME_MAX_LENGTH} znaków."
)
PASSWORD_MIN_LENGTH = 8

# Project
PROJECT_NAME_TOO_LONG = (
    f"Nazwa projektu nie może przekraczać {PROJECT_NAME_MAX_LENGTH} znaków."
)
PROJECT_NAME_NOT_UNIQUE = "Projekt o tej nazwie już istnieje."
PROJECT_STATUS_INVALID = "Status projektu musi być jednym z: {choices}."

# Property
PROPERTY_NUMBER_TOO_LONG = (
    f"Numer lokalu nie może przekraczać {PROPERTY_NUMBER_MAX_LENGTH} znaków."
)
PROPERTY_STATUS_INVALID = "Status musi być jednym z: {choices}."
VALUE_MUST_BE_POSITIVE = "Wartość musi być dodatnia."

# Payment
PLAN_INVALID = "Nieprawidłowy plan. Dostępne: {choices}."
BILLING_PERIOD_INVALID = "Nieprawidłowy okres rozliczeniowy. Dostępne: {choices}."
