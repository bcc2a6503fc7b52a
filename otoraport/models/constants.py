# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Database model constants for field sizes and allowed values.

This module centralizes all database field size constraints and enumerated
values used across SQLAlchemy models to ensure consistency and easier
maintenance.
"""

# Developer field lengths
DEVELOPER_EMAIL_MAX_LENGTH = 255
DEVELOPER_NAME_MAX_LENGTH = 120
DEVELOPER_COMPANY_NAME_MAX_LENGTH = 255
DEVELOPER_NIP_LENGTH = 10
DEVELOPER_REGON_MAX_LENGTH = 14
DEVELOPER_PHONE_MAX_LENGTH = 32
DEVELOPER_CLIENT_ID_MAX_LENGTH = 40
DEVELOPER_CLIENT_ID_MIN_LENGTH = 10
DEVELOPER_SHORT_FIELD_MAX_LENGTH = 64
DEVELOPER_ADDRESS_FIELD_MAX_LENGTH = 120
DEVELOPER_URL_MAX_LENGTH = 500

# Project field lengths
PROJECT_NAME_MAX_LENGTH = 200
PROJECT_LOCATION_MAX_LENGTH = 120
PROJECT_ADDRESS_MAX_LENGTH = 255
PROJECT_SHORT_FIELD_MAX_LENGTH = 64

# Property field lengths
PROPERTY_NUMBER_MAX_LENGTH = 50
PROPERTY_TYPE_MAX_LENGTH = 64
PROPERTY_PARKING_MAX_LENGTH = 100

# Payment field lengths
PAYMENT_SESSION_ID_MAX_LENGTH = 64
PAYMENT_TOKEN_MAX_LENGTH = 128

# Activity log field lengths
ACTIVITY_ACTION_MAX_LENGTH = 64

# Enumerations
SUBSCRIPTION_PLANS = ("trial", "starter", "professional")
SUBSCRIPTION_STATUSES = ("trial", "active", "cancelled", "expired")
PROJECT_STATUSES = ("active", "inactive", "completed")
PROPERTY_STATUSES = ("available", "sold", "reserved")
PROPERTY_TYPES = ("Lokal mieszkalny", "Dom jednorodzinny")
FILE_TYPES = ("xml", "md")
PAYMENT_STATUSES = ("pending", "initialized", "completed", "failed")
BILLING_PERIODS = ("monthly", "yearly")
ACTIVITY_STATUSES = ("success", "error", "info")
DEFAULT_CURRENCY = "PLN"
