# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas module exports.

Read schemas serialize models for responses; the create, replace and update
variants validate request bodies.
"""

from otoraport.schemas.auth_schema import (
    LoginSchema,
    MagicLinkRequestSchema,
    NipLookupSchema,
)
from otoraport.schemas.developer_schema import (
    DeveloperRegisterSchema,
    DeveloperSchema,
    DeveloperUpdateSchema,
)
from otoraport.schemas.ministry_schema import MinistryConfirmSchema
from otoraport.schemas.payment_schema import (
    PaymentCreateSchema,
    PaymentSchema,
    PaymentWebhookSchema,
)
from otoraport.schemas.project_schema import (
    ProjectCreateSchema,
    ProjectReplaceSchema,
    ProjectSchema,
    ProjectUpdateSchema,
)
from otoraport.schemas.property_schema import PropertySchema, PropertyUpdateSchema

__all__ = [
    "DeveloperRegisterSchema",
    "DeveloperSchema",
    "DeveloperUpdateSchema",
    "LoginSchema",
    "MagicLinkRequestSchema",
    "MinistryConfirmSchema",
    "NipLookupSchema",
    "PaymentCreateSchema",
    "PaymentSchema",
    "PaymentWebhookSchema",
    "ProjectCreateSchema",
    "ProjectReplaceSchema",
    "ProjectSchema",
    "ProjectUpdateSchema",
    "PropertySchema",
    "PropertyUpdateSchema",
]
