# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schema for the ministry approval callback."""

from marshmallow import EXCLUDE, Schema, fields


class MinistryConfirmSchema(Schema):
    """Body of ``POST /ministry/confirm``.

    Attributes:
        developer_id: Id of the registered developer.
        approved: True when the ministry accepted the registration.
    """

    developer_id = fields.UUID(required=True)
    approved = fields.Bool(required=True, strict=True)

    class Meta:
        unknown = EXCLUDE
