# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas for subscription payments."""

from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from otoraport.models.constants import BILLING_PERIODS
from otoraport.models.payment import Payment
from otoraport.schemas.constants import BILLING_PERIOD_INVALID, PLAN_INVALID
from otoraport.services.subscription import PAID_PLANS


class PaymentSchema(SQLAlchemyAutoSchema):
    """Serialization of a payment; the Przelewy24 token stays internal."""

    class Meta:
        model = Payment
        load_instance = False
        include_fk = True
        exclude = ("przelewy24_token",)
        unknown = EXCLUDE


class PaymentCreateSchema(Schema):
    """Input for ``POST /payments``.

    Attributes:
        plan: Paid plan to buy (``starter`` or ``professional``).
        billing_period: ``monthly`` (default) or ``yearly``.
    """

    plan = fields.Str(
        required=True,
        validate=validate.OneOf(
            PAID_PLANS, error=PLAN_INVALID.format(choices=", ".join(PAID_PLANS))
        ),
    )
    billing_period = fields.Str(
        load_default="monthly",
        validate=validate.OneOf(
            BILLING_PERIODS,
            error=BILLING_PERIOD_INVALID.format(choices=", ".join(BILLING_PERIODS)),
        ),
    )

    class Meta:
        unknown = EXCLUDE


class PaymentWebhookSchema(Schema):
    """Form fields of the Przelewy24 status notification."""

    session_id = fields.Str(required=True, data_key="p24_session_id")
    order_id = fields.Int(
        required=True, data_key="p24_order_id", validate=validate.Range(min=1)
    )
    amount = fields.Int(
        required=True, data_key="p24_amount", validate=validate.Range(min=1)
    )
    currency = fields.Str(required=False, data_key="p24_currency")

    class Meta:
        unknown = EXCLUDE
