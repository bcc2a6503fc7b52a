# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Subscription payment resources (Przelewy24)."""

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from otoraport.models.db import db
from otoraport.models.payment import Payment
from otoraport.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    ERROR_VALIDATION,
    ERROR_VALIDATION_LOG,
    MSG_DEVELOPER_NOT_FOUND,
    MSG_MISSING_WEBHOOK_PARAMS,
    MSG_NO_INPUT_DATA,
    MSG_PAYMENT_FAILED,
    MSG_PAYMENT_NOT_FOUND,
    MSG_PAYMENT_VERIFICATION_FAILED,
)
from otoraport.schemas.payment_schema import (
    PaymentCreateSchema,
    PaymentSchema,
    PaymentWebhookSchema,
)
from otoraport.services.billing import create_payment, process_webhook
from otoraport.services.przelewy24_client import PaymentError
from otoraport.services.subscription import PAID_PLANS, PLANS
from otoraport.utils.jwt_utils import get_current_developer, require_jwt_auth
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.logger import logger


class PlansResource(Resource):
    """GET /payments/plans: public plan catalogue, prices in grosze."""

    @limiter.limit(default_limit)
    def get(self):
        return {
            "currency": "PLN",
            "plans": [{"id": plan_id, **PLANS[plan_id]} for plan_id in PAID_PLANS],
        }, 200


class PaymentListResource(Resource):
    """The developer's payments."""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def get(self):
        """Payment history, newest first."""
        developer = get_current_developer()
        if developer is None:
            return {"message": MSG_DEVELOPER_NOT_FOUND}, 404
        payments = sorted(developer.payments, key=lambda p: p.created_at, reverse=True)
        return PaymentSchema(many=True).dump(payments), 200

    @require_jwt_auth
    @limiter.limit(default_limit)
    def post(self):
        """Start a subscription purchase.

        Expected JSON body:
            plan (str): ``starter`` or ``professional``.
            billing_period (str, optional): ``monthly`` (default) or ``yearly``.

        Returns:
            tuple: ``{"payment_id", "session_id", "amount", "redirect_url"}``
            with HTTP 201, 422 on validation error, 502 when Przelewy24
            rejects the registration.
        """
        developer = get_current_developer()
        if developer is None:
            return {"message": MSG_DEVELOPER_NOT_FOUND}, 404

        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        try:
            data = PaymentCreateSchema().load(json_data)
        except ValidationError as err:
            logger.error(ERROR_VALIDATION_LOG, err.messages)
            return {"message": ERROR_VALIDATION, "errors": err.messages}, 422

        try:
            payment, redirect_url = create_payment(
                developer, data["plan"], data["billing_period"]
            )
        except PaymentError as e:
            logger.error("payment_registration_failed", error=str(e))
            return {"message": MSG_PAYMENT_FAILED, "error": str(e)}, 502
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        return {
            "payment_id": str(payment.id),
            "session_id": payment.przelewy24_session_id,
            "amount": payment.amount,
            "currency": payment.currency,
            "redirect_url": redirect_url,
        }, 201


class PaymentWebhookResource(Resource):
    """POST /payments/webhook: Przelewy24 status notification (form encoded)."""

    def post(self):
        """Verify the transaction and activate the subscription.

        Returns:
            tuple: ``{"status": "ok"}`` with HTTP 200 when verified, 400 for
            missing fields or a failed verification, 404 for an unknown
            session, 502 when Przelewy24 cannot be reached.
        """
        try:
            data = PaymentWebhookSchema().load(request.form.to_dict())
        except ValidationError as err:
            logger.warning("payment_webhook_invalid", errors=err.messages)
            return {"error": MSG_MISSING_WEBHOOK_PARAMS, "errors": err.messages}, 400

        logger.info(
            "payment_webhook_received",
            session_id=data["session_id"],
            order_id=data["order_id"],
            amount=data["amount"],
        )

        payment = Payment.get_by_session_id(data["session_id"])
        if payment is None:
            return {"error": MSG_PAYMENT_NOT_FOUND}, 404

        try:
            verified = process_webhook(payment, data["order_id"], data["amount"])
        except PaymentError as e:
            logger.error("payment_verification_unavailable", error=str(e))
            return {"error": MSG_PAYMENT_VERIFICATION_FAILED}, 502
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"error": ERROR_DATABASE}, 500

        if not verified:
            return {"error": MSG_PAYMENT_VERIFICATION_FAILED}, 400
        return {"status": "ok"}, 200
