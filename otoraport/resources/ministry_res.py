# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Ministry registration resources.

The developer registers the public feeds through ``/ministry/notify``. The
ministry answers through ``/ministry/confirm``, authenticated with
``Authorization: Bearer <MINISTRY_API_KEY>``.
"""

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from otoraport.models.activity_log import ActivityLog
from otoraport.models.db import db
from otoraport.models.developer import Developer
from otoraport.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    MSG_DEVELOPER_NOT_FOUND,
    MSG_MINISTRY_APPROVED,
    MSG_MINISTRY_CONFIRM_INVALID,
    MSG_MINISTRY_EMAIL_FAILED,
    MSG_MINISTRY_NO_DATA,
    MSG_MINISTRY_NOTIFIED,
    MSG_MINISTRY_REJECTED,
)
from otoraport.schemas.ministry_schema import MinistryConfirmSchema
from otoraport.services.email_service import (
    send_ministry_decision_email,
    send_ministry_registration_email,
)
from otoraport.services.file_regeneration import public_file_url
from otoraport.services.subscription import subscription_required
from otoraport.utils.bearer import require_bearer_token
from otoraport.utils.jwt_utils import get_current_developer, require_jwt_auth
from otoraport.utils.limiter import limiter, strict_limit
from otoraport.utils.logger import logger


class MinistryNotifyResource(Resource):
    """POST /ministry/notify: send the feed URLs to the ministry."""

    @require_jwt_auth
    @subscription_required(feature="ministry_notification")
    @limiter.limit(strict_limit)
    def post(self):
        """Email the ministry the developer's public feed URLs.

        Returns:
            tuple: Confirmation with the URLs and HTTP 200, 400 when there is
            no data to publish yet, 502 when the email cannot be sent.
        """
        developer = get_current_developer()
        if not developer.properties:
            return {"message": MSG_MINISTRY_NO_DATA}, 400

        xml_url = developer.xml_url or public_file_url(developer.client_id, "xml")
        md_url = developer.md_url or public_file_url(developer.client_id, "md")

        if not send_ministry_registration_email(developer, xml_url, md_url):
            return {"message": MSG_MINISTRY_EMAIL_FAILED}, 502

        try:
            developer.ministry_email_sent = True
            ActivityLog.record(
                "ministry_notification",
                developer_id=developer.id,
                message="Wysłano zgłoszenie do ministerstwa",
                details={"xml_url": xml_url, "md_url": md_url},
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        logger.info("ministry_notified", developer_id=str(developer.id))
        return {"message": MSG_MINISTRY_NOTIFIED, "xml_url": xml_url, "md_url": md_url}, 200


class MinistryConfirmResource(Resource):
    """POST /ministry/confirm: the ministry's decision on a registration."""

    @require_bearer_token("MINISTRY_API_KEY")
    def post(self):
        """Record approval or rejection and inform the developer.

        Request Body:
            developer_id (str): Id of the registered developer.
            approved (bool): The ministry's decision.

        Returns:
            tuple: Confirmation with HTTP 200, 400 on an invalid body, 404
            for an unknown developer. An email failure is logged and does
            not fail the call.
        """
        try:
            data = MinistryConfirmSchema().load(request.get_json(silent=True) or {})
        except ValidationError as err:
            logger.warning("ministry_confirm_invalid", errors=err.messages)
            return {"error": MSG_MINISTRY_CONFIRM_INVALID, "errors": err.messages}, 400

        developer = Developer.get_by_id(data["developer_id"])
        if developer is None:
            return {"error": MSG_DEVELOPER_NOT_FOUND}, 404

        approved = data["approved"]
        message = MSG_MINISTRY_APPROVED if approved else MSG_MINISTRY_REJECTED
        try:
            developer.ministry_approved = approved
            ActivityLog.record(
                "ministry_confirmation",
                developer_id=developer.id,
                status="success" if approved else "info",
                message=message,
                details={"approved": approved},
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        if not send_ministry_decision_email(developer, approved):
            logger.warning("ministry_decision_email_failed", developer_id=str(developer.id))

        logger.info(
            "ministry_decision_recorded", developer_id=str(developer.id), approved=approved
        )
        return {
            "success": True,
            "message": message,
            "developer_id": str(developer.id),
            "approved": approved,
        }, 200
