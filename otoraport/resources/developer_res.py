# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Developer profile REST API resources."""

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from otoraport.models.db import db
from otoraport.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    ERROR_INTEGRITY,
    ERROR_INTEGRITY_LOG,
    ERROR_VALIDATION,
    ERROR_VALIDATION_LOG,
    LOG_DEVELOPER_NOT_FOUND,
    LOG_UPDATING_PROFILE,
    MSG_DEVELOPER_NOT_FOUND,
    MSG_NO_INPUT_DATA,
    MSG_ONBOARDING_COMPLETED,
)
from otoraport.schemas.developer_schema import DeveloperSchema, DeveloperUpdateSchema
from otoraport.services.file_regeneration import regenerate_files
from otoraport.services.subscription import subscription_info
from otoraport.utils.jwt_utils import (
    get_current_developer,
    get_developer_id_from_jwt,
    is_admin,
    require_jwt_auth,
)
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.logger import logger


def _profile(developer):
    return {
        **DeveloperSchema().dump(developer),
        "is_admin": is_admin(developer),
        "subscription": subscription_info(developer),
    }


class DeveloperMeResource(Resource):
    """Profile of the signed-in developer."""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def get(self):
        """GET /developers/me.

        Returns:
            tuple: Profile with admin flag and subscription summary, HTTP 200,
            or 404 if the account no longer exists.
        """
        developer = get_current_developer()
        if developer is None:
            logger.warning(LOG_DEVELOPER_NOT_FOUND, get_developer_id_from_jwt())
            return {"message": MSG_DEVELOPER_NOT_FOUND}, 404
        return _profile(developer), 200

    @require_jwt_auth
    @limiter.limit(default_limit)
    def patch(self):
        """PATCH /developers/me: partial profile update.

        Company data is published in the feed, so the files are regenerated
        after a successful update.

        Returns:
            tuple: Updated profile and HTTP 200, 422 on validation error,
            409 on a conflicting NIP.
        """
        developer = get_current_developer()
        if developer is None:
            return {"message": MSG_DEVELOPER_NOT_FOUND}, 404

        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        logger.info(LOG_UPDATING_PROFILE, developer.id)
        schema = DeveloperUpdateSchema(developer=developer)
        try:
            validated_data = schema.load(json_data, partial=True)
        except ValidationError as err:
            logger.error(ERROR_VALIDATION_LOG, err.messages)
            return {"message": ERROR_VALIDATION, "errors": err.messages}, 422

        try:
            for key, value in validated_data.items():
                setattr(developer, key, value)
            db.session.commit()
            if developer.properties:
                regenerate_files(developer)
        except IntegrityError as e:
            db.session.rollback()
            logger.error(ERROR_INTEGRITY_LOG, str(e))
            return {"message": ERROR_INTEGRITY, "error": str(e)}, 409
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        return _profile(developer), 200


class OnboardingCompleteResource(Resource):
    """POST /onboarding/complete: mark onboarding done and publish the files."""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def post(self):
        developer = get_current_developer()
        if developer is None:
            return {"message": MSG_DEVELOPER_NOT_FOUND}, 404

        try:
            developer.onboarding_completed = True
            db.session.commit()
            files = regenerate_files(developer)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        logger.info("onboarding_completed", developer_id=str(developer.id))
        return {
            "message": MSG_ONBOARDING_COMPLETED,
            "files": files,
            "xml_url": developer.xml_url,
            "md_url": developer.md_url,
        }, 200
