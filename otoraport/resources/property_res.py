# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Property REST API resources."""

import uuid

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from otoraport.models.constants import PROPERTY_STATUSES
from otoraport.models.db import db
from otoraport.models.property import Property
from otoraport.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    ERROR_VALIDATION,
    ERROR_VALIDATION_LOG,
    LOG_PROPERTY_DELETED,
    LOG_PROPERTY_NOT_FOUND,
    LOG_PROPERTY_UPDATED,
    MSG_INVALID_STATUS_FILTER,
    MSG_NO_INPUT_DATA,
    MSG_PROJECT_NOT_FOUND,
    MSG_PROPERTY_DELETED,
    MSG_PROPERTY_NOT_FOUND,
)
from otoraport.resources.pagination import parse_pagination
from otoraport.schemas.property_schema import PropertySchema, PropertyUpdateSchema
from otoraport.services.file_regeneration import regenerate_files
from otoraport.services.subscription import subscription_required
from otoraport.utils.jwt_utils import (
    get_current_developer,
    get_developer_id_from_jwt,
    require_jwt_auth,
)
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.logger import logger


class PropertyListResource(Resource):
    """Properties across all of the developer's projects."""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def get(self):
        """List properties.

        Query Parameters:
            project_id (uuid, optional): Only this project.
            status (str, optional): ``available``, ``sold`` or ``reserved``.
            limit (int, optional): Page size, capped at MAX_PAGE_LIMIT.
            offset (int, optional): Records to skip. Default: 0

        Returns:
            tuple: ``{"items", "total", "limit", "offset"}`` and HTTP 200.
        """
        limit, offset, error = parse_pagination()
        if error:
            return error

        project_id = request.args.get("project_id")
        if project_id:
            try:
                project_id = uuid.UUID(project_id)
            except ValueError:
                return {"message": MSG_PROJECT_NOT_FOUND}, 404

        status = request.args.get("status")
        if status and status not in PROPERTY_STATUSES:
            return {"message": MSG_INVALID_STATUS_FILTER}, 400

        developer_id = get_developer_id_from_jwt()
        properties = Property.get_all(
            developer_id,
            project_id=project_id or None,
            status=status or None,
            limit=limit,
            offset=offset,
        )
        return {
            "items": PropertySchema(many=True).dump(properties),
            "total": Property.count(
                developer_id, project_id=project_id or None, status=status or None
            ),
            "limit": limit,
            "offset": offset,
        }, 200


class PropertyResource(Resource):
    """Single property. Edits republish the developer's files."""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def get(self, property_id):
        prop = Property.get_by_id(property_id, get_developer_id_from_jwt())
        if not prop:
            logger.warning(LOG_PROPERTY_NOT_FOUND, property_id)
            return {"message": MSG_PROPERTY_NOT_FOUND}, 404
        return PropertySchema().dump(prop), 200

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def patch(self, property_id):
        """Partially update a property (price, area, status...)."""
        developer = get_current_developer()
        prop = Property.get_by_id(property_id, developer.id)
        if not prop:
            logger.warning(LOG_PROPERTY_NOT_FOUND, property_id)
            return {"message": MSG_PROPERTY_NOT_FOUND}, 404

        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        try:
            validated_data = PropertyUpdateSchema().load(json_data, partial=True)
        except ValidationError as err:
            logger.error(ERROR_VALIDATION_LOG, err.messages)
            return {"message": ERROR_VALIDATION, "errors": err.messages}, 422

        try:
            for key, value in validated_data.items():
                setattr(prop, key, value)
            db.session.commit()
            regenerate_files(developer)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        logger.info(LOG_PROPERTY_UPDATED, prop.id)
        return PropertySchema().dump(prop), 200

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def delete(self, property_id):
        developer = get_current_developer()
        prop = Property.get_by_id(property_id, developer.id)
        if not prop:
            logger.warning(LOG_PROPERTY_NOT_FOUND, property_id)
            return {"message": MSG_PROPERTY_NOT_FOUND}, 404

        try:
            db.session.delete(prop)
            db.session.commit()
            regenerate_files(developer)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        logger.info(LOG_PROPERTY_DELETED, property_id)
        return {"message": MSG_PROPERTY_DELETED}, 200
