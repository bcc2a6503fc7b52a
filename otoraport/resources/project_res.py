# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Project REST API resources.

CRUD over the signed-in developer's projects. Every query is scoped by the
``developer_id`` of the JWT; a project of another developer is reported as
not found.
"""

from flask import request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from otoraport.models.db import db
from otoraport.models.project import Project
from otoraport.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    ERROR_INTEGRITY,
    ERROR_INTEGRITY_LOG,
    ERROR_VALIDATION,
    ERROR_VALIDATION_LOG,
    LOG_PROJECT_CREATED,
    LOG_PROJECT_DELETED,
    LOG_PROJECT_NOT_FOUND,
    LOG_PROJECT_UPDATED,
    MSG_NO_INPUT_DATA,
    MSG_PROJECT_DELETED,
    MSG_PROJECT_NOT_FOUND,
)
from otoraport.resources.pagination import parse_pagination
from otoraport.schemas.project_schema import (
    ProjectCreateSchema,
    ProjectReplaceSchema,
    ProjectSchema,
    ProjectUpdateSchema,
)
from otoraport.services.file_regeneration import regenerate_files
from otoraport.services.subscription import check_usage_limit, subscription_required
from otoraport.utils.jwt_utils import (
    get_current_developer,
    get_developer_id_from_jwt,
    require_jwt_auth,
)
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.logger import logger


class ProjectListResource(Resource):
    """Collection of the developer's projects."""

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def get(self):
        """List projects.

        Query Parameters:
            status (str, optional): ``active``, ``inactive`` or ``completed``.
            limit (int, optional): Page size, capped at MAX_PAGE_LIMIT.
            offset (int, optional): Records to skip. Default: 0

        Returns:
            tuple: List of projects and HTTP 200.
        """
        limit, offset, error = parse_pagination()
        if error:
            return error

        projects = Project.get_all(
            get_developer_id_from_jwt(),
            limit=limit,
            offset=offset,
            status=request.args.get("status"),
        )
        return ProjectSchema(many=True).dump(projects), 200

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def post(self):
        """Create a project.

        Returns:
            tuple: Created project and HTTP 201, 403 ``PLAN_LIMIT_REACHED``
            when the plan allows no more projects, 422 on validation error.
        """
        developer = get_current_developer()
        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        schema = ProjectCreateSchema(developer_id=developer.id)
        try:
            validated_data = schema.load(json_data)
        except ValidationError as err:
            logger.error(ERROR_VALIDATION_LOG, err.messages)
            return {"message": ERROR_VALIDATION, "errors": err.messages}, 422

        check = check_usage_limit(developer, "projects")
        if not check.allowed:
            return check.to_response()

        try:
            project = Project(developer_id=developer.id, **validated_data)
            db.session.add(project)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            logger.error(ERROR_INTEGRITY_LOG, str(e))
            return {"message": ERROR_INTEGRITY, "error": str(e)}, 409
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        logger.info(LOG_PROJECT_CREATED, project.id)
        return ProjectSchema().dump(project), 201


class ProjectResource(Resource):
    """Single project of the developer."""

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def get(self, project_id):
        project = Project.get_by_id(project_id, get_developer_id_from_jwt())
        if not project:
            logger.warning(LOG_PROJECT_NOT_FOUND, project_id)
            return {"message": MSG_PROJECT_NOT_FOUND}, 404
        return ProjectSchema().dump(project), 200

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def put(self, project_id):
        """Replace a project; ``name`` and ``status`` are required."""
        return self._update(project_id, ProjectReplaceSchema, partial=False)

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def patch(self, project_id):
        """Partially update a project."""
        return self._update(project_id, ProjectUpdateSchema, partial=True)

    def _update(self, project_id, schema_class, partial):
        developer = get_current_developer()
        project = Project.get_by_id(project_id, developer.id)
        if not project:
            logger.warning(LOG_PROJECT_NOT_FOUND, project_id)
            return {"message": MSG_PROJECT_NOT_FOUND}, 404

        json_data = request.get_json(silent=True)
        if not json_data:
            return {"message": MSG_NO_INPUT_DATA}, 400

        schema = schema_class(developer_id=developer.id, project=project)
        try:
            validated_data = schema.load(json_data, partial=partial)
        except ValidationError as err:
            logger.error(ERROR_VALIDATION_LOG, err.messages)
            return {"message": ERROR_VALIDATION, "errors": err.messages}, 422

        try:
            for key, value in validated_data.items():
                setattr(project, key, value)
            db.session.commit()
            # Project name and address appear in the published feed
            if project.properties:
                regenerate_files(developer)
        except IntegrityError as e:
            db.session.rollback()
            logger.error(ERROR_INTEGRITY_LOG, str(e))
            return {"message": ERROR_INTEGRITY, "error": str(e)}, 409
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        logger.info(LOG_PROJECT_UPDATED, project.id)
        return ProjectSchema().dump(project), 200

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def delete(self, project_id):
        """Delete a project together with its properties."""
        developer = get_current_developer()
        project = Project.get_by_id(project_id, developer.id)
        if not project:
            logger.warning(LOG_PROJECT_NOT_FOUND, project_id)
            return {"message": MSG_PROJECT_NOT_FOUND}, 404

        had_properties = bool(project.properties)
        try:
            db.session.delete(project)
            db.session.commit()
            if had_properties:
                regenerate_files(developer)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        logger.info(LOG_PROJECT_DELETED, project_id)
        return {"message": MSG_PROJECT_DELETED}, 200
