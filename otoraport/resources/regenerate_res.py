# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""File regeneration resources."""

from flask_restful import Resource
from sqlalchemy.exc import SQLAlchemyError

from otoraport.models.db import db
from otoraport.resources.constants import (
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    MSG_REGENERATED,
)
from otoraport.services.file_regeneration import regenerate_all, regenerate_files
from otoraport.services.subscription import subscription_required
from otoraport.utils.bearer import require_bearer_token
from otoraport.utils.jwt_utils import get_current_developer, require_jwt_auth
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.logger import logger


class RegenerateResource(Resource):
    """POST /regenerate: republish the signed-in developer's files."""

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def post(self):
        """Regenerate XML and Markdown.

        Returns:
            tuple: Regeneration result with file URLs and HTTP 200, or 422
            when the developer has no properties to publish.
        """
        developer = get_current_developer()
        try:
            result = regenerate_files(developer)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        if not result["success"]:
            return {"message": result["error"], **result}, 422
        return {
            "message": MSG_REGENERATED,
            **result,
            "xml_url": developer.xml_url,
            "md_url": developer.md_url,
        }, 200


class BatchRegenerateResource(Resource):
    """POST /batch-regenerate: nightly job, authenticated with ``CRON_SECRET``."""

    @require_bearer_token("CRON_SECRET")
    def post(self):
        return regenerate_all(), 200
