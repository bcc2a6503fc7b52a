# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""CSV price list upload resources.

``POST /upload`` parses, imports and publishes a price list;
``POST /upload/preview`` only reports how the columns were recognised.
Both take a multipart form with the file in ``file``. Oversized uploads are
rejected by Flask (``MAX_CONTENT_LENGTH``) with 413.
"""

from flask import request
from flask_restful import Resource
from sqlalchemy.exc import SQLAlchemyError

from otoraport.models.db import db
from otoraport.models.project import Project
from otoraport.resources.constants import (
    ALLOWED_UPLOAD_EXTENSIONS,
    ERROR_DATABASE,
    ERROR_DATABASE_LOG,
    MSG_EMPTY_FILE,
    MSG_NO_FILE,
    MSG_NOT_COMPLIANT,
    MSG_PARSE_FAILED,
    MSG_PROJECT_NOT_FOUND,
    MSG_UNSUPPORTED_FILE,
    MSG_UPLOAD_SUCCESS,
    UPLOAD_PREVIEW_ROWS,
)
from otoraport.services.csv_parser import (
    CSVParseError,
    get_column_suggestions,
    parse,
    validate_ministry_compliance,
)
from otoraport.services.email_service import send_data_update_email
from otoraport.services.file_regeneration import regenerate_files
from otoraport.services.property_import import PlanLimitExceeded, import_properties
from otoraport.services.subscription import subscription_required
from otoraport.utils.jwt_utils import get_current_developer, require_jwt_auth
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.logger import logger


def _read_upload():
    """Return ``(content, None)`` or ``(None, (body, status))``."""
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return None, ({"message": MSG_NO_FILE}, 400)
    if not upload.filename.lower().endswith(ALLOWED_UPLOAD_EXTENSIONS):
        return None, ({"message": MSG_UNSUPPORTED_FILE}, 415)

    content = upload.read()
    if not content.strip():
        return None, ({"message": MSG_EMPTY_FILE}, 400)
    logger.info("csv_upload_received", filename=upload.filename, size=len(content))
    return content, None


class UploadResource(Resource):
    """POST /upload: import a CSV price list and regenerate the feed."""

    @require_jwt_auth
    @subscription_required()
    @limiter.limit(default_limit)
    def post(self):
        """Import a price list.

        Form Fields:
            file: The CSV file.
            project_id (optional): Project for rows without an investment
                name.

        Returns:
            tuple: Import summary, parse details, compliance report and
            regeneration result with HTTP 200. 400 for a missing, empty or
            unreadable file, 415 for a non-CSV file, 422 when the columns
            cannot be recognised or required ministry fields are missing,
            403 ``PLAN_LIMIT_REACHED`` when the import exceeds the plan.
        """
        developer = get_current_developer()
        content, error = _read_upload()
        if error:
            return error

        project = None
        project_id = request.form.get("project_id")
        if project_id:
            project = Project.get_by_id(project_id, developer.id)
            if project is None:
                return {"message": MSG_PROJECT_NOT_FOUND}, 404

        try:
            result = parse(content)
        except CSVParseError as e:
            logger.warning("csv_parse_error", error=str(e))
            return {"message": str(e)}, 400

        if not result.success:
            return {
                "message": MSG_PARSE_FAILED,
                "errors": result.errors,
                "suggestions": result.suggestions,
                "mappings": result.mappings,
            }, 422

        compliance = validate_ministry_compliance(result)
        if not compliance["valid"]:
            return {
                "message": MSG_NOT_COMPLIANT,
                "errors": compliance["errors"],
                "warnings": compliance["warnings"],
            }, 422

        try:
            summary = import_properties(developer, result, project)
            files = regenerate_files(developer)
        except PlanLimitExceeded as e:
            return e.check.to_response()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(ERROR_DATABASE_LOG, str(e))
            return {"message": ERROR_DATABASE, "error": str(e)}, 500

        send_data_update_email(developer, summary.total, summary.created, summary.updated)

        return {
            "message": MSG_UPLOAD_SUCCESS,
            "summary": summary.to_dict(),
            "parse": {
                "mappings": result.mappings,
                "confidence": round(result.confidence * 100),
                "total_rows": result.total_rows,
                "valid_rows": result.valid_rows,
                "developer_info": result.developer_info,
            },
            "compliance": compliance,
            "files": files,
            "xml_url": developer.xml_url,
            "md_url": developer.md_url,
        }, 200


class UploadPreviewResource(Resource):
    """POST /upload/preview: show the column mapping without saving."""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def post(self):
        content, error = _read_upload()
        if error:
            return error

        try:
            result = parse(content)
        except CSVParseError as e:
            return {"message": str(e)}, 400

        return {
            **result.to_dict(preview_rows=UPLOAD_PREVIEW_ROWS),
            "columns": get_column_suggestions(content),
            "compliance": validate_ministry_compliance(result),
        }, 200
