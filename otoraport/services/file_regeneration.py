# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Regeneration of the published XML and Markdown files.

Each developer has at most one stored file per type. Regeneration renders
both documents from the current database state, overwrites the stored rows
and points ``Developer.xml_url`` / ``Developer.md_url`` at the public feed.
"""

from typing import Any

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from otoraport.models.activity_log import ActivityLog
from otoraport.models.db import db
from otoraport.models.developer import Developer
from otoraport.models.generated_file import GeneratedFile
from otoraport.services.md_generator import generate_markdown
from otoraport.services.xml_generator import XMLGenerationError, generate_xml, md5_hex
from otoraport.utils.logger import logger
from otoraport.utils.version import get_api_version

FILE_NAMES = {"xml": "data.xml", "md": "data.md"}
REGENERATED_STATUSES = ("trial", "active")


def public_file_url(client_id: str, file_type: str) -> str:
    """Absolute URL of a developer's public feed file."""
    base_url = current_app.config["BASE_URL"]
    return f"{base_url}/{get_api_version()}/public/{client_id}/{FILE_NAMES[file_type]}"


def regenerate_files(developer: Developer) -> dict[str, Any]:
    """Render and store both files for a developer, then commit.

    When the developer has no properties left, the stored files are deleted
    so the public feed answers 404.

    Returns:
        ``{"success", "xml_generated", "md_generated", "properties_count"}``
        plus ``"error"`` when generation was not possible.

    Raises:
        SQLAlchemyError: If the files cannot be stored.
    """
    projects = list(developer.projects)
    properties = developer.properties
    xml_url = public_file_url(developer.client_id, "xml")
    md_url = public_file_url(developer.client_id, "md")

    try:
        xml_content = generate_xml(developer, projects, properties)
    except XMLGenerationError as e:
        # Nothing left to publish
        removed = GeneratedFile.delete_for_developer(developer.id)
        db.session.commit()
        logger.info(
            "file_regeneration_skipped",
            developer_id=str(developer.id),
            reason=str(e),
            removed_files=removed,
        )
        return {
            "success": False,
            "xml_generated": False,
            "md_generated": False,
            "properties_count": 0,
            "error": str(e),
        }

    md_content = generate_markdown(
        developer, projects, properties, xml_url=xml_url, md_url=md_url
    )

    GeneratedFile.upsert(
        developer.id, "xml", xml_content, md5_hex(xml_content), len(properties)
    )
    GeneratedFile.upsert(
        developer.id, "md", md_content, md5_hex(md_content), len(properties)
    )
    developer.xml_url = xml_url
    developer.md_url = md_url
    db.session.commit()

    logger.info(
        "files_regenerated",
        developer_id=str(developer.id),
        properties_count=len(properties),
    )
    return {
        "success": True,
        "xml_generated": True,
        "md_generated": True,
        "properties_count": len(properties),
    }


def regenerate_all() -> dict[str, Any]:
    """Regenerate the files of every developer on a trial or active plan.

    A failure for one developer is logged and recorded, and the loop moves
    on to the next one.

    Returns:
        ``{"processed", "successful", "failed", "errors"}``
    """
    developers = [
        developer
        for status in REGENERATED_STATUSES
        for developer in Developer.get_all(subscription_status=status)
    ]
    summary: dict[str, Any] = {
        "processed": len(developers),
        "successful": 0,
        "failed": 0,
        "errors": [],
    }

    for developer in developers:
        name = developer.company_name or developer.email
        try:
            result = regenerate_files(developer)
        except SQLAlchemyError as e:
            db.session.rollback()
            result = {"success": False, "error": str(e)}

        if result["success"]:
            summary["successful"] += 1
            continue

        summary["failed"] += 1
        summary["errors"].append(f"{name}: {result['error']}")
        logger.warning(
            "file_regeneration_failed",
            developer_id=str(developer.id),
            error=result["error"],
        )

    ActivityLog.record(
        "batch_regenerate",
        status="success" if summary["failed"] == 0 else "error",
        records_count=summary["successful"],
        details={k: v for k, v in summary.items() if k != "errors"},
    )
    db.session.commit()

    logger.info(
        "batch_regeneration_completed",
        processed=summary["processed"],
        successful=summary["successful"],
        failed=summary["failed"],
    )
    return summary
