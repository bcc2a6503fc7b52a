# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Import of a parsed CSV price list into projects and properties.

Rows are grouped into projects by their investment name; rows without one go
to the project chosen in the upload form, else to the developer's first
project, else to a new ``Projekt <company>``. Properties are upserted by
``(project, property_number)``.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from otoraport.models.activity_log import ActivityLog
from otoraport.models.db import db
from otoraport.models.developer import Developer
from otoraport.models.project import Project
from otoraport.models.property import Property
from otoraport.services.csv_parser import ParseResult
from otoraport.services.subscription import UsageCheck, check_usage_limit
from otoraport.services.validation import validate_property_row
from otoraport.utils.logger import logger

PROPERTY_FIELDS = (
    "property_type",
    "price_per_m2",
    "total_price",
    "final_price",
    "area",
    "parking_space",
    "parking_price",
    "status",
)


class PlanLimitExceeded(Exception):
    """The import would exceed the plan's project or property limit."""

    def __init__(self, check: UsageCheck):
        super().__init__(check.error)
        self.check = check


@dataclass
class ImportSummary:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    projects: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.created + self.updated

    def to_dict(self) -> dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "total": self.total,
            "projects": self.projects,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def _default_project_name(developer: Developer, project: Project | None) -> str:
    if project is not None:
        return project.name
    existing = Project.get_all(developer.id, limit=1)
    if existing:
        return existing[0].name
    return f"Projekt {developer.company_name}"


def _group_rows(
    developer: Developer, rows: list[dict[str, Any]], default_name: str
) -> tuple[dict[str, list[tuple[int, dict[str, Any]]]], ImportSummary]:
    summary = ImportSummary()
    groups: dict[str, list[tuple[int, dict[str, Any]]]] = defaultdict(list)
    for row_number, row in enumerate(rows, start=1):
        errors, warnings = validate_property_row(row, row_number)
        summary.warnings.extend(warnings)
        if errors:
            summary.errors.extend(errors)
            summary.skipped += 1
            continue
        name = (row.get("investment_name") or "").strip() or default_name
        groups[name].append((row_number, row))
    return groups, summary


def import_properties(
    developer: Developer,
    result: ParseResult,
    project: Project | None = None,
) -> ImportSummary:
    """Upsert the rows of a parse result and commit.

    Args:
        developer: Owner of the data.
        result: Successful parse result.
        project: Project for rows that carry no investment name.

    Raises:
        PlanLimitExceeded: Before any write, if the new projects or
            properties do not fit the plan.
        sqlalchemy.exc.SQLAlchemyError: On database failure (the caller
            rolls back).
    """
    groups, summary = _group_rows(
        developer, result.rows, _default_project_name(developer, project)
    )

    new_projects = [
        name for name in groups if Project.get_by_name(name, developer.id) is None
    ]
    if new_projects:
        check = check_usage_limit(developer, "projects", len(new_projects))
        if not check.allowed:
            raise PlanLimitExceeded(check)

    new_properties = 0
    for name, items in groups.items():
        existing_project = Project.get_by_name(name, developer.id)
        numbers = {str(row["property_number"]) for _, row in items}
        if existing_project is None:
            new_properties += len(numbers)
        else:
            new_properties += sum(
                1
                for number in numbers
                if Property.get_by_number(existing_project.id, number) is None
            )
    if new_properties:
        check = check_usage_limit(developer, "properties", new_properties)
        if not check.allowed:
            raise PlanLimitExceeded(check)

    for name, items in groups.items():
        first_row = items[0][1]
        target, _ = Project.get_or_create(
            name,
            developer.id,
            address=first_row.get("investment_address"),
            location=first_row.get("investment_city"),
        )
        summary.projects.append(target.name)

        for _, row in items:
            number = str(row["property_number"])
            prop = Property.get_by_number(target.id, number)
            if prop is None:
                prop = Property(project_id=target.id, property_number=number)
                db.session.add(prop)
                summary.created += 1
            else:
                summary.updated += 1
            for field_name in PROPERTY_FIELDS:
                if field_name in row:
                    setattr(prop, field_name, row[field_name])
            prop.raw_data = row.get("raw_data")
        db.session.flush()

    ActivityLog.record(
        "upload",
        developer_id=developer.id,
        status="success" if not summary.errors else "info",
        message=f"Zaimportowano {summary.total} nieruchomości",
        records_count=summary.total,
        details={
            "created": summary.created,
            "updated": summary.updated,
            "skipped": summary.skipped,
            "projects": summary.projects,
        },
    )
    db.session.commit()

    logger.info(
        "properties_imported",
        developer_id=str(developer.id),
        created=summary.created,
        updated=summary.updated,
        skipped=summary.skipped,
    )
    return summary
