# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Markdown price report, the human readable companion of the harvester XML.

The layout lives in ``templates/reports/data.md.j2``; this module computes the
statistics and formats numbers the Polish way (``1 234 567,89``).
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from flask import render_template

from otoraport.models.types import utcnow

STATUS_LABELS = {
    "available": "Dostępne",
    "sold": "Sprzedane",
    "reserved": "Zarezerwowane",
}
UNKNOWN_STATUS_LABEL = "Nieznany"
UNKNOWN_PROJECT_NAME = "Nieznany projekt"

# (label, lower bound exclusive, upper bound inclusive)
AREA_BUCKETS = (
    ("do 30m²", None, 30),
    ("31-50m²", 30, 50),
    ("51-70m²", 50, 70),
    ("71-90m²", 70, 90),
    ("ponad 90m²", 90, None),
)
PRICE_BUCKETS = (
    ("do 8000 zł/m²", None, 8000),
    ("8001-10000 zł/m²", 8000, 10000),
    ("10001-12000 zł/m²", 10000, 12000),
    ("12001-15000 zł/m²", 12000, 15000),
    ("ponad 15000 zł/m²", 15000, None),
)


def format_pl_number(value: float | None, decimals: int = 2) -> str:
    """Polish number format: space thousands separator, decimal comma.

    Trailing zero decimals are dropped, so ``9500.0`` renders as ``9 500``.
    """
    if value is None:
        return "-"
    text = f"{value:,.{decimals}f}".replace(",", " ").replace(".", ",")
    if "," in text:
        text = text.rstrip("0").rstrip(",")
    return text


def status_label(status: str | None) -> str:
    return STATUS_LABELS.get(status or "", UNKNOWN_STATUS_LABEL)


def percentage(part: int, total: int) -> str:
    if not total:
        return "0.0"
    return f"{part / total * 100:.1f}"


def _bucket_counts(values: list[float], buckets) -> list[tuple[str, int]]:
    counts = []
    for label, lower, upper in buckets:
        count = sum(
            1
            for value in values
            if (lower is None or value > lower) and (upper is None or value <= upper)
        )
        counts.append((label, count))
    return counts


def _status_counts(properties: list) -> dict[str, int]:
    counts = {"available": 0, "sold": 0, "reserved": 0}
    for prop in properties:
        if prop.status in counts:
            counts[prop.status] += 1
    return counts


def _price_stats(properties: list) -> dict[str, float | None]:
    prices = [p.price_per_m2 for p in properties if p.price_per_m2 is not None]
    if not prices:
        return {"average": None, "min": None, "max": None}
    return {
        "average": sum(prices) / len(prices),
        "min": min(prices),
        "max": max(prices),
    }


def build_report_context(
    developer,
    projects: Iterable,
    properties: Iterable,
    generated_at: datetime | None = None,
    xml_url: str | None = None,
    md_url: str | None = None,
) -> dict[str, Any]:
    """Collect everything the Markdown template renders."""
    properties = list(properties)
    projects_by_id = {project.id: project for project in projects}
    generated_at = generated_at or utcnow()

    grouped: dict[str, dict[str, Any]] = {}
    for prop in properties:
        project = projects_by_id.get(prop.project_id)
        name = project.name if project else UNKNOWN_PROJECT_NAME
        group = grouped.setdefault(name, {"project": project, "properties": []})
        group["properties"].append(prop)

    sections = []
    for name, group in grouped.items():
        sections.append(
            {
                "name": name,
                "project": group["project"],
                "properties": group["properties"],
                "counts": _status_counts(group["properties"]),
                "prices": _price_stats(group["properties"]),
            }
        )

    counts = _status_counts(properties)
    total = len(properties)
    return {
        "developer": developer,
        "generated_date": generated_at.strftime("%d.%m.%Y"),
        "year": generated_at.year,
        "total": total,
        "counts": counts,
        "prices": _price_stats(properties),
        "sections": sections,
        "area_buckets": _bucket_counts(
            [p.area for p in properties if p.area is not None], AREA_BUCKETS
        ),
        "price_buckets": _bucket_counts(
            [p.price_per_m2 for p in properties if p.price_per_m2 is not None],
            PRICE_BUCKETS,
        ),
        "rates": {
            "available": percentage(counts["available"], total),
            "sold": percentage(counts["sold"], total),
            "reserved": percentage(counts["reserved"], total),
        },
        "xml_url": xml_url or developer.xml_url,
        "md_url": md_url or developer.md_url,
    }


def generate_markdown(
    developer,
    projects: Iterable,
    properties: Iterable,
    generated_at: datetime | None = None,
    xml_url: str | None = None,
    md_url: str | None = None,
) -> str:
    """Render the Markdown report for a developer (requires an app context)."""
    context = build_report_context(
        developer, projects, properties, generated_at, xml_url, md_url
    )
    return render_template(
        "reports/data.md.j2",
        pln=format_pl_number,
        status_label=status_label,
        **context,
    )
