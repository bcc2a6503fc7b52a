# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Dashboard and admin statistics."""

from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError

from otoraport.models.activity_log import ActivityLog
from otoraport.models.constants import SUBSCRIPTION_STATUSES
from otoraport.models.db import db
from otoraport.models.developer import Developer
from otoraport.models.generated_file import GeneratedFile
from otoraport.models.payment import Payment
from otoraport.models.project import Project
from otoraport.models.property import Property
from otoraport.models.types import utcnow
from otoraport.services.subscription import subscription_info
from otoraport.utils.logger import logger

RECENT_DAYS = 7
COMPLIANCE_WINDOW = timedelta(hours=24)
ADMIN_RECENT_ERRORS = 20
ANALYTICS_TIMEFRAMES = {"30d": timedelta(days=30), "90d": timedelta(days=90), "12m": timedelta(days=365)}
ANALYTICS_REPORTS = ("overview", "breakdown", "projects")


def _mean(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def compliance_status(
    xml_file: GeneratedFile | None,
    md_file: GeneratedFile | None,
    now: datetime | None = None,
) -> str:
    """``compliant``, ``outdated`` or ``missing``.

    Compliant means both files exist and the XML was generated within the
    last 24 hours.
    """
    if xml_file is None or md_file is None:
        return "missing"
    now = now or utcnow()
    if now - xml_file.last_generated <= COMPLIANCE_WINDOW:
        return "compliant"
    return "outdated"


def dashboard_stats(developer: Developer) -> dict[str, Any]:
    """Statistics shown on the developer dashboard."""
    now = utcnow()
    properties = developer.properties
    by_status = {"available": 0, "sold": 0, "reserved": 0}
    for prop in properties:
        if prop.status in by_status:
            by_status[prop.status] += 1

    avg_price = _mean([p.price_per_m2 for p in properties if p.price_per_m2])
    avg_area = _mean([p.area for p in properties if p.area])
    available_value = sum(
        p.total_price or 0 for p in properties if p.status == "available"
    )

    xml_file = GeneratedFile.get_for_developer(developer.id, "xml")
    md_file = GeneratedFile.get_for_developer(developer.id, "md")

    return {
        "developer": {
            "name": developer.name,
            "company_name": developer.company_name,
            "email": developer.email,
            "nip": developer.nip,
            "client_id": developer.client_id,
        },
        "projects": {"total": Project.count_by_developer(developer.id)},
        "properties": {
            "total": len(properties),
            **by_status,
            "recent": Property.count_created_since(
                developer.id, now - timedelta(days=RECENT_DAYS)
            ),
            "avg_price_per_m2": round(avg_price, 2) if avg_price is not None else None,
            "avg_area": round(avg_area, 1) if avg_area is not None else None,
            "total_available_value": round(available_value, 2),
        },
        "files": {
            "xml": xml_file.to_dict() if xml_file else None,
            "md": md_file.to_dict() if md_file else None,
            "xml_url": developer.xml_url,
            "md_url": developer.md_url,
        },
        "compliance": {
            "status": compliance_status(xml_file, md_file, now),
            "last_generated": (
                xml_file.last_generated.isoformat() if xml_file else None
            ),
            "ministry_email_sent": developer.ministry_email_sent,
        },
        "subscription": subscription_info(developer, now),
    }


def _price_summary(properties: list) -> dict[str, Any]:
    prices = [p.price_per_m2 for p in properties if p.price_per_m2]
    avg_price = _mean(prices)
    return {
        "count": len(properties),
        "avg_price_per_m2": round(avg_price, 2) if avg_price is not None else None,
        "min_price_per_m2": min(prices, default=None),
        "max_price_per_m2": max(prices, default=None),
    }


def _sold_rate(properties: list) -> float:
    if not properties:
        return 0.0
    sold = sum(1 for p in properties if p.status == "sold")
    return round(100 * sold / len(properties), 1)


def analytics_report(
    developer: Developer, report_type: str, timeframe: str = "30d", now: datetime | None = None
) -> dict[str, Any]:
    """Price analytics of the developer's offer.

    Args:
        developer: The developer to report on.
        report_type: ``overview`` (price statistics of the properties added
            within ``timeframe`` next to the whole offer), ``breakdown`` (per
            property type) or ``projects`` (per project).
        timeframe: ``30d``, ``90d`` or ``12m``.

    Raises:
        KeyError: For an unknown report type or timeframe.
    """
    if report_type not in ANALYTICS_REPORTS:
        raise KeyError(report_type)
    since = (now or utcnow()) - ANALYTICS_TIMEFRAMES[timeframe]
    properties = developer.properties

    if report_type == "overview":
        recent = [p for p in properties if p.created_at and p.created_at >= since]
        return {
            "timeframe": timeframe,
            "all": _price_summary(properties),
            "recent": _price_summary(recent),
            "total_value": round(sum(p.total_price or 0 for p in properties), 2),
            "sold_rate": _sold_rate(properties),
        }

    if report_type == "breakdown":
        by_type: dict[str, list] = {}
        for prop in properties:
            by_type.setdefault(prop.property_type, []).append(prop)
        types = []
        for property_type, group in sorted(by_type.items()):
            avg_area = _mean([p.area for p in group if p.area])
            types.append(
                {
                    "property_type": property_type,
                    **_price_summary(group),
                    "share": round(100 * len(group) / len(properties), 1),
                    "avg_area": round(avg_area, 1) if avg_area is not None else None,
                }
            )
        return {"timeframe": timeframe, "types": types}

    projects = []
    for project in sorted(developer.projects, key=lambda p: p.name):
        group = list(project.properties)
        projects.append(
            {
                "project_id": str(project.id),
                "name": project.name,
                **_price_summary(group),
                "sold": sum(1 for p in group if p.status == "sold"),
                "sold_rate": _sold_rate(group),
            }
        )
    return {"timeframe": timeframe, "projects": projects}

def check_database() -> dict[str, Any]:
    """Round-trip ``SELECT 1`` and report latency."""
    try:
        start_time = datetime.now(timezone.utc)
        result = db.session.execute(text("SELECT 1"))
        latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
        return {"healthy": result.scalar() == 1, "latency_ms": round(latency_ms, 2)}
    except SQLAlchemyError as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"healthy": False, "error": str(e)}


def admin_stats() -> dict[str, Any]:
    """Platform-wide statistics for administrators."""
    now = utcnow()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    status_counts = dict(
        db.session.query(Developer.subscription_status, func.count(Developer.id))
        .group_by(Developer.subscription_status)
        .all()
    )
    developers = {status: status_counts.get(status, 0) for status in SUBSCRIPTION_STATUSES}
    developers["total"] = sum(status_counts.values())

    database = check_database()
    recent_errors = ActivityLog.get_recent(
        status="error",
        since=now - timedelta(days=RECENT_DAYS),
        limit=ADMIN_RECENT_ERRORS,
    )

    return {
        "developers": developers,
        "projects": {"total": Project.query.count()},
        "properties": {"total": Property.query.count()},
        "revenue": {
            "currency": "PLN",
            "total": Payment.total_revenue(),
            "monthly": Payment.total_revenue(since=month_start),
        },
        "recent_errors": [entry.to_dict() for entry in recent_errors],
        "health": {
            "status": "healthy" if database["healthy"] else "degraded",
            "checks": {"database": database},
        },
        "generated_at": now.isoformat(),
    }
