# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Batch synchronisation of every subscribed developer with n8n.

Developers are processed one at a time with ``BATCH_SYNC_DELAY`` seconds
between them. Each outcome is stored as an ``ActivityLog`` row with action
``batch_sync``; those rows also back the status summary.
"""

import time
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any

from flask import current_app

from otoraport.models.activity_log import ActivityLog
from otoraport.models.db import db
from otoraport.models.developer import Developer
from otoraport.models.types import utcnow
from otoraport.services.email_service import send_batch_sync_notification
from otoraport.services.n8n_client import N8NError, trigger_workflow
from otoraport.services.subscription import ACTIVE_STATUSES
from otoraport.utils.logger import logger

BATCH_SYNC_ACTION = "batch_sync"
DEFAULT_STATUS_DAYS = 7
MAX_STATUS_DAYS = 90
RECENT_SYNCS_LIMIT = 100


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _iso_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def developer_info(developer: Developer) -> dict[str, Any]:
    """Company identification block sent with every workflow call."""
    return {
        "companyName": developer.company_name,
        "legalForm": developer.legal_form,
        "krs": developer.krs,
        "ceidg": developer.ceidg,
        "nip": developer.nip,
        "regon": developer.regon,
        "email": developer.email,
        "phone": developer.phone,
        "website": developer.website,
        "street": developer.street,
        "houseNumber": developer.house_number,
        "apartmentNumber": developer.apartment_number,
        "postalCode": developer.postal_code,
        "city": developer.city,
        "municipality": developer.municipality,
        "county": developer.county,
        "voivodeship": developer.voivodeship,
    }


def harvester_row(developer: Developer, prop) -> dict[str, str]:
    """One property in the column layout of the ministry CSV template."""
    project = prop.project
    final_price = prop.final_price if prop.final_price is not None else prop.total_price
    return {
        "Nazwa dewelopera": _str(developer.company_name),
        "Forma prawna": _str(developer.legal_form),
        "Nr KRS": _str(developer.krs),
        "Nr CEiDG": _str(developer.ceidg),
        "NIP": _str(developer.nip),
        "REGON": _str(developer.regon),
        "Telefon": _str(developer.phone),
        "Email": _str(developer.email),
        "Strona WWW": _str(developer.website),
        "Ulica siedziby": _str(developer.street),
        "Nr nieruchomości siedziby": _str(developer.house_number),
        "Nr lokalu siedziby": _str(developer.apartment_number),
        "Kod pocztowy siedziby": _str(developer.postal_code),
        "Miejscowość siedziby": _str(developer.city),
        "Gmina siedziby": _str(developer.municipality),
        "Powiat siedziby": _str(developer.county),
        "Województwo siedziby": _str(developer.voivodeship),
        "Nazwa inwestycji": _str(project.name if project else None),
        "Ulica inwestycji": _str(project.address if project else None),
        "Kod pocztowy inwestycji": _str(project.postal_code if project else None),
        "Miejscowość inwestycji": _str(project.location if project else None),
        "Gmina inwestycji": _str(project.municipality if project else None),
        "Powiat inwestycji": _str(project.county if project else None),
        "Województwo inwestycji": _str(project.voivodeship if project else None),
        "Nr lokalu": _str(prop.property_number),
        "Rodzaj": _str(prop.property_type),
        "Powierzchnia użytkowa": _str(prop.area),
        "Cena za m²": _str(prop.price_per_m2),
        "Cena bazowa": _str(prop.total_price),
        "Cena finalna": _str(final_price),
        "Data obowiązywania od": _iso_date(prop.price_valid_from),
        "Data obowiązywania do": _iso_date(prop.price_valid_to),
        "Miejsca postojowe - oznaczenie": _str(prop.parking_space),
        "Miejsca postojowe - cena": _str(prop.parking_price),
        "Komórki lokatorskie - oznaczenie": _str(prop.storage_room),
        "Komórki lokatorskie - cena": _str(prop.storage_price),
        "Status": _str(prop.status),
    }


def eligible_developers() -> list[Developer]:
    """Developers with a usable subscription and at least one property."""
    developers = []
    for status in ACTIVE_STATUSES:
        for developer in Developer.get_all(subscription_status=status):
            if developer.properties:
                developers.append(developer)
    return developers


def _sync_developer(developer: Developer, batch_id: str) -> dict[str, Any]:
    rows = [harvester_row(developer, prop) for prop in developer.properties]
    result = {
        "client_id": developer.client_id,
        "company_name": developer.company_name,
        "success": False,
        "records_count": len(rows),
        "error": None,
    }

    try:
        response = trigger_workflow(
            developer.client_id, developer_info(developer), rows, batch_id=batch_id
        )
    except N8NError as e:
        result["error"] = str(e)
        ActivityLog.record(
            BATCH_SYNC_ACTION,
            developer_id=developer.id,
            status="error",
            message=str(e),
            records_count=len(rows),
            details={"batch_id": batch_id, "client_id": developer.client_id},
        )
        db.session.commit()
        logger.warning(
            "batch_sync_developer_failed",
            client_id=developer.client_id,
            error=str(e),
        )
    else:
        result["success"] = True
        result["xml_url"] = response.get("xmlUrl")
        result["md5_url"] = response.get("md5Url")
        ActivityLog.record(
            BATCH_SYNC_ACTION,
            developer_id=developer.id,
            status="success",
            records_count=len(rows),
            details={
                "batch_id": batch_id,
                "client_id": developer.client_id,
                "xml_url": result["xml_url"],
                "md5_url": result["md5_url"],
            },
        )
        db.session.commit()

    if current_app.config.get("SEND_BATCH_NOTIFICATIONS"):
        send_batch_sync_notification(
            developer,
            result["success"],
            {"records_count": len(rows), "error": result["error"], "batch_id": batch_id},
        )
    return result


def run_batch_sync() -> dict[str, Any]:
    """Push every eligible developer to n8n, continuing past failures.

    Returns:
        ``{batch_id, total_developers, successful, failed, total_records,
        results}``
    """
    batch_id = utcnow().isoformat() + "Z"
    developers = eligible_developers()
    delay = current_app.config.get("BATCH_SYNC_DELAY", 1.0)
    logger.info("batch_sync_started", batch_id=batch_id, developers=len(developers))

    results = []
    for position, developer in enumerate(developers):
        if position and delay:
            time.sleep(delay)
        results.append(_sync_developer(developer, batch_id))

    successful = sum(1 for r in results if r["success"])
    summary = {
        "batch_id": batch_id,
        "total_developers": len(developers),
        "successful": successful,
        "failed": len(results) - successful,
        "total_records": sum(r["records_count"] for r in results if r["success"]),
        "results": results,
    }
    logger.info(
        "batch_sync_completed",
        batch_id=batch_id,
        successful=summary["successful"],
        failed=summary["failed"],
        total_records=summary["total_records"],
    )
    return summary


def sync_status(days: int = DEFAULT_STATUS_DAYS) -> dict[str, Any]:
    """Summarise ``batch_sync`` entries of the last ``days`` days."""
    days = max(1, min(days, MAX_STATUS_DAYS))
    since = utcnow() - timedelta(days=days)
    entries = ActivityLog.get_recent(action=BATCH_SYNC_ACTION, since=since, limit=None)

    successful = sum(1 for entry in entries if entry.status == "success")
    per_day: dict[str, dict[str, int]] = defaultdict(lambda: {"successful": 0, "failed": 0})
    for entry in entries:
        bucket = per_day[entry.created_at.date().isoformat()]
        bucket["successful" if entry.status == "success" else "failed"] += 1

    return {
        "days": days,
        "summary": {
            "total_syncs": len(entries),
            "successful": successful,
            "failed": len(entries) - successful,
            "total_records": sum(
                entry.records_count or 0 for entry in entries if entry.status == "success"
            ),
            "success_rate": round(successful / len(entries) * 100, 1) if entries else 0.0,
            "last_sync": entries[0].created_at.isoformat() if entries else None,
        },
        "per_day": dict(sorted(per_day.items())),
        "recent_syncs": [entry.to_dict() for entry in entries[:RECENT_SYNCS_LIMIT]],
    }
