# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Company lookup by NIP.

Queries ``{GUS_API_URL}/search/nip/{nip}``. Two response shapes are
understood: the flat registry record (``Nazwa``, ``Ulica``, ``Miejscowosc``,
...) and the nested ``result.subject`` record of the Ministry of Finance
taxpayer list.
"""

from datetime import date
from typing import Any

import requests
from flask import current_app

from otoraport.utils.logger import logger


def format_address(record: dict[str, Any]) -> str | None:
    """``"Ulica Nr/Lokal, Kod Miasto"``; None without a city."""
    city = record.get("Miejscowosc")
    if not city:
        return None

    parts = []
    street = record.get("Ulica")
    number = record.get("NrNieruchomosci")
    if street and number:
        street = f"{street} {number}"
        if record.get("NrLokalu"):
            street += f"/{record['NrLokalu']}"
        parts.append(street)

    postal_code = record.get("KodPocztowy")
    parts.append(f"{postal_code} {city}" if postal_code else city)
    return ", ".join(parts)


def _from_registry_record(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": record.get("Nazwa"),
        "regon": record.get("Regon"),
        "address": format_address(record),
        "phone": record.get("Telefon"),
        "email": record.get("Email"),
        "website": record.get("WWW"),
        "voivodeship": record.get("Wojewodztwo"),
        "county": record.get("Powiat"),
        "municipality": record.get("Gmina"),
    }


def _from_taxpayer_subject(subject: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": subject.get("name"),
        "regon": subject.get("regon"),
        "address": subject.get("workingAddress") or subject.get("residenceAddress"),
        "phone": None,
        "email": None,
        "website": None,
        "voivodeship": None,
        "county": None,
        "municipality": None,
    }


def lookup_company(nip: str) -> dict[str, Any] | None:
    """Fetch company data for a (valid) NIP.

    Returns:
        ``{"name", "regon", "address", ...}`` or None when the company is not
        found or the registry cannot be reached.
    """
    config = current_app.config
    url = f"{config['GUS_API_URL']}/search/nip/{nip}"
    headers = {}
    if config.get("GUS_API_KEY"):
        headers["Authorization"] = config["GUS_API_KEY"]

    try:
        response = requests.get(
            url,
            params={"date": date.today().isoformat()},
            headers=headers,
            timeout=config.get("EXTERNAL_SERVICES_TIMEOUT", 5),
        )
    except requests.RequestException as e:
        logger.warning("gus_lookup_failed", nip=nip, error=str(e))
        return None

    if response.status_code != 200:
        logger.info("gus_company_not_found", nip=nip, status_code=response.status_code)
        return None

    try:
        body = response.json()
    except ValueError:
        logger.warning("gus_invalid_response", nip=nip)
        return None

    subject = (body.get("result") or {}).get("subject") if isinstance(body, dict) else None
    if subject:
        return _from_taxpayer_subject(subject)
    if isinstance(body, dict) and body.get("Nazwa"):
        return _from_registry_record(body)
    return None
