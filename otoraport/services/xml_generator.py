# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Harvester XML generation.

Builds the price list document fetched by the government open-data
harvester (schema ``urn:otwarte-dane:harvester:1.13``). One ``<record>`` is
emitted per property. The tree is built with ElementTree, which escapes
``& < >`` in text and quotes in attribute values. Characters that XML 1.0
does not allow at all (most C0 controls, lone surrogates) are dropped before
serialization, so the output is always well-formed.
"""

import hashlib
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from otoraport.models.types import utcnow

HARVESTER_NAMESPACE = "urn:otwarte-dane:harvester:1.13"
SCHEMA_VERSION = "1.13"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
DATASET_DESCRIPTION = (
    "Codzienne raportowanie cen mieszkań zgodnie z ustawą z dnia 21 maja 2025 r. "
    "o jawności cen"
)
DATASET_SOURCE = "OTORAPORT - System automatycznego raportowania"
FILE_SIZE_UNITS = ("B", "KB", "MB", "GB")

# Complement of the XML 1.0 Char production
INVALID_XML_CHARS = re.compile(
    "[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


class XMLGenerationError(Exception):
    """Raised when there is nothing to publish."""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return INVALID_XML_CHARS.sub("", str(value))


def _amount(value: float | None) -> str:
    """Two-decimal rendering used for every number in the feed."""
    if value is None:
        return ""
    return f"{float(value):.2f}"


def _date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def _add(parent: ET.Element, tag: str, text: str = "") -> ET.Element:
    element = ET.SubElement(parent, tag)
    element.text = text
    return element


def _developer_element(parent: ET.Element, developer) -> None:
    node = ET.SubElement(parent, "developer")
    _add(node, "name", _text(developer.company_name))
    _add(node, "legal_form", _text(developer.legal_form))
    _add(node, "krs", _text(developer.krs))
    _add(node, "ceidg", _text(developer.ceidg))
    _add(node, "nip", _text(developer.nip))
    _add(node, "regon", _text(developer.regon))
    _add(node, "phone", _text(developer.phone))
    _add(node, "email", _text(developer.email))
    _add(node, "website", _text(developer.website))

    address = ET.SubElement(node, "address")
    _add(address, "street", _text(developer.street))
    _add(address, "house_number", _text(developer.house_number))
    _add(address, "apartment_number", _text(developer.apartment_number))
    _add(address, "postal_code", _text(developer.postal_code))
    _add(address, "city", _text(developer.city))
    _add(address, "municipality", _text(developer.municipality))
    _add(address, "county", _text(developer.county))
    _add(address, "voivodeship", _text(developer.voivodeship))


def _location_element(parent: ET.Element, project) -> None:
    node = ET.SubElement(parent, "investment_location")
    _add(node, "name", _text(project.name if project else None))
    _add(node, "street", _text(project.address if project else None))
    _add(node, "postal_code", _text(project.postal_code if project else None))
    _add(node, "city", _text(project.location if project else None))
    _add(node, "municipality", _text(project.municipality if project else None))
    _add(node, "county", _text(project.county if project else None))
    _add(node, "voivodeship", _text(project.voivodeship if project else None))


def _apartment_element(parent: ET.Element, prop) -> None:
    node = ET.SubElement(parent, "apartment")
    _add(node, "apartment_number", _text(prop.property_number))
    _add(node, "property_type", _text(prop.property_type))
    _add(node, "usable_area", _amount(prop.area))

    pricing = ET.SubElement(node, "pricing")
    _add(pricing, "price_per_m2", _amount(prop.price_per_m2))
    _add(pricing, "base_price", _amount(prop.total_price))
    final_price = prop.final_price if prop.final_price is not None else prop.total_price
    _add(pricing, "final_price", _amount(final_price))
    _add(pricing, "valid_from", _date(prop.price_valid_from))
    _add(pricing, "valid_to", _date(prop.price_valid_to))

    services = ET.SubElement(node, "additional_services")
    if prop.parking_space or prop.parking_price is not None:
        parking = ET.SubElement(services, "parking_spaces")
        _add(parking, "designation", _text(prop.parking_space))
        _add(parking, "price", _amount(prop.parking_price or 0))
    if prop.storage_room or prop.storage_price is not None:
        storage = ET.SubElement(services, "storage_rooms")
        _add(storage, "designation", _text(prop.storage_room))
        _add(storage, "price", _amount(prop.storage_price or 0))


def generate_xml(
    developer,
    projects: Iterable,
    properties: Iterable,
    generated_at: datetime | None = None,
) -> str:
    """Render the harvester XML document for a developer.

    Args:
        developer: Developer whose data is published.
        projects: The developer's projects (investment locations).
        properties: Properties to publish, one record each.
        generated_at: Timestamp written as ``modified``; defaults to now.

    Returns:
        The XML document as text, starting with the UTF-8 declaration.

    Raises:
        XMLGenerationError: If there are no properties.
    """
    properties = list(properties)
    if not properties:
        raise XMLGenerationError("Brak danych do generowania XML")

    generated_at = generated_at or utcnow()
    projects_by_id = {project.id: project for project in projects}

    root = ET.Element("dataset", {"xmlns": HARVESTER_NAMESPACE})
    header = ET.SubElement(root, "header")
    _add(
        header,
        "title",
        f"Dane o cenach lokali mieszkalnych - {_text(developer.company_name)}",
    )
    _add(header, "description", DATASET_DESCRIPTION)
    publisher = ET.SubElement(header, "publisher")
    _add(publisher, "name", _text(developer.company_name))
    _add(publisher, "email", _text(developer.email))
    _add(header, "created", _date(developer.created_at or generated_at))
    _add(header, "modified", _date(generated_at))
    _add(header, "source", DATASET_SOURCE)

    data = ET.SubElement(root, "data")
    for position, prop in enumerate(properties, start=1):
        record = ET.SubElement(data, "record", {"id": str(position)})
        _developer_element(record, developer)
        _location_element(record, projects_by_id.get(prop.project_id))
        _apartment_element(record, prop)
        _add(record, "status", _text(prop.status))

    ET.indent(root, space="  ")
    return XML_DECLARATION + ET.tostring(root, encoding="unicode")


def md5_hex(content: str) -> str:
    return hashlib.md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()


def format_file_size(size: int) -> str:
    """Human readable size in base 1024: ``1536`` -> ``"1.50 KB"``."""
    if size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(FILE_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    if unit == 0:
        return f"{size} B"
    return f"{value:.2f} {FILE_SIZE_UNITS[unit]}"


def create_xml_preview(developer, projects: Iterable, properties: Iterable) -> dict[str, Any]:
    """Generate the XML and describe it for a preview screen.

    Returns:
        ``{"xml", "md5", "record_count", "file_size"}``
    """
    properties = list(properties)
    xml = generate_xml(developer, projects, properties)
    return {
        "xml": xml,
        "md5": md5_hex(xml),
        "record_count": len(properties),
        "file_size": format_file_size(len(xml.encode("utf-8"))),
    }
