# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the harvester XML generator.

The generator only reads attributes, so plain namespaces stand in for the
developer, project and property models.
"""

import xml.etree.ElementTree as ET
from datetime import date, datetime
from types import SimpleNamespace
from uuid import uuid4
from xml.dom import minidom

import pytest

from otoraport.services.xml_generator import (
    HARVESTER_NAMESPACE,
    SCHEMA_VERSION,
    XMLGenerationError,
    create_xml_preview,
    format_file_size,
    generate_xml,
    md5_hex,
)

NS = {"h": HARVESTER_NAMESPACE}

DEVELOPER_FIELDS = (
    "legal_form krs ceidg nip regon phone website street house_number "
    "apartment_number postal_code city municipality county voivodeship"
).split()


def make_developer(**overrides):
    values = dict.fromkeys(DEVELOPER_FIELDS)
    values.update(
        company_name="Zielone Tarasy Sp. z o.o.",
        email="biuro@zielonetarasy.pl",
        nip="5260250274",
        created_at=datetime(2025, 7, 1, 8, 0),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def make_project(**overrides):
    values = {
        "id": uuid4(),
        "name": "Osiedle Zielone",
        "address": "ul. Zielona 1",
        "postal_code": "00-001",
        "location": "Warszawa",
        "municipality": "Warszawa",
        "county": "Warszawa",
        "voivodeship": "mazowieckie",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def make_property(project, **overrides):
    values = {
        "project_id": project.id,
        "property_number": "A1",
        "property_type": "Lokal mieszkalny",
        "area": 50.0,
        "price_per_m2": 9000.0,
        "total_price": 450000.0,
        "final_price": None,
        "price_valid_from": None,
        "price_valid_to": None,
        "parking_space": None,
        "parking_price": None,
        "storage_room": None,
        "storage_price": None,
        "status": "available",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def parse_xml(xml):
    return ET.fromstring(xml)


class TestGenerateXml:
    """Test suite for generate_xml."""

    def test_document_structure(self):
        project = make_project()
        xml = generate_xml(
            make_developer(),
            [project],
            [make_property(project)],
            generated_at=datetime(2025, 10, 1, 12, 0),
        )

        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        root = parse_xml(xml)
        assert root.tag == f"{{{HARVESTER_NAMESPACE}}}dataset"
        assert SCHEMA_VERSION in HARVESTER_NAMESPACE
        assert root.findtext("h:header/h:modified", namespaces=NS) == "2025-10-01"
        assert root.findtext("h:header/h:created", namespaces=NS) == "2025-07-01"
        assert (
            root.findtext("h:header/h:publisher/h:name", namespaces=NS)
            == "Zielone Tarasy Sp. z o.o."
        )

    def test_one_record_per_property(self):
        project = make_project()
        properties = [
            make_property(project, property_number=f"A{i}") for i in range(1, 4)
        ]
        root = parse_xml(generate_xml(make_developer(), [project], properties))

        records = root.findall("h:data/h:record", namespaces=NS)
        assert [r.get("id") for r in records] == ["1", "2", "3"]
        assert [
            r.findtext("h:apartment/h:apartment_number", namespaces=NS) for r in records
        ] == ["A1", "A2", "A3"]

    def test_amounts_have_two_decimals(self):
        project = make_project()
        prop = make_property(project, area=65.5, price_per_m2=9500, total_price=622250)
        root = parse_xml(generate_xml(make_developer(), [project], [prop]))

        apartment = root.find("h:data/h:record/h:apartment", namespaces=NS)
        assert apartment.findtext("h:usable_area", namespaces=NS) == "65.50"
        assert apartment.findtext("h:pricing/h:price_per_m2", namespaces=NS) == "9500.00"
        assert apartment.findtext("h:pricing/h:base_price", namespaces=NS) == "622250.00"

    def test_final_price_falls_back_to_total_price(self):
        project = make_project()
        root = parse_xml(
            generate_xml(make_developer(), [project], [make_property(project)])
        )
        assert (
            root.findtext("h:data/h:record/h:apartment/h:pricing/h:final_price", namespaces=NS)
            == "450000.00"
        )

    def test_explicit_final_price(self):
        project = make_project()
        prop = make_property(project, final_price=440000.0)
        root = parse_xml(generate_xml(make_developer(), [project], [prop]))
        assert (
            root.findtext("h:data/h:record/h:apartment/h:pricing/h:final_price", namespaces=NS)
            == "440000.00"
        )

    def test_price_validity_dates(self):
        project = make_project()
        prop = make_property(
            project,
            price_valid_from=date(2025, 9, 1),
            price_valid_to=datetime(2025, 12, 31, 23, 59),
        )
        pricing = parse_xml(
            generate_xml(make_developer(), [project], [prop])
        ).find("h:data/h:record/h:apartment/h:pricing", namespaces=NS)

        assert pricing.findtext("h:valid_from", namespaces=NS) == "2025-09-01"
        assert pricing.findtext("h:valid_to", namespaces=NS) == "2025-12-31"

    def test_investment_location_from_project(self):
        project = make_project()
        record = parse_xml(
            generate_xml(make_developer(), [project], [make_property(project)])
        ).find("h:data/h:record", namespaces=NS)

        location = record.find("h:investment_location", namespaces=NS)
        assert location.findtext("h:name", namespaces=NS) == "Osiedle Zielone"
        assert location.findtext("h:street", namespaces=NS) == "ul. Zielona 1"
        assert location.findtext("h:city", namespaces=NS) == "Warszawa"
        assert record.findtext("h:developer/h:nip", namespaces=NS) == "5260250274"
        assert record.findtext("h:status", namespaces=NS) == "available"

    def test_parking_and_storage_services(self):
        project = make_project()
        prop = make_property(
            project, parking_space="P12", parking_price=35000.0, storage_price=8000.0
        )
        services = parse_xml(
            generate_xml(make_developer(), [project], [prop])
        ).find("h:data/h:record/h:apartment/h:additional_services", namespaces=NS)

        assert services.findtext("h:parking_spaces/h:designation", namespaces=NS) == "P12"
        assert services.findtext("h:parking_spaces/h:price", namespaces=NS) == "35000.00"
        assert services.findtext("h:storage_rooms/h:price", namespaces=NS) == "8000.00"

    def test_no_additional_services(self):
        project = make_project()
        services = parse_xml(
            generate_xml(make_developer(), [project], [make_property(project)])
        ).find("h:data/h:record/h:apartment/h:additional_services", namespaces=NS)
        assert len(services) == 0

    def test_special_characters_are_escaped(self):
        developer = make_developer(company_name='Dom & Ogród <"Nowak">')
        project = make_project(name="Osiedle <Słoneczne> & Park")
        xml = generate_xml(developer, [project], [make_property(project)])

        assert "&amp;" in xml
        assert "&lt;" in xml
        root = parse_xml(xml)
        assert (
            root.findtext("h:data/h:record/h:investment_location/h:name", namespaces=NS)
            == "Osiedle <Słoneczne> & Park"
        )

    def test_control_characters_are_dropped(self):
        developer = make_developer(company_name="Zielone\x01 Tarasy")
        project = make_project(name="Osiedle\x1f Zielone")
        prop = make_property(project, property_number="A\x0b1", status="dost\x08ępne")

        xml = generate_xml(developer, [project], [prop])

        minidom.parseString(xml.encode("utf-8"))
        root = parse_xml(xml)
        apartment = root.find("h:data/h:record/h:apartment", namespaces=NS)
        assert apartment.findtext("h:apartment_number", namespaces=NS) == "A1"
        assert (
            root.findtext("h:data/h:record/h:investment_location/h:name", namespaces=NS)
            == "Osiedle Zielone"
        )
        assert "Zielone Tarasy" in root.findtext("h:header/h:title", namespaces=NS)

    def test_tabs_and_newlines_are_kept(self):
        project = make_project(name="Osiedle\tZielone")
        root = parse_xml(generate_xml(make_developer(), [project], [make_property(project)]))
        assert (
            root.findtext("h:data/h:record/h:investment_location/h:name", namespaces=NS)
            == "Osiedle\tZielone"
        )

    def test_property_without_known_project(self):
        prop = make_property(make_project())
        root = parse_xml(generate_xml(make_developer(), [], [prop]))
        assert (
            root.findtext("h:data/h:record/h:investment_location/h:name", namespaces=NS)
            == ""
        )

    def test_no_properties_raises(self):
        with pytest.raises(XMLGenerationError):
            generate_xml(make_developer(), [make_project()], [])


class TestXmlHelpers:
    """Test suite for hashing, sizes and the preview helper."""

    def test_md5_hex(self):
        assert md5_hex("") == "d41d8cd98f00b204e9800998ecf8427e"

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (1536, "1.50 KB"),
            (1048576, "1.00 MB"),
            (5 * 1024**3, "5.00 GB"),
        ],
    )
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected

    def test_create_xml_preview(self):
        project = make_project()
        properties = [make_property(project), make_property(project, property_number="A2")]

        preview = create_xml_preview(make_developer(), [project], properties)

        assert preview["record_count"] == 2
        assert preview["md5"] == md5_hex(preview["xml"])
        assert preview["file_size"].endswith(("B", "KB"))
        assert "<record" in preview["xml"]
