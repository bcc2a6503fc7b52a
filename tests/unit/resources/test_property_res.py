# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the property endpoints."""

import uuid

import pytest

from otoraport.models.generated_file import GeneratedFile
from otoraport.models.property import Property
from otoraport.resources.constants import MSG_INVALID_STATUS_FILTER
from otoraport.services.csv_parser import parse
from otoraport.services.property_import import import_properties


@pytest.fixture
def imported(developer, sample_csv):
    import_properties(developer, parse(sample_csv))
    return {p.property_number: p for p in developer.properties}


class TestPropertyListResource:
    """Test cases for GET /properties."""

    def test_list(self, authenticated_client, api_url, imported):
        response = authenticated_client.get(api_url("properties"))

        assert response.status_code == 200
        data = response.get_json()
        assert data["total"] == 3
        assert data["limit"] == 20
        assert data["offset"] == 0
        assert [item["property_number"] for item in data["items"]] == ["A1", "A2", "B1"]
        assert data["items"][0]["project_name"] == "Osiedle Zielone"

    def test_list_by_status(self, authenticated_client, api_url, imported):
        data = authenticated_client.get(
            api_url("properties"), query_string={"status": "sold"}
        ).get_json()

        assert data["total"] == 1
        assert data["items"][0]["property_number"] == "A2"

    def test_list_pagination(self, authenticated_client, api_url, imported):
        data = authenticated_client.get(
            api_url("properties"), query_string={"limit": 1, "offset": 1}
        ).get_json()

        assert data["total"] == 3
        assert [item["property_number"] for item in data["items"]] == ["A2"]

    def test_list_limit_is_capped(self, authenticated_client, api_url, imported):
        data = authenticated_client.get(
            api_url("properties"), query_string={"limit": 5000}
        ).get_json()
        assert data["limit"] == 100

    def test_invalid_status_filter(self, authenticated_client, api_url, developer):
        response = authenticated_client.get(
            api_url("properties"), query_string={"status": "dostępne"}
        )

        assert response.status_code == 400
        assert response.get_json()["message"] == MSG_INVALID_STATUS_FILTER

    def test_malformed_project_filter(self, authenticated_client, api_url, developer):
        response = authenticated_client.get(
            api_url("properties"), query_string={"project_id": "nope"}
        )
        assert response.status_code == 404

    def test_project_filter(self, authenticated_client, api_url, imported):
        project_id = imported["A1"].project_id

        data = authenticated_client.get(
            api_url("properties"), query_string={"project_id": str(project_id)}
        ).get_json()
        assert data["total"] == 3

        data = authenticated_client.get(
            api_url("properties"), query_string={"project_id": str(uuid.uuid4())}
        ).get_json()
        assert data["total"] == 0


class TestPropertyResource:
    """Test cases for /properties/<id>."""

    def test_get(self, authenticated_client, api_url, imported):
        prop = imported["A1"]

        response = authenticated_client.get(api_url(f"properties/{prop.id}"))

        assert response.status_code == 200
        assert response.get_json()["area"] == 50.0

    def test_get_not_found(self, authenticated_client, api_url, developer):
        response = authenticated_client.get(api_url(f"properties/{uuid.uuid4()}"))
        assert response.status_code == 404

    def test_patch_regenerates_files(self, authenticated_client, api_url, imported):
        prop = imported["A1"]

        response = authenticated_client.patch(
            api_url(f"properties/{prop.id}"),
            json={"status": "reserved", "total_price": 460000},
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "reserved"
        assert data["total_price"] == 460000.0
        xml_file = GeneratedFile.get_for_developer(prop.project.developer_id, "xml")
        assert "460000.00" in xml_file.content

    def test_patch_cannot_change_number(self, authenticated_client, api_url, imported):
        prop = imported["A1"]

        authenticated_client.patch(
            api_url(f"properties/{prop.id}"),
            json={"property_number": "Z9", "status": "sold"},
        )

        assert prop.property_number == "A1"
        assert prop.status == "sold"

    def test_patch_invalid(self, authenticated_client, api_url, imported):
        response = authenticated_client.patch(
            api_url(f"properties/{imported['A1'].id}"), json={"area": -5}
        )

        assert response.status_code == 422
        assert "area" in response.get_json()["errors"]

    def test_patch_no_data(self, authenticated_client, api_url, imported):
        response = authenticated_client.patch(
            api_url(f"properties/{imported['A1'].id}"), json={}
        )
        assert response.status_code == 400

    def test_delete(self, authenticated_client, api_url, developer, imported):
        response = authenticated_client.delete(api_url(f"properties/{imported['B1'].id}"))

        assert response.status_code == 200
        assert Property.count_by_developer(developer.id) == 2
        xml_file = GeneratedFile.get_for_developer(developer.id, "xml")
        assert xml_file.properties_count == 2

    def test_deleting_last_property_unpublishes_feed(
        self, authenticated_client, api_url, developer, imported
    ):
        for prop in list(imported.values()):
            response = authenticated_client.delete(api_url(f"properties/{prop.id}"))
            assert response.status_code == 200

        assert GeneratedFile.query.filter_by(developer_id=developer.id).count() == 0
        for file_name in ("data.xml", "data.md"):
            response = authenticated_client.get(
                api_url(f"public/{developer.client_id}/{file_name}")
            )
            assert response.status_code == 404
