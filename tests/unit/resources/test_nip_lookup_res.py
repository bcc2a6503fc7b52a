# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the NIP lookup endpoint."""

from unittest.mock import patch

from otoraport.resources.constants import MSG_NO_INPUT_DATA

LOOKUP = "otoraport.resources.nip_lookup_res.lookup_company"


class TestNipLookupResource:
    """Test cases for POST /nip-lookup."""

    @patch(LOOKUP)
    def test_valid_nip(self, mock_lookup, client, api_url):
        mock_lookup.return_value = {"name": "Zielone Tarasy Sp. z o.o.", "city": "Warszawa"}

        response = client.post(api_url("nip-lookup"), json={"nip": "526-025-02-74"})

        assert response.status_code == 200
        assert response.get_json() == {
            "valid": True,
            "nip": "5260250274",
            "company": {"name": "Zielone Tarasy Sp. z o.o.", "city": "Warszawa"},
        }
        mock_lookup.assert_called_once_with("5260250274")

    @patch(LOOKUP, return_value=None)
    def test_registry_without_answer(self, mock_lookup, client, api_url):
        response = client.post(api_url("nip-lookup"), json={"nip": "5260250274"})

        assert response.status_code == 200
        assert response.get_json()["company"] is None

    @patch(LOOKUP)
    def test_invalid_checksum(self, mock_lookup, client, api_url):
        response = client.post(api_url("nip-lookup"), json={"nip": "5260250275"})

        assert response.status_code == 400
        data = response.get_json()
        assert data["valid"] is False
        assert "nip" in data["errors"]
        mock_lookup.assert_not_called()

    def test_no_input(self, client, api_url):
        response = client.post(api_url("nip-lookup"), json={})

        assert response.status_code == 400
        assert response.get_json()["message"] == MSG_NO_INPUT_DATA
