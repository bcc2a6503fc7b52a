# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the company registry lookup."""

from unittest.mock import MagicMock, patch

import requests

from otoraport.services.gus_client import format_address, lookup_company

GET = "otoraport.services.gus_client.requests.get"


def _response(status_code=200, body=None):
    response = MagicMock(status_code=status_code)
    response.json.return_value = body
    return response


class TestFormatAddress:
    """Test suite for format_address."""

    def test_full_address(self):
        record = {
            "Ulica": "ul. Prosta",
            "NrNieruchomosci": "20",
            "NrLokalu": "5",
            "KodPocztowy": "00-850",
            "Miejscowosc": "Warszawa",
        }
        assert format_address(record) == "ul. Prosta 20/5, 00-850 Warszawa"

    def test_without_street(self):
        assert format_address({"Miejscowosc": "Kraków", "KodPocztowy": "30-001"}) == (
            "30-001 Kraków"
        )

    def test_without_city(self):
        assert format_address({"Ulica": "ul. Prosta", "NrNieruchomosci": "20"}) is None


class TestLookupCompany:
    """Test suite for lookup_company."""

    @patch(GET)
    def test_taxpayer_subject(self, mock_get, app):
        mock_get.return_value = _response(
            200,
            {
                "result": {
                    "subject": {
                        "name": "ZIELONE TARASY SPÓŁKA Z OGRANICZONĄ ODPOWIEDZIALNOŚCIĄ",
                        "regon": "123456785",
                        "workingAddress": "PROSTA 20, 00-850 WARSZAWA",
                    }
                }
            },
        )

        company = lookup_company("5260250274")

        assert company["name"].startswith("ZIELONE TARASY")
        assert company["regon"] == "123456785"
        assert company["address"] == "PROSTA 20, 00-850 WARSZAWA"
        url = mock_get.call_args.args[0]
        assert url == "https://wl-api.mf.gov.pl/api/search/nip/5260250274"
        assert "date" in mock_get.call_args.kwargs["params"]

    @patch(GET)
    def test_registry_record(self, mock_get, app):
        mock_get.return_value = _response(
            200,
            {
                "Nazwa": "Zielone Tarasy Sp. z o.o.",
                "Regon": "123456785",
                "Ulica": "ul. Prosta",
                "NrNieruchomosci": "20",
                "KodPocztowy": "00-850",
                "Miejscowosc": "Warszawa",
                "Wojewodztwo": "MAZOWIECKIE",
            },
        )

        company = lookup_company("5260250274")

        assert company["name"] == "Zielone Tarasy Sp. z o.o."
        assert company["address"] == "ul. Prosta 20, 00-850 Warszawa"
        assert company["voivodeship"] == "MAZOWIECKIE"

    @patch(GET)
    def test_api_key_header(self, mock_get, app):
        app.config["GUS_API_KEY"] = "gus-key"
        mock_get.return_value = _response(404, {})

        lookup_company("5260250274")

        assert mock_get.call_args.kwargs["headers"] == {"Authorization": "gus-key"}

    @patch(GET)
    def test_not_found(self, mock_get, app):
        mock_get.return_value = _response(404, {"code": "WL-113"})
        assert lookup_company("5260250274") is None

    @patch(GET)
    def test_empty_subject(self, mock_get, app):
        mock_get.return_value = _response(200, {"result": {"subject": None}})
        assert lookup_company("5260250274") is None

    @patch(GET)
    def test_invalid_json(self, mock_get, app):
        response = _response(200)
        response.json.side_effect = ValueError("html")
        mock_get.return_value = response

        assert lookup_company("5260250274") is None

    @patch(GET)
    def test_network_error(self, mock_get, app):
        mock_get.side_effect = requests.Timeout("slow")
        assert lookup_company("5260250274") is None
