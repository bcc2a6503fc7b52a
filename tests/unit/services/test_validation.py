# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for identifier and price list row validation."""

import re

import pytest

from otoraport.services.validation import (
    CLIENT_ID_MIN_LENGTH,
    generate_client_id,
    normalize_identifier,
    validate_nip,
    validate_property_row,
    validate_regon,
)


class TestIdentifiers:
    """Test suite for NIP and REGON checksums."""

    def test_normalize_identifier(self):
        assert normalize_identifier("526-025-02-74") == "5260250274"
        assert normalize_identifier(" 526 025 02 74 ") == "5260250274"
        assert normalize_identifier(None) == ""

    @pytest.mark.parametrize("nip", ["5260250274", "526-025-02-74", "1234563218"])
    def test_valid_nip(self, nip):
        assert validate_nip(nip) is True

    @pytest.mark.parametrize(
        "nip",
        [
            "5260250275",  # wrong control digit
            "1234567890",  # control value 10
            "123456789",  # too short
            "52602502741",  # too long
            "52602502ab",
            "",
            None,
        ],
    )
    def test_invalid_nip(self, nip):
        assert validate_nip(nip) is False

    @pytest.mark.parametrize("regon", ["123456785", "12345678512347"])
    def test_valid_regon(self, regon):
        assert validate_regon(regon) is True

    @pytest.mark.parametrize("regon", ["123456789", "12345678512348", "1234567", ""])
    def test_invalid_regon(self, regon):
        assert validate_regon(regon) is False


class TestGenerateClientId:
    """Test suite for public feed identifiers."""

    def test_slug_drops_legal_suffix(self):
        client_id = generate_client_id("Deweloper Nowak Sp. z o.o.")
        assert re.fullmatch(r"deweloper-nowak-[0-9a-f]{8}", client_id)

    def test_joint_stock_suffix(self):
        client_id = generate_client_id("Budimex S.A.")
        assert re.fullmatch(r"budimex-[0-9a-f]{8}", client_id)

    def test_ids_are_unique(self):
        assert generate_client_id("Nowak") != generate_client_id("Nowak")

    def test_minimum_length_for_short_names(self):
        assert len(generate_client_id("X")) >= CLIENT_ID_MIN_LENGTH

    def test_fallback_slug(self):
        assert generate_client_id("!!!").startswith("developer-")

    def test_slug_is_truncated(self):
        client_id = generate_client_id("Bardzo Długa Nazwa Firmy Deweloperskiej")
        slug = client_id.rsplit("-", 1)[0]
        assert len(slug) <= 20


class TestValidatePropertyRow:
    """Test suite for validate_property_row."""

    def test_valid_row(self):
        row = {
            "property_number": "A1",
            "property_type": "Lokal mieszkalny",
            "area": 50.0,
            "price_per_m2": 9000.0,
            "total_price": 450000.0,
        }
        assert validate_property_row(row, 1) == ([], [])

    def test_missing_number(self):
        errors, _ = validate_property_row({"area": 50.0}, 3)
        assert errors == ["Wiersz 3: brak numeru lokalu"]

    def test_non_positive_area(self):
        errors, _ = validate_property_row({"property_number": "A1", "area": 0.0}, 2)
        assert errors == ["Wiersz 2: powierzchnia musi być dodatnia"]

    def test_non_positive_price(self):
        errors, _ = validate_property_row(
            {"property_number": "A1", "total_price": -1.0}, 4
        )
        assert len(errors) == 1
        assert "total_price" in errors[0]

    def test_price_mismatch_is_a_warning(self):
        row = {
            "property_number": "A1",
            "area": 50.0,
            "price_per_m2": 9000.0,
            "total_price": 500000.0,
        }
        errors, warnings = validate_property_row(row, 1)

        assert errors == []
        assert len(warnings) == 1
        assert "450000.00" in warnings[0]

    def test_price_within_tolerance(self):
        row = {
            "property_number": "A1",
            "area": 50.0,
            "price_per_m2": 9000.0,
            "total_price": 452000.0,
        }
        assert validate_property_row(row, 1) == ([], [])

    def test_unusual_property_type_warns(self):
        _, warnings = validate_property_row(
            {"property_number": "A1", "property_type": "garaż"}, 5
        )
        assert warnings and warnings[0].startswith("Wiersz 5: nietypowy rodzaj lokalu")
