# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the smart CSV parser.

Covers header normalization and fuzzy matching, Polish number coercion,
column mapping of real-world price list headers and the ministry compliance
check run on a parse result.
"""

import pytest

from otoraport.services.csv_parser import (
    COLUMN_PATTERNS,
    CSVParseError,
    decode_content,
    fuzzy_match,
    get_column_suggestions,
    levenshtein,
    normalize_header,
    normalize_status,
    parse,
    parse_number,
    validate_ministry_compliance,
)


class TestStringMatching:
    """Test suite for header normalization and similarity scores."""

    def test_normalize_header_strips_punctuation_and_whitespace(self):
        assert normalize_header("  Nr.   Lokalu! ") == "nr lokalu"

    def test_levenshtein_distance(self):
        assert levenshtein("kitten", "sitting") == 3
        assert levenshtein("", "abc") == 3
        assert levenshtein("cena", "cena") == 0

    def test_fuzzy_match_exact(self):
        assert fuzzy_match("cena", "cena") == 1.0

    def test_fuzzy_match_substring(self):
        assert fuzzy_match("cena", "cena brutto") == 0.9
        assert fuzzy_match("cena brutto", "cena") == 0.9

    def test_fuzzy_match_empty(self):
        assert fuzzy_match("", "cena") == 0.0

    def test_fuzzy_match_edit_distance(self):
        # One substitution in six characters
        assert fuzzy_match("status", "statu5") == pytest.approx(1 - 1 / 6)


class TestParseNumber:
    """Test suite for Polish number coercion."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("450 000,50", 450000.5),
            ("1.234.567,89", 1234567.89),
            ("450 000 zł", 450000.0),
            ("12.5", 12.5),
            ("65,50", 65.5),
            (1200, 1200.0),
        ],
    )
    def test_parses_polish_notation(self, raw, expected):
        assert parse_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "brak", True])
    def test_unparseable_values_return_none(self, raw):
        assert parse_number(raw) is None


class TestNormalizeStatus:
    """Test suite for availability status aliases."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("dostępne", "available"),
            ("Wolne", "available"),
            (" Sprzedane ", "sold"),
            ("rezerwacja", "reserved"),
            ("zarezerwowany", "reserved"),
        ],
    )
    def test_aliases(self, raw, expected):
        assert normalize_status(raw) == expected

    def test_unknown_and_empty_default_to_available(self):
        assert normalize_status("w budowie") == "available"
        assert normalize_status(None) == "available"


class TestDecodeContent:
    """Test suite for upload decoding."""

    def test_utf8_with_bom(self):
        assert decode_content(b"\xef\xbb\xbfNr lokalu") == "Nr lokalu"

    def test_cp1250_fallback(self):
        assert decode_content("Piętro".encode("cp1250")) == "Piętro"

    def test_text_passthrough(self):
        assert decode_content("\ufeffCena") == "Cena"


class TestParse:
    """Test suite for column mapping and row parsing."""

    def test_maps_polish_headers(self, sample_csv):
        result = parse(sample_csv)

        assert result.success is True
        assert result.mappings["property_number"] == "Nr lokalu"
        assert result.mappings["property_type"] == "Typ"
        assert result.mappings["area"] == "Powierzchnia"
        assert result.mappings["price_per_m2"] == "Cena za m2"
        assert result.mappings["total_price"] == "Cena"
        assert result.mappings["status"] == "Status"
        assert result.mappings["investment_name"] == "Inwestycja"
        assert result.confidence == pytest.approx(1.0)

    def test_parses_rows_with_coerced_values(self, sample_csv):
        result = parse(sample_csv)

        assert result.total_rows == 3
        assert result.valid_rows == 3
        first = result.rows[0]
        assert first["property_number"] == "A1"
        assert first["area"] == 50.0
        assert first["price_per_m2"] == 9000.0
        assert first["total_price"] == 450000.0
        assert first["status"] == "available"
        assert result.rows[1]["status"] == "sold"
        assert result.rows[2]["status"] == "reserved"

    def test_keeps_raw_row(self, sample_csv):
        result = parse(sample_csv)
        raw = result.rows[0]["raw_data"]
        assert raw["Nr lokalu"] == "A1"
        assert raw["Pokoje"] == "2"

    def test_header_is_never_mapped_twice(self):
        result = parse("Nr lokalu;Powierzchnia;Cena;Status\nA1;50;450000;wolne\n")

        assert result.mappings == {
            "property_number": "Nr lokalu",
            "area": "Powierzchnia",
            "total_price": "Cena",
            "status": "Status",
        }
        assert len(set(result.mappings.values())) == len(result.mappings)

    def test_comma_delimiter(self):
        result = parse("property_number,area,total_price\nA1,50.5,450000\n")

        assert result.success is True
        assert result.rows[0]["area"] == 50.5

    def test_quoted_cells(self):
        result = parse('Nr lokalu;Cena;Powierzchnia\n"A 1";"450 000,00";"50,0"\n')
        assert result.rows[0]["property_number"] == "A 1"
        assert result.rows[0]["total_price"] == 450000.0

    def test_rows_with_wrong_column_count_are_skipped(self):
        result = parse("Nr lokalu;Cena;Powierzchnia\nA1;450000;50\nA2;1\n")

        assert result.total_rows == 2
        assert len(result.rows) == 1

    def test_blank_lines_are_ignored(self):
        result = parse("Nr lokalu;Cena;Powierzchnia\n\nA1;450000;50\n\n")
        assert result.total_rows == 1

    def test_missing_fields_are_reported(self, sample_csv):
        result = parse(sample_csv)
        assert "Nie znaleziono kolumny dla: final_price" in result.errors
        assert "final_price" not in result.mappings

    def test_misspelled_headers_are_mapped(self):
        result = parse(
            "Numer lokalau;Powierzhnia;Cena calkowta\nA1;50,00;450 000,00\n"
        )

        assert result.success is True
        assert result.mappings["property_number"] == "Numer lokalau"
        assert result.mappings["area"] == "Powierzhnia"
        assert result.mappings["total_price"] == "Cena calkowta"
        assert result.rows[0]["area"] == 50.0
        assert result.rows[0]["total_price"] == 450000.0

    def test_unicode_line_breaks_stay_inside_cells(self):
        content = (
            "Nr lokalu;Typ;Powierzchnia;Cena\n"
            "A1;Lokal\x0bmieszkalny;50;450000\n"
            "A2;Lokal mieszkalny;60;540000\n"
        )

        result = parse(content)

        assert result.total_rows == 2
        assert [row["property_number"] for row in result.rows] == ["A1", "A2"]
        assert result.rows[0]["property_type"] == "Lokal\x0bmieszkalny"

    def test_unrecognised_headers_fail(self):
        result = parse("foo;bar;qux\n1;2;3\n")

        assert result.success is False
        assert result.mappings == {}
        assert "Nie znaleziono kolumny dla: property_number" in result.errors
        assert result.confidence == 0.0

    def test_extracts_developer_info(self, sample_csv):
        result = parse(sample_csv)
        assert result.developer_info == {"investment_name": "Osiedle Zielone"}

    def test_empty_content_raises(self):
        with pytest.raises(CSVParseError, match="pusty"):
            parse(b"")

    def test_whitespace_only_content_raises(self):
        with pytest.raises(CSVParseError):
            parse("  \n \n")

    def test_to_dict_limits_preview(self, sample_csv):
        data = parse(sample_csv).to_dict(preview_rows=2)

        assert data["success"] is True
        assert data["confidence"] == 100
        assert len(data["preview"]) == 2
        assert data["total_rows"] == 3


class TestColumnSuggestions:
    """Test suite for get_column_suggestions."""

    def test_lists_every_field(self, sample_csv):
        suggestions = get_column_suggestions(sample_csv)

        assert set(suggestions) == set(COLUMN_PATTERNS)
        assert suggestions["property_number"]["current"] == "Nr lokalu"
        assert suggestions["final_price"]["current"] is None

    def test_alternatives_exclude_chosen_header(self, sample_csv):
        suggestions = get_column_suggestions(sample_csv)
        total_price = suggestions["total_price"]
        assert total_price["current"] not in total_price["suggestions"]


class TestMinistryCompliance:
    """Test suite for validate_ministry_compliance."""

    def test_valid_price_list(self, sample_csv):
        report = validate_ministry_compliance(parse(sample_csv))
        assert report == {"valid": True, "errors": [], "warnings": []}

    def test_missing_required_column(self):
        result = parse("Nr lokalu;Powierzchnia;Status\nA1;50;dostępne\n")
        report = validate_ministry_compliance(result)

        assert report["valid"] is False
        assert "Brakujące wymagane pola: total_price" in report["errors"]
        assert "1 mieszkań bez ceny" in report["warnings"]

    def test_no_rows(self):
        report = validate_ministry_compliance(parse("Nr lokalu;Cena;Powierzchnia\n"))

        assert report["valid"] is False
        assert report["errors"] == ["Brak danych nieruchomości do przetworzenia"]

    def test_rows_without_number_warn(self):
        content = "Nr lokalu;Cena;Powierzchnia\n;450000;50\nA2;500000;55\n"
        report = validate_ministry_compliance(parse(content))
        assert "1 mieszkań bez numeru lokalu" in report["warnings"]
