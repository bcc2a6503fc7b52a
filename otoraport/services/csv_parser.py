# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Smart CSV parser for Polish real-estate price lists.

Developers export their price lists from many different tools, so column
headers are never the same twice ("Nr lokalu", "numer mieszkania",
"apartment_number", ...). The parser reconciles the uploaded headers with a
fixed set of logical fields by fuzzy string matching:

1. every header is normalized (lowercase, punctuation stripped, whitespace
   collapsed),
2. each header is scored against the known variants of each field
   (exact match 1.0, substring 0.9, otherwise normalized Levenshtein),
3. the best header scoring above ``MATCH_THRESHOLD`` is mapped to the field.

Numeric columns are coerced from Polish notation (``"450 000,50 zł"``).
"""

import csv
import io
import re
from dataclasses import dataclass, field
from typing import Any

from otoraport.utils.logger import logger

MATCH_THRESHOLD = 0.6
SUGGESTION_THRESHOLD = 0.3
MIN_MAPPED_FIELDS = 3
MAX_ALTERNATIVES = 3
DEVELOPER_INFO_SCAN_ROWS = 5

NUMERIC_FIELDS = frozenset(
    {"price_per_m2", "total_price", "final_price", "area", "parking_price"}
)
DEVELOPER_INFO_FIELDS = (
    "developer_name",
    "company_name",
    "nip",
    "phone",
    "email",
    "investment_name",
    "investment_address",
    "investment_city",
)
REQUIRED_MINISTRY_FIELDS = ("property_number", "total_price", "area")

# Known header variants per logical field, in mapping order
COLUMN_PATTERNS: dict[str, list[str]] = {
    "property_number": [
        "nr lokalu", "numer lokalu", "nr mieszkania", "numer mieszkania",
        "lokal", "mieszkanie", "nr", "property_number", "apartment_number",
        "nr_lokalu", "numer_lokalu", "mieszkanie_nr",
    ],
    "property_type": [
        "typ", "typ lokalu", "typ mieszkania", "rodzaj", "property_type",
        "type", "kategoria", "typ_lokalu", "rodzaj_lokalu",
    ],
    "price_per_m2": [
        "cena za m²", "cena za m2", "cena m2", "cena m²", "cena/m2", "cena/m²",
        "price_per_m2", "price_per_sqm", "cena_za_m2", "cena_m2", "cena za metr",
    ],
    "total_price": [
        "cena całkowita", "cena", "cena brutto", "cena bazowa", "total_price",
        "price", "cena_calkowita", "cena_bazowa", "cena_brutto",
    ],
    "final_price": [
        "cena finalna", "cena końcowa", "cena ostateczna", "final_price",
        "cena_finalna", "cena_koncowa", "cena_ostateczna",
    ],
    "area": [
        "powierzchnia", "powierzchnia użytkowa", "powierzchnia m²",
        "powierzchnia m2", "area", "size", "metraż", "pow",
        "powierzchnia_uzytkowa", "m2", "m²",
    ],
    "parking_space": [
        "parking", "miejsce parkingowe", "garaż", "parking space",
        "parking_space", "miejsce_parkingowe", "mp", "parking_spot", "garage",
    ],
    "parking_price": [
        "cena parkingu", "cena garażu", "parking price", "parking_price",
        "cena_parkingu", "cena_garazu", "parking_cost",
    ],
    "status": [
        "status", "dostępność", "stan", "availability", "dostepnosc",
        "stan_sprzedaży", "stan_sprzedazy",
    ],
    "developer_name": [
        "deweloper", "nazwa dewelopera", "developer", "developer_name",
        "firma", "nazwa_dewelopera",
    ],
    "company_name": [
        "nazwa firmy", "company", "company_name", "nazwa_firmy",
        "firma", "spółka", "spolka",
    ],
    "nip": ["nip", "nr nip", "numer nip", "tax_id", "vat_id", "nr_nip"],
    "phone": [
        "telefon", "tel", "phone", "numer telefonu", "kontakt",
        "tel.", "telefon_kontaktowy", "numer_telefonu",
    ],
    "email": [
        "email", "e-mail", "mail", "adres email", "contact_email",
        "email_kontaktowy", "adres_email",
    ],
    "investment_name": [
        "inwestycja", "nazwa inwestycji", "project", "investment",
        "investment_name", "projekt", "nazwa_inwestycji", "osiedle",
    ],
    "investment_address": [
        "adres", "ulica", "adres inwestycji", "address", "street",
        "investment_address", "adres_inwestycji", "lokalizacja",
    ],
    "investment_city": [
        "miasto", "miejscowość", "city", "town", "gmina",
        "miejscowosc", "investment_city",
    ],
}

STATUS_ALIASES = {
    "available": "available",
    "dostępne": "available",
    "dostepne": "available",
    "dostępny": "available",
    "dostepny": "available",
    "wolne": "available",
    "wolny": "available",
    "sold": "sold",
    "sprzedane": "sold",
    "sprzedany": "sold",
    "reserved": "reserved",
    "zarezerwowane": "reserved",
    "zarezerwowany": "reserved",
    "rezerwacja": "reserved",
}


class CSVParseError(Exception):
    """Raised when the uploaded content cannot be read as a CSV price list."""


@dataclass
class ParseResult:
    """Outcome of parsing one CSV price list.

    ``mappings`` maps a logical field to the original header text. Each row
    holds the coerced mapped values plus ``raw_data`` (the row as uploaded).
    """

    headers: list[str] = field(default_factory=list)
    mappings: dict[str, str] = field(default_factory=dict)
    scores: dict[str, float] = field(default_factory=dict)
    rows: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    suggestions: dict[str, list[str]] = field(default_factory=dict)
    confidence: float = 0.0
    success: bool = False
    total_rows: int = 0
    valid_rows: int = 0
    developer_info: dict[str, str] = field(default_factory=dict)

    def to_dict(self, preview_rows: int | None = None) -> dict[str, Any]:
        rows = self.rows if preview_rows is None else self.rows[:preview_rows]
        return {
            "success": self.success,
            "headers": self.headers,
            "mappings": self.mappings,
            "errors": self.errors,
            "suggestions": self.suggestions,
            "confidence": round(self.confidence * 100),
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "developer_info": self.developer_info,
            "preview": rows,
        }


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            )
        previous = current
    return previous[-1]


def fuzzy_match(a: str, b: str) -> float:
    """Similarity of two normalized strings in ``[0, 1]``."""
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if a in b or b in a:
        return 0.9
    return 1 - levenshtein(a, b) / max(len(a), len(b))


def normalize_header(header: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    normalized = re.sub(r"[^\w\s]", "", header.lower())
    return re.sub(r"\s+", " ", normalized).strip()


_NORMALIZED_PATTERNS = {
    name: [normalize_header(variant) for variant in variants]
    for name, variants in COLUMN_PATTERNS.items()
}


def parse_number(value: Any) -> float | None:
    """Coerce a Polish formatted number to float.

    Handles space thousands separators, dot or comma thousands groups and a
    decimal comma: ``"1 234,50"``, ``"1.234.567,89"`` and ``"450 000 zł"``.
    Returns None for anything that does not parse.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = re.sub(r"[^\d,.\-]", "", str(value))
    if not cleaned:
        return None
    # A separator followed by a 3-digit group and another separator is a
    # thousands separator
    cleaned = re.sub(r"[.,](?=\d{3}[.,])", "", cleaned)
    cleaned = cleaned.replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def normalize_status(value: str | None) -> str:
    """Map a CSV availability value to ``available``, ``sold`` or ``reserved``."""
    if not value:
        return "available"
    return STATUS_ALIASES.get(value.strip().lower(), "available")


def decode_content(content: bytes | str) -> str:
    """Decode uploaded bytes as UTF-8 (BOM tolerated), falling back to CP1250."""
    if isinstance(content, str):
        return content.lstrip("\ufeff")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("cp1250", errors="replace")


class SmartCSVParser:
    """Reads a CSV price list and maps its columns to logical fields.

    Args:
        content: Raw upload (bytes) or already decoded text.

    Raises:
        CSVParseError: If the content is empty.
    """

    def __init__(self, content: bytes | str):
        text = decode_content(content)
        first_line = next((line for line in io.StringIO(text) if line.strip()), "")

        # Only \r and \n end a record; other Unicode line breaks stay in the cell
        self.delimiter = ";" if ";" in first_line else ","
        reader = csv.reader(
            io.StringIO(text, newline=""), delimiter=self.delimiter, quotechar='"'
        )
        records = [[cell.strip() for cell in record] for record in reader]
        records = [record for record in records if any(record)]
        if not records:
            raise CSVParseError("Plik CSV jest pusty")

        self.headers: list[str] = records[0]
        self.rows: list[list[str]] = records[1:]
        self._normalized_headers = [normalize_header(h) for h in self.headers]
        self.mappings: dict[str, str] = {}
        self._field_indexes: dict[str, int] = {}

    def _score_headers(self, field_name: str) -> list[tuple[float, int]]:
        """Best score of every header for a field, above the threshold."""
        matches = []
        for index, header in enumerate(self._normalized_headers):
            score = max(
                fuzzy_match(header, pattern)
                for pattern in _NORMALIZED_PATTERNS[field_name]
            )
            if score > MATCH_THRESHOLD:
                matches.append((score, index))
        # Highest score first; leftmost column wins ties
        matches.sort(key=lambda match: (-match[0], match[1]))
        return matches

    def closest_headers(self, field_name: str) -> list[str]:
        """Up to three headers loosely resembling the field name."""
        target = normalize_header(field_name.replace("_", " "))
        scored = [
            (fuzzy_match(target, header), index)
            for index, header in enumerate(self._normalized_headers)
        ]
        scored = [item for item in scored if item[0] > SUGGESTION_THRESHOLD]
        scored.sort(key=lambda item: (-item[0], item[1]))
        return [self.headers[index] for _, index in scored[:MAX_ALTERNATIVES]]

    def analyze(self) -> ParseResult:
        """Map headers to fields and parse every well-formed data row.

        Candidates of all fields are assigned best score first, so a header
        goes to the field it resembles most and is never mapped twice.
        """
        result = ParseResult(headers=list(self.headers))
        matches_by_field = {name: self._score_headers(name) for name in COLUMN_PATTERNS}

        candidates = [
            (score, position, index, name)
            for position, (name, matches) in enumerate(matches_by_field.items())
            for score, index in matches
        ]
        candidates.sort(key=lambda item: (-item[0], item[1], item[2]))

        assigned: dict[str, tuple[float, int]] = {}
        claimed: set[int] = set()
        for score, _, index, field_name in candidates:
            if field_name in assigned or index in claimed:
                continue
            assigned[field_name] = (score, index)
            claimed.add(index)

        for field_name, matches in matches_by_field.items():
            if field_name in assigned:
                score, chosen = assigned[field_name]
                result.mappings[field_name] = self.headers[chosen]
                result.scores[field_name] = score
                alternatives = [
                    self.headers[index] for _, index in matches if index != chosen
                ]
                if alternatives:
                    result.suggestions[field_name] = alternatives[:MAX_ALTERNATIVES]
            else:
                result.errors.append(f"Nie znaleziono kolumny dla: {field_name}")
                closest = self.closest_headers(field_name)
                if closest:
                    result.suggestions[field_name] = closest

        self.mappings = result.mappings
        self._field_indexes = {name: index for name, (_, index) in assigned.items()}
        if result.scores:
            result.confidence = sum(result.scores.values()) / len(result.scores)
        result.success = len(result.mappings) >= MIN_MAPPED_FIELDS

        result.rows = self._parse_rows()
        result.total_rows = len(self.rows)
        result.valid_rows = sum(1 for row in result.rows if row.get("property_number"))
        result.developer_info = self.extract_developer_info()

        logger.info(
            "csv_columns_analyzed",
            mapped=len(result.mappings),
            total_rows=result.total_rows,
            valid_rows=result.valid_rows,
            confidence=round(result.confidence, 3),
        )
        return result

    def _parse_rows(self) -> list[dict[str, Any]]:
        column_count = len(self.headers)
        index_by_field = self._field_indexes
        parsed = []
        for row in self.rows:
            if len(row) != column_count:
                continue
            item: dict[str, Any] = {"raw_data": dict(zip(self.headers, row))}
            for field_name, index in index_by_field.items():
                value = row[index]
                if not value:
                    continue
                if field_name in NUMERIC_FIELDS:
                    number = parse_number(value)
                    if number is not None:
                        item[field_name] = number
                elif field_name == "status":
                    item[field_name] = normalize_status(value)
                else:
                    item[field_name] = value
            parsed.append(item)
        return parsed

    def extract_developer_info(self) -> dict[str, str]:
        """First non-empty developer/investment values among the first rows."""
        info: dict[str, str] = {}
        for row in self.rows[:DEVELOPER_INFO_SCAN_ROWS]:
            for field_name in DEVELOPER_INFO_FIELDS:
                index = self._field_indexes.get(field_name)
                if index is None or info.get(field_name):
                    continue
                if index < len(row) and row[index]:
                    info[field_name] = row[index]
        return info

    def column_suggestions(self) -> dict[str, dict[str, Any]]:
        """Current mapping and alternative headers for every logical field."""
        result = self.analyze()
        return {
            field_name: {
                "current": result.mappings.get(field_name),
                "suggestions": result.suggestions.get(field_name, []),
            }
            for field_name in COLUMN_PATTERNS
        }


def parse(content: bytes | str) -> ParseResult:
    """Parse a CSV price list.

    Raises:
        CSVParseError: If the content is empty.
    """
    return SmartCSVParser(content).analyze()


def get_column_suggestions(content: bytes | str) -> dict[str, dict[str, Any]]:
    return SmartCSVParser(content).column_suggestions()


def validate_ministry_compliance(result: ParseResult) -> dict[str, Any]:
    """Check a parse result against the fields the ministry feed requires.

    Returns:
        ``{"valid": bool, "errors": [...], "warnings": [...]}``
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not result.rows:
        errors.append("Brak danych nieruchomości do przetworzenia")
        return {"valid": False, "errors": errors, "warnings": warnings}

    missing = [name for name in REQUIRED_MINISTRY_FIELDS if name not in result.mappings]
    if missing:
        errors.append(f"Brakujące wymagane pola: {', '.join(missing)}")

    without_number = sum(1 for row in result.rows if not row.get("property_number"))
    if without_number > len(result.rows) * 0.1:
        warnings.append(f"{without_number} mieszkań bez numeru lokalu")

    without_price = sum(1 for row in result.rows if not row.get("total_price"))
    if without_price:
        warnings.append(f"{without_price} mieszkań bez ceny")

    return {"valid": not errors, "errors": errors, "warnings": warnings}
