# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Validation helpers for Polish business identifiers and price list rows."""

import re
import secrets
from typing import Any

from otoraport.models.constants import PROPERTY_TYPES

NIP_WEIGHTS = (6, 5, 7, 2, 3, 4, 5, 6, 7)
REGON9_WEIGHTS = (8, 9, 2, 3, 4, 5, 6, 7)
REGON14_WEIGHTS = (2, 4, 8, 5, 0, 9, 7, 3, 6, 1, 2, 4, 8)

CLIENT_ID_SLUG_MAX_LENGTH = 20
CLIENT_ID_MIN_LENGTH = 10
PRICE_TOLERANCE = 0.01

_LEGAL_SUFFIX_RE = re.compile(r"\bsp\.?\s*z\s*o\.?\s*o\.?|\bs\.?\s*a\.?(?=\s|$)", re.IGNORECASE)


def normalize_identifier(value: str | None) -> str:
    """Drop dashes and whitespace from a NIP or REGON."""
    if not value:
        return ""
    return re.sub(r"[-\s]", "", str(value))


def _checksum(digits: str, weights: tuple[int, ...]) -> int:
    return sum(int(digit) * weight for digit, weight in zip(digits, weights)) % 11


def validate_nip(nip: str | None) -> bool:
    """Check a NIP (tax id): 10 digits with a valid mod-11 control digit.

    A control value of 10 cannot be represented and is never valid.
    """
    digits = normalize_identifier(nip)
    if not re.fullmatch(r"\d{10}", digits):
        return False
    control = _checksum(digits, NIP_WEIGHTS)
    if control == 10:
        return False
    return control == int(digits[9])


def validate_regon(regon: str | None) -> bool:
    """Check a 9 or 14 digit REGON; a control value of 10 counts as 0."""
    digits = normalize_identifier(regon)
    if re.fullmatch(r"\d{9}", digits):
        weights = REGON9_WEIGHTS
    elif re.fullmatch(r"\d{14}", digits):
        weights = REGON14_WEIGHTS
    else:
        return False
    control = _checksum(digits, weights) % 10
    return control == int(digits[-1])


def generate_client_id(company_name: str) -> str:
    """Build a public feed identifier from a company name.

    ``"Deweloper Nowak Sp. z o.o."`` becomes ``"deweloper-nowak-3f9a1c2b"``.
    The random suffix keeps ids unique; callers still check for collisions.
    """
    slug = _LEGAL_SUFFIX_RE.sub("", company_name.lower())
    slug = re.sub(r"[^\w\s]", "", slug).strip()
    slug = re.sub(r"\s+", "-", slug)[:CLIENT_ID_SLUG_MAX_LENGTH].strip("-")
    if not slug:
        slug = "developer"
    # 8 hex chars plus the dash keep even a one-letter slug >= CLIENT_ID_MIN_LENGTH
    return f"{slug}-{secrets.token_hex(4)}"


def validate_property_row(row: dict[str, Any], row_number: int) -> tuple[list[str], list[str]]:
    """Validate one parsed price list row.

    Args:
        row: Parsed row (see ``csv_parser.ParseResult.rows``).
        row_number: 1-based row position, used in messages.

    Returns:
        Tuple ``(errors, warnings)``. A row with errors is not imported.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not row.get("property_number"):
        errors.append(f"Wiersz {row_number}: brak numeru lokalu")

    property_type = row.get("property_type")
    if property_type and property_type not in PROPERTY_TYPES:
        warnings.append(
            f"Wiersz {row_number}: nietypowy rodzaj lokalu \"{property_type}\" "
            f"(oczekiwano: {', '.join(PROPERTY_TYPES)})"
        )

    area = row.get("area")
    if area is not None and area <= 0:
        errors.append(f"Wiersz {row_number}: powierzchnia musi być dodatnia")

    for field_name in ("price_per_m2", "total_price", "final_price"):
        value = row.get(field_name)
        if value is not None and value <= 0:
            errors.append(f"Wiersz {row_number}: cena ({field_name}) musi być dodatnia")

    price_per_m2 = row.get("price_per_m2")
    total_price = row.get("total_price")
    if price_per_m2 and area and total_price and price_per_m2 > 0 and area > 0:
        expected = price_per_m2 * area
        if abs(total_price - expected) > expected * PRICE_TOLERANCE:
            warnings.append(
                f"Wiersz {row_number}: cena całkowita ({total_price:.2f}) nie jest "
                f"iloczynem ceny za m² i powierzchni ({expected:.2f})"
            )

    return errors, warnings
