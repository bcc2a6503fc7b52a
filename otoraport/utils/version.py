# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""VERSION file helpers."""

from pathlib import Path

from otoraport.utils.logger import logger

VERSION_FILE = Path(__file__).parent.parent.parent / "VERSION"


def read_version() -> str:
    """Full version string from the VERSION file, or ``"unknown"``."""
    try:
        return VERSION_FILE.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return "unknown"


def get_api_version() -> str:
    """API prefix derived from the major version, e.g. ``v1``."""
    version = read_version()
    major_version = version.split(".")[0]
    if not major_version.isdigit():
        logger.warning("Failed to read VERSION file. Using default 'v0'.")
        return "v0"
    return f"v{major_version}"
