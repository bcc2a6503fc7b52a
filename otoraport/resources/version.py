# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Version resource module.

Exposes the running version, build metadata and the harvester schema
version of the generated XML feed.
"""

import subprocess  # nosec B404
import sys
from pathlib import Path

from flask_restful import Resource

from otoraport.service import SERVICE_NAME
from otoraport.services.xml_generator import SCHEMA_VERSION
from otoraport.utils.jwt_utils import require_jwt_auth
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.version import get_api_version, read_version

META_DIR = Path(__file__).parent.parent.parent / ".meta"


def _read_meta(name, git_args):
    """Read a build metadata file, falling back to git in development."""
    try:
        return (META_DIR / name).read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        try:
            result = subprocess.run(  # nosec B603 B607
                ["git", *git_args],
                capture_output=True,
                text=True,
                check=True,
                timeout=2,
            )
            return result.stdout.strip() or "unknown"
        except (
            subprocess.CalledProcessError,
            FileNotFoundError,
            subprocess.TimeoutExpired,
        ):
            return "unknown"
    except (OSError, UnicodeDecodeError):
        return "unknown"


API_VERSION = read_version()
API_COMMIT = _read_meta("COMMIT", ["rev-parse", "--short", "HEAD"])
API_BUILD_DATE = _read_meta("BUILD_DATE", ["log", "-1", "--format=%cd", "--date=iso-strict"])
PYTHON_VERSION = ".".join(str(part) for part in sys.version_info[:3])


class VersionResource(Resource):
    """Resource for providing the API version."""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def get(self):
        """Retrieve the current API version.

        Returns:
            dict: Service name, version, API prefix, commit hash, build date,
            Python version and harvester schema version, with HTTP 200.
        """
        return {
            "service": SERVICE_NAME,
            "version": API_VERSION,
            "api_version": get_api_version(),
            "commit": API_COMMIT,
            "build_date": API_BUILD_DATE,
            "python_version": PYTHON_VERSION,
            "schema_version": SCHEMA_VERSION,
        }, 200
