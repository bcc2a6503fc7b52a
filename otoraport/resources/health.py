# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Health check resource module.

Liveness endpoint used by load balancers and uptime monitors.
"""

from datetime import UTC, datetime

from flask_restful import Resource

from otoraport.service import SERVICE_NAME
from otoraport.utils.limiter import default_limit, limiter
from otoraport.utils.logger import logger


class HealthResource(Resource):
    """Resource for health check endpoint."""

    @limiter.limit(default_limit)
    def get(self):
        """GET /health.

        Returns:
            dict: Service name, ``"ok"`` status and timestamp.

        Status Codes:
            - 200: Service is running
        """
        logger.debug("Health check requested")

        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }, 200
