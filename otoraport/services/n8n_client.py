# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""n8n workflow client.

The ``process-developer-data`` workflow receives a developer's rows in the
harvester column layout and publishes them on the open-data portal.
"""

from typing import Any

import requests
from flask import current_app

from otoraport.models.types import utcnow
from otoraport.utils.logger import logger

WORKFLOW_PATH = "/process-developer-data"


class N8NError(Exception):
    """Raised when the workflow call fails or returns a non-2xx status."""


def trigger_workflow(
    client_id: str,
    developer_info: dict[str, Any],
    apartment_data: list[dict[str, Any]],
    batch_id: str | None = None,
) -> dict[str, Any]:
    """POST developer data to the n8n workflow.

    Args:
        client_id: Public id of the developer.
        developer_info: Company identification block.
        apartment_data: One dict per property, harvester column names.
        batch_id: Identifier of the batch run, if any.

    Returns:
        The decoded workflow response (``xmlUrl``, ``md5Url``, ... when the
        workflow reports them), or an empty dict for a non-JSON body.

    Raises:
        N8NError: On a network error or a non-2xx response.
    """
    config = current_app.config
    url = f"{config['N8N_WEBHOOK_URL'].rstrip('/')}{WORKFLOW_PATH}"
    headers = {"Content-Type": "application/json"}
    if config.get("N8N_API_KEY"):
        headers["Authorization"] = f"Bearer {config['N8N_API_KEY']}"

    payload = {
        "clientId": client_id,
        "developerInfo": developer_info,
        "apartmentData": apartment_data,
        "timestamp": utcnow().isoformat() + "Z",
        "batchSync": batch_id is not None,
        "batchId": batch_id,
    }

    try:
        response = requests.post(
            url,
            json=payload,
            headers=headers,
            timeout=config.get("N8N_TIMEOUT", 60),
        )
    except requests.RequestException as e:
        logger.error("n8n_request_failed", client_id=client_id, error=str(e))
        raise N8NError(f"n8n unavailable: {e}") from e

    if not response.ok:
        logger.error(
            "n8n_workflow_failed",
            client_id=client_id,
            status_code=response.status_code,
        )
        raise N8NError(f"n8n failed: {response.status_code} {response.reason}")

    try:
        result = response.json()
    except ValueError:
        result = {}
    logger.info(
        "n8n_workflow_completed",
        client_id=client_id,
        records=len(apartment_data),
        batch_id=batch_id,
    )
    return result if isinstance(result, dict) else {}
