# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Batch synchronisation with the n8n ministry workflow.

Called by the scheduler with ``Authorization: Bearer <BATCH_SYNC_TOKEN>``.
"""

from flask import request
from flask_restful import Resource

from otoraport.services.batch_sync import DEFAULT_STATUS_DAYS, run_batch_sync, sync_status
from otoraport.utils.bearer import require_bearer_token


class BatchSyncResource(Resource):
    """Run the batch sync (POST) or report on recent runs (GET)."""

    @require_bearer_token("BATCH_SYNC_TOKEN")
    def post(self):
        """Push every eligible developer to n8n.

        A failing developer is recorded and skipped; the response always
        carries the full summary.
        """
        return run_batch_sync(), 200

    @require_bearer_token("BATCH_SYNC_TOKEN")
    def get(self):
        """Summary of the sync runs of the last ``days`` days (1 to 90)."""
        days = request.args.get("days", default=DEFAULT_STATUS_DAYS, type=int)
        return sync_status(days), 200
