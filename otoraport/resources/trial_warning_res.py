# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Daily trial-expiry reminder job."""

from flask_restful import Resource

from otoraport.services.trial_warnings import send_trial_warnings
from otoraport.utils.bearer import require_bearer_token


class TrialWarningResource(Resource):
    """POST /emails/trial-warning, called by the scheduler with ``CRON_SECRET``."""

    @require_bearer_token("CRON_SECRET")
    def post(self):
        return send_trial_warnings(), 200
