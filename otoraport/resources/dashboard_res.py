# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Dashboard, analytics, activity and admin statistics resources."""

from flask import request
from flask_restful import Resource

from otoraport.models.activity_log import ActivityLog
from otoraport.resources.constants import (
    MSG_DEVELOPER_NOT_FOUND,
    MSG_INVALID_REPORT_TYPE,
    MSG_INVALID_TIMEFRAME,
)
from otoraport.resources.pagination import parse_pagination
from otoraport.services.stats_service import (
    ANALYTICS_REPORTS,
    ANALYTICS_TIMEFRAMES,
    admin_stats,
    analytics_report,
    dashboard_stats,
)
from otoraport.services.subscription import subscription_required
from otoraport.utils.jwt_utils import (
    admin_required,
    get_current_developer,
    get_developer_id_from_jwt,
    require_jwt_auth,
)
from otoraport.utils.limiter import default_limit, limiter


class DashboardStatsResource(Resource):
    """GET /dashboard/stats"""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def get(self):
        developer = get_current_developer()
        if developer is None:
            return {"message": MSG_DEVELOPER_NOT_FOUND}, 404
        return dashboard_stats(developer), 200


class AnalyticsResource(Resource):
    """GET /analytics: price analytics, Professional plan only."""

    @require_jwt_auth
    @subscription_required(feature="advanced_analytics")
    @limiter.limit(default_limit)
    def get(self):
        """Analytics report of the developer's offer.

        Query Parameters:
            type (str, optional): ``overview`` (default), ``breakdown`` or
                ``projects``.
            timeframe (str, optional): ``30d`` (default), ``90d`` or ``12m``.
        """
        report_type = request.args.get("type", "overview")
        timeframe = request.args.get("timeframe", "30d")
        if report_type not in ANALYTICS_REPORTS:
            return {"error": MSG_INVALID_REPORT_TYPE, "allowed": list(ANALYTICS_REPORTS)}, 400
        if timeframe not in ANALYTICS_TIMEFRAMES:
            return {"error": MSG_INVALID_TIMEFRAME, "allowed": list(ANALYTICS_TIMEFRAMES)}, 400

        developer = get_current_developer()
        return {"success": True, "data": analytics_report(developer, report_type, timeframe)}, 200

class ActivityResource(Resource):
    """GET /activity: the developer's recent activity, newest first."""

    @require_jwt_auth
    @limiter.limit(default_limit)
    def get(self):
        """Recent activity entries.

        Query Parameters:
            action (str, optional): Only entries of this action.
            limit (int, optional): Number of entries, capped at MAX_PAGE_LIMIT.
        """
        limit, _, error = parse_pagination()
        if error:
            return error

        entries = ActivityLog.get_recent(
            developer_id=get_developer_id_from_jwt(),
            action=request.args.get("action") or None,
            limit=limit,
        )
        return [entry.to_dict() for entry in entries], 200


class AdminStatsResource(Resource):
    """GET /admin/stats: platform statistics for addresses in ``ADMIN_EMAILS``."""

    @require_jwt_auth
    @admin_required
    @limiter.limit(default_limit)
    def get(self):
        return admin_stats(), 200
