# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for subscription plans, usage limits and the plan gate."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from flask import g

from otoraport.models.project import Project
from otoraport.models.property import Property
from otoraport.models.types import utcnow
from otoraport.services.subscription import (
    PLANS,
    UNLIMITED,
    check_usage_limit,
    days_until,
    get_plan,
    plan_price,
    subscription_info,
    subscription_required,
)


def _add_properties(session, developer, count, project_name="Osiedle"):
    project = Project(developer_id=developer.id, name=project_name)
    session.add(project)
    session.flush()
    for number in range(count):
        session.add(Property(project_id=project.id, property_number=f"L{number}"))
    session.commit()
    return project


class TestPlans:
    """Test suite for the plan catalogue."""

    def test_plan_limits(self):
        assert PLANS["trial"]["limits"] == {"projects": 1, "properties": 200}
        assert PLANS["starter"]["limits"] == {"projects": 1, "properties": 500}
        assert PLANS["professional"]["limits"]["properties"] == UNLIMITED

    def test_get_plan_defaults_to_trial(self):
        assert get_plan(None) is PLANS["trial"]
        assert get_plan("enterprise") is PLANS["trial"]

    @pytest.mark.parametrize(
        "plan,period,expected",
        [
            ("starter", "monthly", 9900),
            ("starter", "yearly", 99000),
            ("professional", "monthly", 19900),
            ("professional", "yearly", 199000),
        ],
    )
    def test_plan_price(self, plan, period, expected):
        assert plan_price(plan, period) == expected

    @pytest.mark.parametrize(
        "plan,period", [("trial", "monthly"), ("gold", "monthly"), ("starter", "weekly")]
    )
    def test_plan_price_rejects_unknown(self, plan, period):
        with pytest.raises(KeyError):
            plan_price(plan, period)

    def test_professional_features(self):
        assert "advanced_analytics" in PLANS["professional"]["features"]
        assert "advanced_analytics" not in PLANS["starter"]["features"]


class TestDaysUntil:
    """Test suite for days_until."""

    def test_rounds_up(self):
        now = datetime(2025, 10, 1, 12, 0)
        assert days_until(now + timedelta(days=2, hours=1), now) == 3
        assert days_until(now + timedelta(days=7), now) == 7

    def test_past_and_missing(self):
        now = datetime(2025, 10, 1, 12, 0)
        assert days_until(now - timedelta(seconds=1), now) == 0
        assert days_until(None, now) == 0


class TestSubscriptionInfo:
    """Test suite for subscription_info."""

    def test_active_trial(self, developer):
        info = subscription_info(developer)

        assert info["plan"] == "trial"
        assert info["status"] == "trial"
        assert info["is_active"] is True
        assert info["days_remaining"] == 14
        assert info["limits"] == {"projects": 1, "properties": 200}

    def test_expired_trial_flips_status(self, session, developer):
        developer.trial_ends_at = utcnow() - timedelta(days=1)
        session.commit()

        info = subscription_info(developer)

        assert info["status"] == "expired"
        assert info["is_active"] is False
        assert info["days_remaining"] == 0
        session.refresh(developer)
        assert developer.subscription_status == "expired"

    def test_cancelled_stays_active_until_period_end(self, session, developer):
        developer.subscription_plan = "starter"
        developer.subscription_status = "cancelled"
        developer.subscription_end_date = utcnow() + timedelta(days=5)
        session.commit()

        info = subscription_info(developer)

        assert info["is_active"] is True
        assert info["status"] == "cancelled"
        assert info["days_remaining"] == 5

    def test_paid_without_end_date_expires(self, session, developer):
        developer.subscription_plan = "starter"
        developer.subscription_status = "active"
        developer.subscription_end_date = None
        session.commit()

        assert subscription_info(developer)["status"] == "expired"


class TestCheckUsageLimit:
    """Test suite for check_usage_limit."""

    def test_trial_allows_first_project(self, developer):
        check = check_usage_limit(developer, "projects")
        assert check.allowed is True
        assert check.current == 0
        assert check.limit == 1

    def test_trial_blocks_second_project(self, developer, project):
        check = check_usage_limit(developer, "projects")

        assert check.allowed is False
        assert check.current == 1
        body, status = check.to_response()
        assert status == 403
        assert body["code"] == "PLAN_LIMIT_REACHED"
        assert body["limit"] == 1
        assert body["upgrade_url"] == "/pricing"
        assert "1 projektów" in body["error"]

    def test_property_limit_counts_additional(self, session, developer):
        _add_properties(session, developer, 198)

        assert check_usage_limit(developer, "properties", additional=2).allowed is True
        check = check_usage_limit(developer, "properties", additional=3)
        assert check.allowed is False
        assert check.current == 198

    def test_professional_is_unlimited(self, session, developer):
        developer.subscription_plan = "professional"
        session.commit()
        _add_properties(session, developer, 3)

        check = check_usage_limit(developer, "properties", additional=100000)
        assert check.allowed is True
        assert check.limit == UNLIMITED

    def test_unknown_resource(self, developer):
        with pytest.raises(ValueError):
            check_usage_limit(developer, "users")


class TestSubscriptionRequired:
    """Test suite for the subscription_required decorator."""

    @staticmethod
    def _call(app, developer_id, feature=None):
        @subscription_required(feature)
        def view():
            return {"plan": g.subscription["plan"]}, 200

        with app.test_request_context():
            g.user_context = {"developer_id": developer_id}
            return view()

    def test_active_subscription_passes(self, app, developer):
        assert self._call(app, developer.id) == ({"plan": "trial"}, 200)

    def test_expired_subscription_returns_402(self, app, session, developer):
        developer.trial_ends_at = utcnow() - timedelta(minutes=1)
        session.commit()

        response = self._call(app, developer.id)

        assert response.status_code == 402
        assert response.get_json()["code"] == "SUBSCRIPTION_REQUIRED"
        assert response.get_json()["upgrade_url"] == "/pricing"

    def test_missing_feature_returns_403(self, app, developer):
        response = self._call(app, developer.id, feature="advanced_analytics")

        assert response.status_code == 403
        assert response.get_json()["code"] == "FEATURE_RESTRICTED"
        assert response.get_json()["current_plan"] == "trial"

    def test_included_feature_passes(self, app, developer):
        assert self._call(app, developer.id, feature="xml_export")[1] == 200

    def test_unknown_developer_returns_404(self, app, session):
        response = self._call(app, uuid4())
        assert response.status_code == 404
