# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Test suite for the Prometheus metrics endpoint."""


class TestMetricsEndpoint:
    """Test suite for Prometheus metrics endpoint."""

    def test_metrics_endpoint_exists(self, client, api_url):
        response = client.get(api_url("metrics"))

        assert response.status_code == 200
        # Prometheus text format carries a version parameter
        assert "text/plain" in response.content_type

    def test_metrics_track_requests(self, client, api_url):
        """The HTTP request metrics are exported."""
        client.get(api_url("health"))

        data = client.get(api_url("metrics")).get_data(as_text=True)

        assert "flask_http_request_total" in data
        assert "flask_http_request_duration_seconds" in data

    def test_metrics_include_exporter_info(self, client, api_url):
        data = client.get(api_url("metrics")).get_data(as_text=True)
        assert "flask_exporter_info" in data

    def test_metrics_do_not_require_authentication(self, app, api_url):
        app.config["AUTH_ENABLED"] = True

        response = app.test_client().get(api_url("metrics"))

        assert response.status_code == 200

    def test_metrics_format_is_valid_prometheus(self, client, api_url):
        lines = client.get(api_url("metrics")).get_data(as_text=True).split("\n")

        assert any(line.startswith("# HELP") for line in lines)
        assert any(line.startswith("# TYPE") for line in lines)
        assert any(line and not line.startswith("#") for line in lines)
