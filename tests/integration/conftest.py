# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Integration tests configuration.

Integration tests run the full application with authentication enabled:
clients sign in through the real endpoints and carry the ``access_token``
cookie. The database comes from DATABASE_URL (PostgreSQL in Docker) and
falls back to in-memory SQLite.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pytest import fixture

# Load integration testing environment
dotenv_path = Path(__file__).parent.parent.parent / ".env.integration"
if dotenv_path.exists():
    load_dotenv(dotenv_path=dotenv_path, override=True)

os.environ.setdefault("APP_MODE", "integration")
os.environ["FLASK_ENV"] = "testing"

from otoraport import create_app  # noqa: E402
from otoraport.models.db import db  # noqa: E402

SAMPLE_CSV = (
    "Nr lokalu;Typ;Powierzchnia;Cena za m2;Cena;Status;Inwestycja;Adres inwestycji\n"
    "M1;mieszkanie;42,10;11 000,00;463 100,00;wolne;Park Północ;ul. Leśna 5\n"
    "M2;mieszkanie;58,40;10 500,00;613 200,00;sprzedane;Park Północ;ul. Leśna 5\n"
    "M3;mieszkanie;73,00;10 200,00;744 600,00;rezerwacja;Park Północ;ul. Leśna 5\n"
    "M4;mieszkanie;35,50;11 800,00;418 900,00;wolne;Park Północ;ul. Leśna 5\n"
).encode("utf-8")


@fixture
def app():
    """Create Flask application for integration testing.

    Each test gets fresh tables so flows can register the same accounts.
    """
    app = create_app("otoraport.config.IntegrationConfig")
    app.config["BATCH_SYNC_TOKEN"] = "integration-batch-token"  # nosec B105
    app.config["CRON_SECRET"] = "integration-cron-secret"  # nosec B105
    app.config["ADMIN_EMAILS"] = ["admin@otoraport.pl"]

    with app.app_context():
        db.create_all()
        yield app

        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@fixture
def client(app):
    """Create test client for making HTTP requests."""
    return app.test_client()


@fixture
def api_version():
    """Get API version prefix from VERSION file."""
    version_file = Path(__file__).parent.parent.parent / "VERSION"
    try:
        version = version_file.read_text().strip()
        return f"v{version.split('.')[0]}"
    except (FileNotFoundError, IndexError):
        return "v0"


@fixture
def api_url(api_version):
    """Build API URL with version prefix."""

    def _build_url(path: str) -> str:
        return f"/{api_version}/{path.lstrip('/')}"

    return _build_url


@fixture
def register(client, api_url):
    """Register a developer through the API; the client keeps the cookie.

    Returns:
        callable: ``register(email, company_name, **extra)`` returning the
        developer payload.
    """

    def _register(
        email="biuro@parkpolnoc.pl", company_name="Park Północ Sp. z o.o.", **extra
    ):
        payload = {
            "email": email,
            "company_name": company_name,
            "password": "integration-password",
            **extra,
        }
        response = client.post(api_url("auth/register"), json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["developer"]

    return _register


@fixture
def sample_csv():
    return SAMPLE_CSV
