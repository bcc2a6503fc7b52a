# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit test configuration and fixtures.

This module provides pytest fixtures for unit testing the Flask application.
It configures the test environment, sets up the database, and provides
common utilities like test clients, API URL builders and sample data.

The environment is configured to prevent loading .env.development by setting
APP_MODE=testing before importing application modules. Authentication is
disabled in TestingConfig, so every protected request runs as the mock
developer (MOCK_DEVELOPER_ID).

Fixtures:
    app: Flask application instance with test database.
    client: Test client for HTTP requests.
    session: Database session for direct data manipulation.
    developer: The mock developer, on a fresh trial.
    authenticated_client: Test client acting as the mock developer.
    project: A project of the mock developer.
    sample_csv: A valid price list as bytes.
    api_version: API version prefix (e.g., 'v1').
    api_url: Function to build versioned API URLs.
    no_network: Blocks outbound HTTP for every test.
"""

import os
from pathlib import Path
from unittest.mock import patch
from uuid import UUID

import requests
from dotenv import load_dotenv
from pytest import fixture

# Set APP_MODE BEFORE any app imports to prevent loading .env.development
os.environ["APP_MODE"] = "testing"
os.environ["FLASK_ENV"] = "testing"
os.environ.pop("AUTH_ENABLED", None)
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["PAGE_LIMIT"] = "20"
os.environ["MAX_PAGE_LIMIT"] = "100"
os.environ["JWT_ALGORITHM"] = "HS256"

# Now load .env.testing which will override any remaining defaults
dotenv_path = Path(__file__).parent.parent.parent / ".env.testing"
if dotenv_path.exists():
    load_dotenv(dotenv_path=dotenv_path)

# Import app modules AFTER environment is configured  # noqa: E402
from otoraport import create_app  # noqa: E402
from otoraport.models.db import db  # noqa: E402
from otoraport.models.developer import Developer  # noqa: E402
from otoraport.models.project import Project  # noqa: E402

MOCK_DEVELOPER_ID = "00000000-0000-0000-0000-000000000001"

SAMPLE_CSV = (
    "Nr lokalu;Typ;Powierzchnia;Cena za m2;Cena;Status;Pokoje;Piętro;Inwestycja\n"
    "A1;Lokal mieszkalny;50,00;9 000,00;450 000,00;dostępne;2;1;Osiedle Zielone\n"
    "A2;Lokal mieszkalny;65,50;9 500,00;622 250,00;sprzedane;3;2;Osiedle Zielone\n"
    "B1;Lokal mieszkalny;40,00;10 000,00;400 000,00;zarezerwowane;1;0;Osiedle Zielone\n"
).encode("utf-8")


@fixture
def app():
    """Create and configure a Flask application for testing.

    Sets up the application context, initializes the database, and ensures
    that the database is created before tests run and dropped after tests complete.

    Yields:
        Flask: The configured Flask application instance.
    """
    app = create_app("otoraport.config.TestingConfig")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        # Close database connection explicitly to avoid ResourceWarning
        db.engine.dispose()


@fixture
def client(app):
    """Create a test client for the Flask application.

    Args:
        app: The Flask application fixture.

    Returns:
        FlaskClient: Test client for simulating HTTP requests.
    """
    return app.test_client()


@fixture
def session(app):
    """Provide a database session for tests.

    Args:
        app: The Flask application fixture.

    Yields:
        Session: SQLAlchemy database session.
    """
    with app.app_context():
        yield db.session


@fixture
def make_developer(session):
    """Factory creating developers on a fresh trial.

    Returns:
        callable: ``make_developer(email, company_name=..., **columns)``.
    """
    counter = {"n": 0}

    def _make(email="dev@example.com", company_name="Test Development", **kwargs):
        counter["n"] += 1
        client_id = kwargs.pop("client_id", f"test-development-{counter['n']:08d}")
        trial_days = kwargs.pop("trial_days", 14)
        return Developer.create(
            email=email,
            company_name=company_name,
            client_id=client_id,
            trial_days=trial_days,
            **kwargs,
        )

    return _make


@fixture
def developer(make_developer):
    """The developer that the mock authentication resolves to.

    Returns:
        Developer: Trial developer with id MOCK_DEVELOPER_ID.
    """
    return make_developer(
        email="developer@example.com",
        company_name="Zielone Tarasy Sp. z o.o.",
        client_id="zielone-tarasy-1a2b3c4d",
        nip="5260250274",
        id=UUID(MOCK_DEVELOPER_ID),
    )


@fixture
def authenticated_client(client, developer):
    """Create an authenticated test client.

    Since AUTH_ENABLED is False in tests, no actual JWT is needed. The
    decorator resolves every request to the ``developer`` fixture.

    Args:
        client: The test client fixture.
        developer: The mock developer fixture.

    Returns:
        FlaskClient: Authenticated test client.
    """
    return client


@fixture
def project(session, developer):
    """A project of the mock developer."""
    project = Project(
        developer_id=developer.id,
        name="Osiedle Zielone",
        location="Warszawa",
        address="ul. Zielona 1",
    )
    session.add(project)
    session.commit()
    return project


@fixture
def sample_csv():
    """A valid semicolon-separated price list with three flats."""
    return SAMPLE_CSV


@fixture
def api_version():
    """Get the API version prefix from VERSION file.

    Returns the major version in format 'vX' (e.g., 'v0', 'v1').
    This ensures tests stay in sync with the actual API version.

    Returns:
        str: API version prefix (e.g., 'v1').
    """
    version_file = Path(__file__).parent.parent.parent / "VERSION"
    try:
        version = version_file.read_text().strip()
        major_version = version.split(".")[0]
        return f"v{major_version}"
    except (FileNotFoundError, IndexError):
        return "v0"


@fixture
def api_url(api_version):
    """Construct API URLs with the correct version prefix.

    Args:
        api_version: The API version fixture.

    Returns:
        callable: Function that builds versioned API URLs.

    Example:
        api_url('health') returns '/v1/health'
    """

    def _build_url(path: str) -> str:
        if path.startswith("/"):
            path = path[1:]
        return f"/{api_version}/{path}"

    return _build_url


@fixture(autouse=True)
def no_network():
    """Fail any real HTTP call; external services must be mocked in unit tests."""
    with patch(
        "requests.adapters.HTTPAdapter.send",
        side_effect=requests.ConnectionError("Network access is disabled in unit tests"),
    ) as blocked:
        yield blocked
