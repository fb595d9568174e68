"""
Test configuration: an application per test backed by in-memory SQLite.

``client`` runs the real lifespan, so tables are created and the storage is
built exactly as in production. ``storage`` is a standalone
``SQLAlchemyStorage`` for data-layer tests.
"""

import pytest
from fastapi.testclient import TestClient

from bizboard.core.config import Settings
from bizboard.core.database import Database
from bizboard.main import create_app
from bizboard.storage import SQLAlchemyStorage
from bizboard import schemas

TEST_PASSWORD = "s3cret-pass"


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        AUTO_CREATE_TABLES=True,
        BCRYPT_ROUNDS=4,
        ACTIVITY_TOUCH_INTERVAL_SECONDS=0,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(test_settings):
    """Test client with the application lifespan running."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def storage():
    database = Database("sqlite:///:memory:")
    database.create_all()
    storage = SQLAlchemyStorage(database)
    yield storage
    storage.close()


@pytest.fixture
def register(client):
    """Register a user with a fresh company; returns (auth headers, user json)."""

    def _register(email, company_name="Acme", first_name="Ada", last_name="Lovelace"):
        resp = client.post(
            "/api/register",
            json={
                "email": email,
                "password": TEST_PASSWORD,
                "confirmPassword": TEST_PASSWORD,
                "firstName": first_name,
                "lastName": last_name,
                "companyName": company_name,
            },
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()
        # Requests authenticate with the header; drop the shared cookie jar
        client.cookies.clear()
        return {"Authorization": f"Bearer {data['accessToken']}"}, data["user"]

    return _register


@pytest.fixture
def admin(register):
    return register("admin@acme.com")


@pytest.fixture
def company(storage):
    """A company with one admin user, created directly through storage."""
    company = storage.create_company(schemas.CompanyInsert(name="Storage Co"))
    user = storage.create_user(
        schemas.UserInsert(
            email="owner@storage.com",
            password="hashed",
            first_name="Owner",
            last_name="One",
            role=schemas.UserRole.ADMIN,
            company_id=company.id,
        )
    )
    return {"company": company, "user": user}
