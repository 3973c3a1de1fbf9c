# tests/conftest.py
"""Shared fixtures: an app over in-memory SQLite and helpers to seed accounts and missions."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Keep the module-level app in jrdriving.main from opening a log file
os.environ.setdefault("LOG_FILE", "")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from jrdriving.config import Settings
from jrdriving.main import create_app
from jrdriving.models.mission import Mission, MissionPriority, MissionStatus
from jrdriving.models.user import Role
from jrdriving.services.auth_service import provision_account

PASSWORD = "password1"


def make_settings(**overrides) -> Settings:
    values = dict(
        _env_file=None,
        ENVIRONMENT="test",
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        LOG_FILE="",
        LOG_LEVEL="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app, client):
    session = app.state.session_factory()
    yield session
    session.close()


def create_account(db, email, role, full_name="Test User"):
    return provision_account(db, email, PASSWORD, full_name, role, phone="0600000000")


def auth_headers(client, email, password=PASSWORD) -> dict:
    """Log in and return a Bearer header. The cookie jar is cleared so the header is what counts."""
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    token = resp.cookies.get("jrdriving_token")
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


def create_mission(db, client_id, driver_id=None, number="JR-1", status=MissionStatus.ASSIGNED, **fields):
    now = datetime.utcnow()
    values = dict(
        client_id=client_id,
        driver_id=driver_id,
        mission_number=number,
        departure_address="10 rue de la Paix",
        departure_city="Paris",
        departure_postal_code="75002",
        arrival_address="5 quai Rambaud",
        arrival_city="Lyon",
        arrival_postal_code="69002",
        scheduled_date=now + timedelta(days=1),
        price=350.0,
        status=status,
        priority=MissionPriority.NORMAL,
        created_at=now,
        updated_at=now,
    )
    values.update(fields)
    mission = Mission(**values)
    db.add(mission)
    db.commit()
    db.refresh(mission)
    return mission


@pytest.fixture
def admin(db):
    return create_account(db, "admin@example.com", Role.ADMIN, "Admin")


@pytest.fixture
def driver(db):
    return create_account(db, "driver@example.com", Role.DRIVER, "Jean Dupont")


@pytest.fixture
def customer(db):
    return create_account(db, "client@example.com", Role.CLIENT, "Client SARL")
