import os

# Settings are read at import time; configure before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["APP_URL"] = "http://localhost:3000"
os.environ["SMTP_HOST"] = "smtp.mail.com"
os.environ["SMTP_PORT"] = "587"
os.environ["SMTP_FROM"] = "desk@mail.com"
os.environ["LOG_DIR"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.seed import seed_roles
from app.db.session import get_db
from app.main import app
from app.models import Base

TEST_DATABASE_URL = "sqlite://"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. In-memory SQLite with StaticPool so ALL sessions share the same database
# 2. check_same_thread=False because TestClient runs endpoints in a thread pool
# 3. Foreign keys enabled so ON DELETE SET NULL behaves as in PostgreSQL
# 4. Tables dropped and recreated for every test
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(test_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


def override_get_db():
    """Override session to use test engine"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(name="engine")
def engine_fixture():
    Base.metadata.drop_all(test_engine)
    Base.metadata.create_all(test_engine)
    yield test_engine


@pytest.fixture(name="db")
def db_fixture(engine):
    """Provide a seeded test database session"""
    db = TestingSessionLocal()
    seed_roles(db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(name="client")
def client_fixture(db):
    """Provide a test client with overridden database session

    Override is set BEFORE TestClient() and stays in place for the
    entire duration, so the app never uses its own engine.
    """
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(client):
    """Create a user through the API and return the response body"""
    def _create(username="alice01", email="alice@mail.com", password="longpw123", role="user", **extra):
        payload = {"username": username, "email": email, "password": password, "role": role}
        payload.update(extra)
        response = client.post("/api/v1/users", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_request(client):
    """Create a service request through the API and return the response body"""
    def _create(user_id, description="Printer on the 2nd floor is jammed", **extra):
        payload = {"userId": user_id, "description": description}
        payload.update(extra)
        response = client.post("/api/v1/requests", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
