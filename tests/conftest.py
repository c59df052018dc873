"""Pytest fixtures for TicketDesk tests.

Uses a separate SQLite database and FastAPI TestClient. Overrides the
`get_db` dependency so tests are isolated from any real DB file.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_ticketdesk_app.db")
os.environ.setdefault("JWT_SECRET", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import ticketdesk.database as database
from ticketdesk.auth import get_password_hash
from ticketdesk.main import app
from ticketdesk.models import Base, UserModel


TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test_ticketdesk.db")

# Create test engine and session factory
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop them after to ensure isolation."""
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    """Provide a SQLAlchemy session for direct DB access in tests."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def _override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[database.get_db] = _override_get_db

# Many auth calls across tests would trip the global limiter; test_rate_limit re-enables it.
app.state.limiter.enabled = False


@pytest.fixture()
def client():
    """FastAPI test client using the app with overridden dependencies."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def create_user(db_session):
    """Insert a user directly in the DB, bypassing the register endpoint."""
    counter = {"n": 0}

    def _create_user(username: str | None = None, password: str = DEFAULT_PASSWORD):
        counter["n"] += 1
        username = username or f"user_{counter['n']}"
        user = UserModel(username=username, hashed_password=get_password_hash(password))
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture()
def auth_headers(client, create_user):
    """Return a helper producing (headers, user) for a freshly created user."""
    def _auth_headers(username: str | None = None, password: str = DEFAULT_PASSWORD):
        user = create_user(username=username, password=password)
        resp = client.post("/api/auth/login", json={"username": user.username, "password": password})
        assert resp.status_code == 200
        token = resp.json()["access_token"]
        return {"Authorization": f"Bearer {token}"}, user

    return _auth_headers


@pytest.fixture()
def create_ticket(client):
    """POST a ticket with the given headers and return the response body."""
    def _create_ticket(headers: dict, title: str = "Sample ticket", **fields):
        r = client.post("/api/tickets", json={"title": title, **fields}, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _create_ticket
