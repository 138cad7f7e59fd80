"""Pytest configuration and fixtures."""

import os

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from account_api.database import Base, get_db
from account_api.main import app

DEMO_PASSWORD = "Secret1!"


class AuthHeaders(dict):
    """Dict subclass that also stores the owning user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL when configured, SQLite locally
if os.getenv("TEST_DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.environ["TEST_DATABASE_URL"]
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Return a helper that registers a user through the API."""

    def _register(name="Gabriel Nunes", email="g@example.org", password=DEMO_PASSWORD):
        return client.post(
            "/user",
            json={
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": password,
            },
        )

    return _register


@pytest.fixture
def issue_token(client):
    """Return a helper that requests a token and returns its plaintext value."""

    def _issue(email="g@example.org", password=DEMO_PASSWORD, device_name="IOS"):
        response = client.post(
            "/sanctum/token",
            json={"email": email, "password": password, "device_name": device_name},
        )
        assert response.status_code == 200, response.text
        return response.json()["plainTextToken"]

    return _issue


@pytest.fixture
def auth_headers(register_user, issue_token):
    """Create a user and return auth headers with user info."""
    response = register_user()
    assert response.status_code == 200
    user = response.json()["user"]

    token = issue_token()
    return AuthHeaders(
        {"Authorization": f"Bearer {token}"}, user_id=user["id"], email=user["email"]
    )
