"""Pytest configuration and fixtures."""

import os
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from mareye.api.dependencies import get_otp
from mareye.database import Base, get_db
from mareye.main import app
from mareye.services.email_service import EmailResult
from mareye.services.otp_service import OTPService
from mareye.services.otp_store import InMemoryOTPStore

TEST_PASSWORD = "testpass123"  # noqa: S105


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


@dataclass
class FakeSender:
    """Records OTP e-mails instead of sending them."""

    sent: list[tuple[str, str]] = field(default_factory=list)
    fail: bool = False

    def send_otp_email(self, to: str, code: str, name: str | None = None) -> EmailResult:
        if self.fail:
            return EmailResult(success=False, error="SMTP down")
        self.sent.append((to, code))
        return EmailResult(success=True)

    def last_code(self, email: str) -> str:
        return next(code for to, code in reversed(self.sent) if to == email)


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/mareye", "/mareye_test")
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

    from mareye import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(autouse=True)
def welcome_task():
    """Keep the welcome e-mail task off the broker."""
    with patch("mareye.api.auth.send_welcome_email.delay") as mock_task:
        yield mock_task


@pytest.fixture
def otp_sender():
    return FakeSender()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def otp_service(otp_sender, clock):
    return OTPService(store=InMemoryOTPStore(), sender=otp_sender, clock=clock)


@pytest.fixture(scope="function")
def client(db, otp_service):
    """Create a test client with database and OTP service overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_otp] = lambda: otp_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    """Register a password user and return its credentials."""
    response = client.post(
        "/api/register",
        json={
            "username": "diver",
            "email": "test@example.com",
            "password": TEST_PASSWORD,
            "firstName": "Test",
            "lastName": "User",
        },
    )
    assert response.status_code == 201
    return {"email": "test@example.com", "password": TEST_PASSWORD}


@pytest.fixture
def auth_headers(client, db, registered_user):
    """Return bearer auth headers for the registered user."""
    from mareye.services.auth import create_access_token, get_user_by_email

    user = get_user_by_email(db, registered_user["email"])
    token = create_access_token(user.id, user.email, 60)
    return AuthHeaders(
        {"Authorization": f"Bearer {token}"}, user_id=user.id, email=user.email
    )
