"""Shared pytest fixtures."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from stillgrateful.logging.context import clear_log_context
from stillgrateful.persistence import Database
from stillgrateful.utils.hashing import hash_sender_token


class FakeClock:
    """Controllable replacement for utc_now()."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set the required environment variables to dummy values."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setenv("RESEND_API_KEY", "test-resend-key")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("STILLGRATEFUL_CONFIG", raising=False)


@pytest.fixture
def database():
    """Fresh in-memory database with the schema created."""
    db = Database("sqlite:///:memory:")
    yield db
    db.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def sender_hash():
    return hash_sender_token("unique-anonymous-token-123")


@pytest.fixture
def valid_payload():
    """A request body that passes validation."""
    return {
        "message": "Thank you for believing in me when nobody else did.",
        "recipient_email": "Teacher@School.org",
        "context_tag": "former-student",
        "sender_token": "unique-anonymous-token-123",
    }


@pytest.fixture
def mock_classifier():
    """Classifier client that always answers ALLOW."""
    client = MagicMock()
    client.classify.return_value = "ALLOW"
    return client


@pytest.fixture
def mock_email_client():
    """Email client that accepts every message."""
    client = MagicMock()
    client.send_email.return_value = "email-id-123"
    return client


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()
