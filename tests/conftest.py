"""Shared fixtures for admin notifier tests."""

from datetime import datetime, timezone

import pytest

from admin_notifier.logging.context import clear_log_context
from tests.helpers import RecordingTransport

ENV_VARS = (
    "MAIL_USER",
    "MAIL_PASS",
    "GMAIL_USER",
    "GMAIL_PASS",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_SENDER_NAME",
    "LOG_LEVEL",
    "SITE_URL",
)


@pytest.fixture
def transport():
    """Transport double where every send succeeds."""
    return RecordingTransport()


@pytest.fixture
def fixed_now():
    """A fixed point in time for deterministic rendering."""
    return datetime(2025, 11, 4, 12, 30, 5, tzinfo=timezone.utc)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every notifier environment variable for the test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()
