"""
Shared fixtures for the unit tests.

Nothing here touches PostgreSQL or Telegram: repositories are replaced with
MagicMocks and updates are faked. The database tests live in tests/integration.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from models.employee import Employee
from security import auth
from security.rate_limiter import limiter


@pytest.fixture(autouse=True)
def open_bot(monkeypatch):
    """Every test starts with an empty whitelist and a fresh rate limiter."""
    monkeypatch.setattr(auth, "ALLOWED_USER_IDS", [])
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def make_employee():
    def _make(**overrides) -> Employee:
        fields = dict(
            first_name="John",
            last_name="Doe",
            email="john.doe@example.com",
            phone_number="1234567890",
            hire_date=date(2025, 4, 24),
            job_id="IT_PROG",
            salary=Decimal("5000.00"),
            department_id=10,
            id=100,
        )
        fields.update(overrides)
        return Employee(**fields)
    return _make


@pytest.fixture
def fake_update():
    """A Telegram Update stand-in whose replies are recorded on `message.reply_text`."""
    def _make(user_id: int = 42, text: str = ""):
        message = MagicMock()
        message.text = text
        message.date = SimpleNamespace(date=lambda: date(2025, 4, 24))
        message.reply_text = AsyncMock()
        message.reply_document = AsyncMock()
        message.reply_photo = AsyncMock()
        user = SimpleNamespace(id=user_id, username="hr_ops", first_name="Dana")
        return SimpleNamespace(effective_user=user, message=message, effective_message=message)
    return _make


@pytest.fixture
def fake_context():
    def _make(*args: str):
        return SimpleNamespace(args=list(args), bot=MagicMock())
    return _make
