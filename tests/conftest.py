"""
tests/conftest.py -- Shared fixtures for the auth core tests.

Every test gets its own Flask app on a private in-memory SQLite database
(TestingConfig: DATABASE_URL="sqlite://", cheap Argon2 parameters) and a
controllable clock, so token expiry can be exercised without sleeping.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from api import create_app
from utils.security import PasswordHasher

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock returning an aware UTC datetime that only moves on advance()."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app(clock):
    app = create_app("testing", clock=clock)
    yield app
    app.extensions["storage"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    return app.extensions["storage"]


@pytest.fixture
def service(app):
    """The AuthService wired by create_app(), sharing the app's store and clock."""
    return app.extensions["auth_service"]


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)
