"""
Pytest configuration and shared fixtures.

The application reads its settings when app.config is first imported, so
the environment is prepared here before any test module imports app code.
"""
import base64
import os
from datetime import datetime, timedelta, timezone

import pytest

TEST_SECRET = bytes(range(32))
OTHER_SECRET = bytes(range(100, 132))

os.environ["JWT_SECRET_KEY"] = base64.b64encode(TEST_SECRET).decode("ascii")
os.environ["JWT_EXPIRATION"] = "1"
os.environ["ENVIRONMENT"] = "test"
os.environ["KNOWN_USERS"] = "+15551234567,alice"

from app.config import TokenConfig  # noqa: E402
from app.services.auth import TokenService  # noqa: E402
from app.services.identity import Identity  # noqa: E402


# Whole seconds: JWT timestamps drop sub-second precision
T0 = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def config():
    return TokenConfig(secret_key=TEST_SECRET, expiration_days=1)


@pytest.fixture
def service(config, clock):
    return TokenService(config, clock=clock)


@pytest.fixture
def live_service(config):
    """TokenService on the real wall clock."""
    return TokenService(config)


@pytest.fixture
def identity():
    return Identity(username="+15551234567")


@pytest.fixture
def other_identity():
    return Identity(username="alice")
