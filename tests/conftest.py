"""Pytest configuration and fixtures."""

import base64
from datetime import datetime, timezone

import pytest

from hawkish.bewit.clock import FixedClock
from hawkish.bewit.credentials import Algorithm, Credentials
from hawkish.bewit.validator import HawkBewit
from hawkish.common.settings import Settings

CLOCK_SEED = datetime(2022, 1, 25, 5, 0, 0, tzinfo=timezone.utc)


def decode_fields(bewit: str) -> list[str]:
    """Split a bewit into its backslash-delimited fields."""
    padded = bewit + "=" * (-len(bewit) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8").split("\\")


def encode_fields(fields: list[str]) -> str:
    """Join fields and encode them as a bewit."""
    raw = "\\".join(fields).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


@pytest.fixture
def creds1() -> Credentials:
    return Credentials(
        key_id="9aA4bFc9df",
        key="4fDE242CacAFdEAFcb5e5b44CFfd7cf4adD53A4AfF32CF5deD7A92facDEC4b33",
        algorithm=Algorithm.SHA256,
    )


@pytest.fixture
def creds2() -> Credentials:
    return Credentials(
        key_id="545D9dC9d7",
        key="32fe2DAF2DE9DcC5AE434Aa7C24CFae3ed42dad3eCe7CED5abf443fbbDFfcAdA",
        algorithm=Algorithm.SHA256,
    )


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at CLOCK_SEED."""
    return FixedClock(CLOCK_SEED)


@pytest.fixture
def hawk(clock: FixedClock) -> HawkBewit:
    return HawkBewit(clock)


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        _env_file=None,
        key_id="k1",
        key="secret",
        algorithm="sha256",
        default_ttl_seconds=600,
    )
