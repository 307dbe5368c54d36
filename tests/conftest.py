"""Pytest configuration and fixtures for pricing service tests.

Provides common fixtures for testing.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from priceservice.config import reset_config
from priceservice.models import PricedInterval


def ts(value: str) -> datetime:
    """Parse an ISO timestamp; a bare date means midnight UTC."""
    if "T" not in value:
        value = f"{value}T00:00:00Z"
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def make_interval():
    """Factory for PricedInterval values with retail/CAD defaults."""

    def _make(
        amount: str,
        valid_from: str,
        valid_to: str,
        kind: str = "retail",
        subkind: str = "regular",
        currency: str = "CAD",
        conflicted: bool = False,
    ) -> PricedInterval:
        return PricedInterval(
            kind=kind,
            subkind=subkind,
            currency=currency,
            amount=Decimal(amount),
            valid_from=ts(valid_from),
            valid_to=ts(valid_to),
            conflicted=conflicted,
        )

    return _make


@pytest.fixture
def utc_now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ENABLE_METRICS", "false")
    monkeypatch.delenv("CACHE_ENABLED", raising=False)
    monkeypatch.delenv("SEED_SAMPLE_DATA", raising=False)
    reset_config()
    yield
    reset_config()
