"""Shared fixtures for the wealth tracker tests."""

from datetime import date, datetime

import pytest

from wealth.models import MetalPrice, PriceSnapshot


@pytest.fixture
def now() -> datetime:
    """A fixed mid-month instant so month arithmetic is predictable."""
    return datetime(2025, 3, 15, 12, 0, 0)


@pytest.fixture
def prices() -> PriceSnapshot:
    return PriceSnapshot(
        gold=MetalPrice(usd=2500.0, egp=125000.0, change=0.4),
        silver=MetalPrice(usd=30.0, egp=1500.0, change=-0.2),
        usd_to_egp=50.0,
    )


@pytest.fixture
def start() -> date:
    return date(2024, 1, 1)
