"""Shared fixtures for the FoodBank Pulse test-suite."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import Settings, get_settings
from core.data_loader import load_donations
from core.models import BaselineMetrics, DonationRecord


@pytest.fixture(autouse=True)
def clear_caches():
    """Isolate tests from cached settings and donation exports."""

    get_settings.cache_clear()
    load_donations.cache_clear()
    yield
    get_settings.cache_clear()
    load_donations.cache_clear()


@pytest.fixture()
def sample_records() -> list[DonationRecord]:
    return [
        DonationRecord(amount_local=100.0, amount_foreign=3.2, timestamp=datetime(2024, 1, 5, 10, 30)),
        DonationRecord(amount_local=200.0, amount_foreign=6.4, timestamp=datetime(2024, 1, 20, 18, 0)),
        DonationRecord(amount_local=50.0, amount_foreign=1.6, timestamp=datetime(2024, 2, 1, 9, 15)),
    ]


@pytest.fixture()
def dashboard_baseline() -> BaselineMetrics:
    return BaselineMetrics(
        meals_delivered=367_500_000,
        cost_per_meal=6.36,
        revenue=2_200_000_000,
        expenses=2_316_000_000,
    )


@pytest.fixture()
def fast_settings(tmp_path) -> Settings:
    return Settings(
        donations_proxy_url="https://proxy.test/donations",
        feed_max_retries=2,
        feed_backoff_base_seconds=1.0,
        feed_backoff_cap_seconds=30.0,
        scenario_store_path=tmp_path / "scenarios.json",
    )
