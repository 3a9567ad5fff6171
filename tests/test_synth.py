"""Tests for the synthetic donation generator."""

from __future__ import annotations

from datetime import date

import pytest

from analytics.donations import aggregate_by_month
from core.models import DonationStatus
from data.synth import (
    DONATION_TIERS,
    generate_mock_donations,
    seasonal_multiplier,
    write_donations_csv,
)


def test_generator_is_deterministic_for_a_seed():
    first = generate_mock_donations(50, end=date(2024, 12, 31), seed=11)
    second = generate_mock_donations(50, end=date(2024, 12, 31), seed=11)

    assert first == second


def test_generated_records_are_paid_sorted_and_in_range():
    records = generate_mock_donations(300, start=date(2024, 1, 1), end=date(2024, 6, 30), seed=5)

    assert len(records) == 300
    assert all(r.status is DonationStatus.PAID for r in records)
    assert [r.timestamp for r in records] == sorted(r.timestamp for r in records)
    assert all(date(2024, 1, 1) <= r.timestamp.date() <= date(2024, 6, 30) for r in records)
    for record in records:
        assert record.amount_foreign == pytest.approx(record.amount_local / 31.2, abs=0.01)
        assert 50 * 0.7 <= record.amount_local <= 25_000 * 2.5


def test_seasonal_shape_shows_in_monthly_totals():
    records = generate_mock_donations(6000, start=date(2024, 1, 1), end=date(2024, 12, 31), seed=7)
    totals = {b.month_key: b.total_local for b in aggregate_by_month(records)}

    assert totals["2024-03"] > totals["2024-07"]
    assert totals["2024-04"] > totals["2024-08"]


def test_seasonal_multiplier_and_tiers():
    assert seasonal_multiplier(3) == 2.5
    assert seasonal_multiplier(12) == 1.8
    assert seasonal_multiplier(7) == 0.7
    assert seasonal_multiplier(5) == 1.0
    assert sum(tier.probability for tier in DONATION_TIERS) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"count": -1},
        {"conversion_rate": 0},
        {"start": date(2024, 2, 1), "end": date(2024, 1, 1)},
    ],
)
def test_generator_rejects_invalid_arguments(kwargs):
    with pytest.raises(ValueError):
        generate_mock_donations(**kwargs)


def test_write_donations_csv(tmp_path):
    path = tmp_path / "mock.csv"

    df = write_donations_csv(str(path), seed=1, count=12, end=date(2024, 2, 1))

    assert path.exists()
    assert len(df) == 12
    assert list(df.columns) == [
        "id",
        "amount_egp",
        "amount_usd",
        "currency",
        "date",
        "status",
        "program_id",
        "city",
        "payment_type",
    ]
    assert set(df["status"]) == {"paid"}
