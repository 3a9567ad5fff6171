"""Tests for monthly donation aggregation and time ranges."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import pandas as pd
import pytest

from analytics.donations import (
    TimeRange,
    aggregate_by_month,
    build_donation_frame,
    build_monthly_frame,
    filter_by_time_range,
    month_over_month_growth,
    resolve_time_range,
    summarize,
)
from core.models import DonationRecord, MonthlyAggregate


@dataclass(frozen=True)
class LooseRecord:
    amount_local: Any
    amount_foreign: Any
    timestamp: Any


def test_aggregate_by_month_groups_calendar_months(sample_records):
    buckets = aggregate_by_month(sample_records)

    assert [(b.month_key, b.total_local, b.count) for b in buckets] == [
        ("2024-01", 300.0, 2),
        ("2024-02", 50.0, 1),
    ]
    assert buckets[0].total_foreign == pytest.approx(9.6)
    assert buckets[0].period_start == date(2024, 1, 1)
    assert buckets[0].average_per_record == pytest.approx(150.0)


def test_aggregate_by_month_is_idempotent_and_order_independent(sample_records):
    first = aggregate_by_month(sample_records)
    second = aggregate_by_month(list(reversed(sample_records)))

    assert first == second
    assert aggregate_by_month(sample_records) == first


def test_aggregate_by_month_conserves_totals(sample_records):
    buckets = aggregate_by_month(sample_records)

    assert sum(b.total_local for b in buckets) == pytest.approx(350.0)
    assert sum(b.count for b in buckets) == len(sample_records)


def test_aggregate_by_month_separates_years():
    records = [
        DonationRecord(amount_local=10.0, amount_foreign=1.0, timestamp=datetime(2023, 12, 31, 23, 59)),
        DonationRecord(amount_local=20.0, amount_foreign=2.0, timestamp=datetime(2024, 1, 1, 0, 0)),
        DonationRecord(amount_local=30.0, amount_foreign=3.0, timestamp=datetime(2025, 1, 15)),
    ]

    assert [b.month_key for b in aggregate_by_month(records)] == ["2023-12", "2024-01", "2025-01"]


def test_aggregate_by_month_empty_input():
    assert aggregate_by_month([]) == []
    assert summarize([]) == {
        "total_local": 0.0,
        "total_foreign": 0.0,
        "count": 0,
        "average": 0.0,
        "month_over_month_growth_percent": 0.0,
    }


def test_degenerate_amounts_count_as_zero_and_undated_records_are_skipped():
    records = [
        LooseRecord(-25.0, None, datetime(2024, 3, 2)),
        LooseRecord(None, "abc", datetime(2024, 3, 3)),
        LooseRecord(40.0, 1.25, datetime(2024, 3, 4)),
        LooseRecord(99.0, 3.0, None),
        LooseRecord(77.0, 2.0, pd.NaT),
        LooseRecord(float("nan"), float("inf"), datetime(2024, 3, 5)),
    ]

    frame = build_donation_frame(records)
    buckets = aggregate_by_month(records)

    assert len(frame) == 4
    assert buckets == [
        MonthlyAggregate(
            month_key="2024-03",
            total_local=40.0,
            total_foreign=1.25,
            count=4,
            period_start=date(2024, 3, 1),
        )
    ]


def test_summarize_reports_growth(sample_records):
    summary = summarize(sample_records)

    assert summary["total_local"] == pytest.approx(350.0)
    assert summary["count"] == 3
    assert summary["average"] == pytest.approx(350.0 / 3)
    assert summary["month_over_month_growth_percent"] == pytest.approx((50 - 300) / 300 * 100)


def test_month_over_month_growth_guards_zero_previous():
    buckets = [
        MonthlyAggregate("2024-01", 0.0, 0.0, 1, date(2024, 1, 1)),
        MonthlyAggregate("2024-02", 120.0, 4.0, 2, date(2024, 2, 1)),
    ]

    assert month_over_month_growth(buckets) == 0.0
    assert month_over_month_growth(buckets[1:]) == 0.0


def test_build_monthly_frame_fills_gaps():
    records = [
        DonationRecord(amount_local=100.0, amount_foreign=3.0, timestamp=datetime(2024, 1, 10)),
        DonationRecord(amount_local=60.0, amount_foreign=2.0, timestamp=datetime(2024, 4, 2)),
        DonationRecord(amount_local=40.0, amount_foreign=1.0, timestamp=datetime(2024, 4, 20)),
    ]
    buckets = aggregate_by_month(records)

    sparse = build_monthly_frame(buckets)
    dense = build_monthly_frame(buckets, fill_gaps=True)

    assert list(sparse["MonthKey"]) == ["2024-01", "2024-04"]
    assert list(dense["MonthKey"]) == ["2024-01", "2024-02", "2024-03", "2024-04"]
    assert list(dense["Count"]) == [1, 0, 0, 2]
    assert list(dense["Average"]) == pytest.approx([100.0, 0.0, 0.0, 50.0])
    assert dense["Month"].iloc[1] == pd.Timestamp("2024-02-01")


def test_build_monthly_frame_empty():
    frame = build_monthly_frame([], fill_gaps=True)

    assert frame.empty
    assert list(frame.columns) == ["Month", "MonthKey", "TotalLocal", "TotalForeign", "Count", "Average"]


@pytest.mark.parametrize(
    ("preset", "expected"),
    [
        (TimeRange.LAST_7_DAYS, (date(2024, 5, 8), date(2024, 5, 15))),
        ("30d", (date(2024, 4, 15), date(2024, 5, 15))),
        ("90d", (date(2024, 2, 15), date(2024, 5, 15))),
        ("6m", (date(2023, 11, 15), date(2024, 5, 15))),
        ("1y", (date(2023, 5, 15), date(2024, 5, 15))),
        ("tm", (date(2024, 5, 1), date(2024, 5, 31))),
        ("ty", (date(2024, 1, 1), date(2024, 12, 31))),
        ("ytd", (date(2024, 1, 1), date(2024, 5, 15))),
    ],
)
def test_resolve_time_range(preset, expected):
    assert resolve_time_range(preset, today=date(2024, 5, 15)) == expected


def test_resolve_time_range_clamps_month_end():
    assert resolve_time_range("6m", today=date(2024, 8, 31))[0] == date(2024, 2, 29)


def test_resolve_time_range_rejects_unknown_preset():
    with pytest.raises(ValueError):
        resolve_time_range("fortnight", today=date(2024, 5, 15))


def test_filter_by_time_range_is_inclusive(sample_records):
    kept = filter_by_time_range(sample_records, date(2024, 1, 20), date(2024, 2, 1))

    assert [r.amount_local for r in kept] == [200.0, 50.0]


def test_filter_by_time_range_skips_missing_timestamps(sample_records):
    records = [*sample_records, DonationRecord(amount_local=10.0, amount_foreign=0.3, timestamp=pd.NaT)]

    kept = filter_by_time_range(records, date(2024, 1, 1), date(2024, 12, 31))

    assert len(kept) == 3
    assert aggregate_by_month(records) == aggregate_by_month(sample_records)
