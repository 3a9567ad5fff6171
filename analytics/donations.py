"""Donation aggregation helpers: monthly buckets, summaries and time ranges."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional, Tuple

import pandas as pd

from core.models import DonationRecord, DonationSummary, MonthlyAggregate, coerce_amount

__all__ = [
    "TimeRange",
    "aggregate_by_month",
    "build_donation_frame",
    "build_monthly_frame",
    "filter_by_time_range",
    "month_over_month_growth",
    "resolve_time_range",
    "summarize",
    "summarize_buckets",
]

_FRAME_COLUMNS = ["date", "year", "month", "month_key", "amount_local", "amount_foreign"]
_MONTHLY_COLUMNS = ["Month", "MonthKey", "TotalLocal", "TotalForeign", "Count", "Average"]


def _is_bucketable(moment: object) -> bool:
    return isinstance(moment, date) and not pd.isna(moment)


def build_donation_frame(records: Iterable[DonationRecord]) -> pd.DataFrame:
    """Return one row per bucketable record with coerced amounts.

    Records without a usable timestamp are dropped; negative or missing
    amounts become ``0.0``.
    """

    rows: list[dict[str, object]] = []
    for record in records:
        moment = getattr(record, "timestamp", None)
        if not _is_bucketable(moment):
            continue
        rows.append(
            {
                "date": moment,
                "year": moment.year,
                "month": moment.month,
                "month_key": f"{moment.year:04d}-{moment.month:02d}",
                "amount_local": coerce_amount(getattr(record, "amount_local", None)),
                "amount_foreign": coerce_amount(getattr(record, "amount_foreign", None)),
            }
        )
    return pd.DataFrame(rows, columns=_FRAME_COLUMNS)


def aggregate_by_month(records: Iterable[DonationRecord]) -> list[MonthlyAggregate]:
    """Group donations into calendar-month buckets ordered chronologically.

    Months without donations produce no bucket; callers that need a
    continuous series should use :func:`build_monthly_frame` with
    ``fill_gaps=True``.
    """

    frame = build_donation_frame(records)
    if frame.empty:
        return []

    grouped = frame.groupby(["year", "month"], sort=True).agg(
        total_local=("amount_local", "sum"),
        total_foreign=("amount_foreign", "sum"),
        count=("amount_local", "size"),
    )

    buckets: list[MonthlyAggregate] = []
    for (year, month), row in grouped.iterrows():
        year, month = int(year), int(month)
        buckets.append(
            MonthlyAggregate(
                month_key=f"{year:04d}-{month:02d}",
                total_local=float(row["total_local"]),
                total_foreign=float(row["total_foreign"]),
                count=int(row["count"]),
                period_start=date(year, month, 1),
            )
        )
    return buckets


def month_over_month_growth(buckets: list[MonthlyAggregate]) -> float:
    """Percent change between the two latest buckets, ``0.0`` when undefined."""

    if len(buckets) < 2:
        return 0.0
    latest, previous = buckets[-1], buckets[-2]
    if previous.total_local == 0:
        return 0.0
    return (latest.total_local - previous.total_local) / previous.total_local * 100


def summarize(records: Iterable[DonationRecord]) -> DonationSummary:
    return summarize_buckets(aggregate_by_month(records))


def summarize_buckets(buckets: list[MonthlyAggregate]) -> DonationSummary:
    """Grand totals, average gift and month-over-month growth of ``buckets``."""

    count = sum(bucket.count for bucket in buckets)
    total_local = float(sum(bucket.total_local for bucket in buckets))
    total_foreign = float(sum(bucket.total_foreign for bucket in buckets))
    return {
        "total_local": total_local,
        "total_foreign": total_foreign,
        "count": count,
        "average": total_local / count if count > 0 else 0.0,
        "month_over_month_growth_percent": month_over_month_growth(buckets),
    }


def build_monthly_frame(
    buckets: list[MonthlyAggregate],
    *,
    fill_gaps: bool = False,
) -> pd.DataFrame:
    """Return a chart-ready frame of monthly totals.

    With ``fill_gaps`` every month between the first and last bucket is
    present, missing months carrying zero totals.
    """

    if not buckets:
        return pd.DataFrame(columns=_MONTHLY_COLUMNS)

    frame = pd.DataFrame(
        {
            "TotalLocal": [bucket.total_local for bucket in buckets],
            "TotalForeign": [bucket.total_foreign for bucket in buckets],
            "Count": [bucket.count for bucket in buckets],
        },
        index=pd.PeriodIndex([bucket.month_key for bucket in buckets], freq="M"),
    )

    if fill_gaps:
        full_index = pd.period_range(frame.index.min(), frame.index.max(), freq="M")
        frame = frame.reindex(full_index, fill_value=0)

    frame["TotalLocal"] = frame["TotalLocal"].astype(float)
    frame["TotalForeign"] = frame["TotalForeign"].astype(float)
    frame["Count"] = frame["Count"].astype(int)
    counts = frame["Count"].where(frame["Count"] > 0)
    frame["Average"] = (frame["TotalLocal"] / counts).fillna(0.0)
    frame["MonthKey"] = [str(period) for period in frame.index]
    frame["Month"] = frame.index.to_timestamp(how="start")
    return frame.reset_index(drop=True)[_MONTHLY_COLUMNS]


class TimeRange(str, Enum):
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_6_MONTHS = "6m"
    LAST_YEAR = "1y"
    THIS_MONTH = "tm"
    THIS_YEAR = "ty"
    YEAR_TO_DATE = "ytd"


def resolve_time_range(preset: TimeRange | str, today: Optional[date] = None) -> Tuple[date, date]:
    """Return the inclusive ``(start, end)`` dates for a preset."""

    try:
        preset = TimeRange(preset)
    except ValueError as exc:
        raise ValueError(f"Unknown time range preset: {preset!r}") from exc

    today = today or date.today()
    if preset is TimeRange.LAST_7_DAYS:
        return today - timedelta(days=7), today
    if preset is TimeRange.LAST_30_DAYS:
        return today - timedelta(days=30), today
    if preset is TimeRange.LAST_90_DAYS:
        return today - timedelta(days=90), today
    if preset is TimeRange.LAST_6_MONTHS:
        return _shift_months(today, -6), today
    if preset is TimeRange.LAST_YEAR:
        return _shift_months(today, -12), today
    if preset is TimeRange.THIS_MONTH:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    if preset is TimeRange.THIS_YEAR:
        return date(today.year, 1, 1), date(today.year, 12, 31)
    return date(today.year, 1, 1), today


def filter_by_time_range(
    records: Iterable[DonationRecord],
    start: date,
    end: date,
) -> list[DonationRecord]:
    """Keep records whose calendar date lies within ``[start, end]``."""

    kept: list[DonationRecord] = []
    for record in records:
        moment = getattr(record, "timestamp", None)
        if not _is_bucketable(moment):
            continue
        day = moment.date() if isinstance(moment, datetime) else moment
        if start <= day <= end:
            kept.append(record)
    return kept


def _shift_months(anchor: date, months: int) -> date:
    month = anchor.month - 1 + months
    year = anchor.year + month // 12
    month = month % 12 + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
