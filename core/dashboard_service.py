"""Core logic for assembling FoodBank Pulse dashboard data."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, TypedDict

import pandas as pd

from analytics.donations import (
    TimeRange,
    aggregate_by_month,
    build_monthly_frame,
    filter_by_time_range,
    resolve_time_range,
    summarize_buckets,
)
from analytics.scenario import calculate_scenario
from core.insights import Insight, build_executive_insights
from core.models import (
    DEFAULT_BASELINE,
    BaselineMetrics,
    CalculatedMetrics,
    DonationRecord,
    DonationSummary,
    MonthlyAggregate,
    ScenarioFactors,
)

__all__ = ["DashboardData", "prepare_dashboard_data"]


class DashboardData(TypedDict):
    monthly_aggregates: list[MonthlyAggregate]
    monthly_df: pd.DataFrame
    donation_summary: DonationSummary
    metrics: CalculatedMetrics
    insights: list[Insight]
    period_label: str


def prepare_dashboard_data(
    records: Iterable[DonationRecord],
    baseline: BaselineMetrics = DEFAULT_BASELINE,
    factors: Optional[ScenarioFactors] = None,
    *,
    time_range: TimeRange | str | None = None,
    today: Optional[date] = None,
    fill_gaps: bool = True,
) -> DashboardData:
    records = list(records)
    period_label = "All time"
    if time_range is not None:
        start, end = resolve_time_range(time_range, today)
        records = filter_by_time_range(records, start, end)
        period_label = f"{start:%d %b %Y} - {end:%d %b %Y}"

    buckets = aggregate_by_month(records)
    metrics = calculate_scenario(baseline, factors or ScenarioFactors())

    return {
        "monthly_aggregates": buckets,
        "monthly_df": build_monthly_frame(buckets, fill_gaps=fill_gaps),
        "donation_summary": summarize_buckets(buckets),
        "metrics": metrics,
        "insights": build_executive_insights(metrics),
        "period_label": period_label,
    }
