"""Analytics helpers shared across FoodBank Pulse services."""

from analytics.comparison import (
    FactorComparison,
    ResultComparison,
    RiskLevel,
    classify_concentration_risk,
    compare_factors,
    compare_results,
)
from analytics.debounce import DebouncedScenario, Debouncer
from analytics.donations import (
    TimeRange,
    aggregate_by_month,
    build_donation_frame,
    build_monthly_frame,
    filter_by_time_range,
    month_over_month_growth,
    resolve_time_range,
    summarize,
    summarize_buckets,
)
from analytics.scenario import ELASTICITIES, calculate_scenario, percent_change

__all__ = [
    "FactorComparison",
    "ResultComparison",
    "RiskLevel",
    "classify_concentration_risk",
    "compare_factors",
    "compare_results",
    "DebouncedScenario",
    "Debouncer",
    "TimeRange",
    "aggregate_by_month",
    "build_donation_frame",
    "build_monthly_frame",
    "filter_by_time_range",
    "month_over_month_growth",
    "resolve_time_range",
    "summarize",
    "summarize_buckets",
    "ELASTICITIES",
    "calculate_scenario",
    "percent_change",
]
