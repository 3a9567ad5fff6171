"""Side-by-side comparison of saved scenarios."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from analytics.scenario import percent_change
from core.formatting import metric_label
from core.models import (
    FACTOR_NAMES,
    METRIC_FORMATS,
    METRIC_NAMES,
    BaselineMetrics,
    MetricFormat,
    ScenarioFactors,
)

__all__ = [
    "FactorComparison",
    "ResultComparison",
    "RiskLevel",
    "classify_concentration_risk",
    "compare_factors",
    "compare_results",
]


@dataclass(frozen=True)
class FactorComparison:
    factor: str
    label: str
    first: float
    second: float
    difference: float


@dataclass(frozen=True)
class ResultComparison:
    metric: str
    label: str
    first: float
    second: float
    difference: float
    percent_difference: float
    format: MetricFormat


def compare_factors(first: ScenarioFactors, second: ScenarioFactors) -> list[FactorComparison]:
    rows: list[FactorComparison] = []
    for name in FACTOR_NAMES:
        a = float(getattr(first, name))
        b = float(getattr(second, name))
        rows.append(FactorComparison(name, metric_label(name), a, b, a - b))
    return rows


def compare_results(first: BaselineMetrics, second: BaselineMetrics) -> list[ResultComparison]:
    """Compare two result snapshots metric by metric.

    ``percent_difference`` is relative to ``second`` and ``0.0`` when that
    value is not positive.
    """

    rows: list[ResultComparison] = []
    for name in METRIC_NAMES:
        a = float(getattr(first, name))
        b = float(getattr(second, name))
        rows.append(
            ResultComparison(
                metric=name,
                label=metric_label(name),
                first=a,
                second=b,
                difference=a - b,
                percent_difference=percent_change(a, b),
                format=METRIC_FORMATS[name],
            )
        )
    return rows


class RiskLevel(str, Enum):
    SAFE = "safe"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


def classify_concentration_risk(percent: float) -> RiskLevel:
    if percent >= 90:
        return RiskLevel.CRITICAL
    if percent >= 75:
        return RiskLevel.HIGH
    if percent >= 60:
        return RiskLevel.MODERATE
    return RiskLevel.SAFE
