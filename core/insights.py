"""Rule-based executive insights derived from operational metrics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from core.models import BaselineMetrics, CalculatedMetrics

__all__ = [
    "Impact",
    "Insight",
    "InsightKind",
    "build_executive_insights",
    "operating_margin",
]

INDUSTRY_EFFICIENCY_STANDARD = 75
EFFICIENCY_THRESHOLD = 80
COST_PER_MEAL_THRESHOLD = 7.0
PEOPLE_SERVED_THRESHOLD = 4_500_000
MEALS_THRESHOLD = 350_000_000
CONCENTRATION_THRESHOLD = 80
DEFAULT_REVENUE_CONCENTRATION = 99.0


class InsightKind(str, Enum):
    POSITIVE = "positive"
    WARNING = "warning"
    CRITICAL = "critical"
    NEUTRAL = "neutral"


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Insight:
    kind: InsightKind
    title: str
    description: str
    metric: str | None
    impact: Impact
    actionable: bool


def operating_margin(revenue: float, expenses: float) -> float:
    """Operating margin in percent; ``0.0`` without revenue."""

    if revenue <= 0:
        return 0.0
    return (revenue - expenses) / revenue * 100


def build_executive_insights(
    metrics: Union[BaselineMetrics, CalculatedMetrics],
    *,
    revenue_concentration: float = DEFAULT_REVENUE_CONCENTRATION,
) -> list[Insight]:
    insights: list[Insight] = []

    if metrics.program_efficiency >= EFFICIENCY_THRESHOLD:
        insights.append(
            Insight(
                kind=InsightKind.POSITIVE,
                title="Exceptional Program Efficiency",
                description=(
                    f"Program spending ratio of {metrics.program_efficiency:.0f}% exceeds the "
                    f"industry standard ({INDUSTRY_EFFICIENCY_STANDARD}%)."
                ),
                metric="Program Efficiency",
                impact=Impact.HIGH,
                actionable=False,
            )
        )

    if 0 < metrics.cost_per_meal < COST_PER_MEAL_THRESHOLD:
        insights.append(
            Insight(
                kind=InsightKind.POSITIVE,
                title="Outstanding Cost Efficiency",
                description=(
                    f"Cost per meal of EGP {metrics.cost_per_meal:.2f} keeps donor impact high."
                ),
                metric="Cost Per Meal",
                impact=Impact.HIGH,
                actionable=False,
            )
        )

    margin = operating_margin(metrics.revenue, metrics.expenses)
    if margin < 0:
        insights.append(
            Insight(
                kind=InsightKind.WARNING,
                title="Operating Deficit Requires Attention",
                description=(
                    f"Current {abs(margin):.1f}% deficit indicates expenses exceed revenue. "
                    "Consider diversifying funding sources and optimizing operational costs."
                ),
                metric="Operating Margin",
                impact=Impact.HIGH,
                actionable=True,
            )
        )

    if metrics.people_served > PEOPLE_SERVED_THRESHOLD:
        insights.append(
            Insight(
                kind=InsightKind.POSITIVE,
                title="Record-Breaking Impact Scale",
                description=f"Serving {metrics.people_served / 1_000_000:.2f}M people this year.",
                metric="Lives Impacted",
                impact=Impact.HIGH,
                actionable=False,
            )
        )

    if metrics.meals_delivered > MEALS_THRESHOLD:
        insights.append(
            Insight(
                kind=InsightKind.POSITIVE,
                title="Unprecedented Distribution Volume",
                description=f"{metrics.meals_delivered / 1_000_000:.1f}M meals delivered annually.",
                metric="Meals Delivered",
                impact=Impact.HIGH,
                actionable=False,
            )
        )

    if revenue_concentration > CONCENTRATION_THRESHOLD:
        insights.append(
            Insight(
                kind=InsightKind.WARNING,
                title="Revenue Concentration Risk",
                description=(
                    f"Top 1% of donors provide {revenue_concentration:.0f}% of funding. "
                    "Diversify the donor base to reduce dependency."
                ),
                metric="Revenue Diversification",
                impact=Impact.MEDIUM,
                actionable=True,
            )
        )

    return insights
