"""Econometric scenario model mapping economic factors onto operational metrics.

Every adjusted metric is the baseline value scaled by ``1 + weighted_sum / 100``
where the weighted sum combines the factors that drive it. Weights are fixed
elasticities: one point of a factor moves the metric by ``weight`` percent.

Meals delivered is derived from the adjusted revenue, efficiency and cost per
meal so the four stay consistent with each other; people served follows meals
at the baseline meals-per-person ratio; reserves and cash absorb a share of the
change in operating surplus.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping

from core.models import METRIC_NAMES, BaselineMetrics, CalculatedMetrics, ScenarioFactors, coerce_finite

__all__ = [
    "ELASTICITIES",
    "calculate_scenario",
    "percent_change",
]


_REVENUE_WEIGHTS = {
    "donor_sentiment": 0.60,
    "economic_growth": 0.40,
    "corporate_csr": 0.30,
    "government_support": 0.25,
    "inflation_rate": -0.20,
    "unemployment_rate": -0.15,
    "regional_shock": -0.30,
}

_EXPENSE_WEIGHTS = {
    "food_prices": 0.45,
    "logistics_cost_index": 0.20,
    "exchange_rate": 0.15,
    "inflation_rate": 0.20,
    "operational_efficiency": -0.30,
}

_COST_PER_MEAL_WEIGHTS = {
    "food_prices": 0.60,
    "logistics_cost_index": 0.25,
    "exchange_rate": 0.20,
    "inflation_rate": 0.10,
    "operational_efficiency": -0.35,
    "regional_shock": 0.20,
}

_EFFICIENCY_WEIGHTS = {
    "operational_efficiency": 0.25,
    "regional_shock": -0.10,
}

_DEMAND_WEIGHTS = {
    "unemployment_rate": 0.50,
    "food_prices": 0.30,
    "inflation_rate": 0.20,
    "regional_shock": 0.40,
    "economic_growth": -0.20,
}

ELASTICITIES: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {
        "revenue": MappingProxyType(_REVENUE_WEIGHTS),
        "expenses": MappingProxyType(_EXPENSE_WEIGHTS),
        "cost_per_meal": MappingProxyType(_COST_PER_MEAL_WEIGHTS),
        "program_efficiency": MappingProxyType(_EFFICIENCY_WEIGHTS),
        "demand": MappingProxyType(_DEMAND_WEIGHTS),
    }
)

# Donor sentiment and growth reinforce each other only when both are positive.
_SENTIMENT_GROWTH_SYNERGY = 0.002

# Cost per meal never drops below 5% of baseline.
_MIN_COST_MULTIPLIER = 0.05

_RESERVE_SHARE = 0.50
_CASH_SHARE = 0.75


def percent_change(adjusted: float, baseline: float) -> float:
    """Return the percent deviation of ``adjusted`` from ``baseline``.

    A zero or negative baseline yields ``0.0``.
    """

    if baseline <= 0:
        return 0.0
    change = (adjusted - baseline) / baseline * 100
    return change if math.isfinite(change) else 0.0


def _weighted_sum(factors: ScenarioFactors, weights: Mapping[str, float]) -> float:
    return sum(weight * coerce_finite(getattr(factors, name)) for name, weight in weights.items())


def _multiplier(weighted_sum: float, floor: float = 0.0) -> float:
    return max(floor, 1 + weighted_sum / 100)


def _ratio(adjusted: float, baseline: float) -> float:
    if baseline <= 0:
        return 1.0
    return adjusted / baseline


def _efficiency_ceiling(baseline_value: float) -> float:
    bound = 1.0 if baseline_value <= 1 else 100.0
    return max(bound, baseline_value)


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def calculate_scenario(baseline: BaselineMetrics, factors: ScenarioFactors) -> CalculatedMetrics:
    """Apply ``factors`` to ``baseline`` and return adjusted metrics with deltas.

    The function is pure: neither argument is modified and the same inputs
    always produce the same result. All-zero factors return the baseline
    unchanged with every change at ``0``.
    """

    base = BaselineMetrics(**{name: coerce_finite(getattr(baseline, name)) for name in METRIC_NAMES})

    donor_sentiment = coerce_finite(factors.donor_sentiment)
    economic_growth = coerce_finite(factors.economic_growth)
    synergy = _SENTIMENT_GROWTH_SYNERGY * max(donor_sentiment, 0.0) * max(economic_growth, 0.0)

    revenue = base.revenue * _multiplier(_weighted_sum(factors, _REVENUE_WEIGHTS) + synergy)
    expenses = base.expenses * _multiplier(_weighted_sum(factors, _EXPENSE_WEIGHTS))
    cost_per_meal = base.cost_per_meal * _multiplier(
        _weighted_sum(factors, _COST_PER_MEAL_WEIGHTS), floor=_MIN_COST_MULTIPLIER
    )

    efficiency = base.program_efficiency * _multiplier(_weighted_sum(factors, _EFFICIENCY_WEIGHTS))
    efficiency = min(max(efficiency, 0.0), _efficiency_ceiling(base.program_efficiency))

    meals_ratio = (
        _ratio(revenue, base.revenue)
        * _ratio(efficiency, base.program_efficiency)
        / _ratio(cost_per_meal, base.cost_per_meal)
    )
    meals_delivered = base.meals_delivered * meals_ratio
    people_served = base.people_served * meals_ratio

    surplus_delta = (revenue - expenses) - (base.revenue - base.expenses)
    reserves = max(0.0, base.reserves + _RESERVE_SHARE * surplus_delta)
    cash_position = max(0.0, base.cash_position + _CASH_SHARE * surplus_delta)

    adjusted = {
        "meals_delivered": _finite(meals_delivered),
        "people_served": _finite(people_served),
        "cost_per_meal": _finite(cost_per_meal),
        "program_efficiency": _finite(efficiency),
        "revenue": _finite(revenue),
        "expenses": _finite(expenses),
        "reserves": _finite(reserves),
        "cash_position": _finite(cash_position),
    }
    changes = {
        f"{name}_change": percent_change(value, getattr(base, name))
        for name, value in adjusted.items()
    }
    demand_change = _finite(_weighted_sum(factors, _DEMAND_WEIGHTS))

    return CalculatedMetrics(**adjusted, **changes, demand_change=demand_change)
