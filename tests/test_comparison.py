"""Tests for scenario comparison and concentration risk."""

from __future__ import annotations

import pytest

from analytics.comparison import (
    RiskLevel,
    classify_concentration_risk,
    compare_factors,
    compare_results,
)
from core.models import DEFAULT_BASELINE, BaselineMetrics, MetricFormat, ScenarioFactors


def test_compare_factors_lists_every_factor():
    rows = compare_factors(ScenarioFactors(food_prices=12, corporate_csr=-3), ScenarioFactors(food_prices=5))
    by_name = {row.factor: row for row in rows}

    assert len(rows) == 11
    assert by_name["food_prices"].difference == pytest.approx(7)
    assert by_name["food_prices"].label == "Food Prices"
    assert by_name["corporate_csr"].label == "Corporate CSR"
    assert by_name["corporate_csr"].difference == pytest.approx(-3)
    assert by_name["inflation_rate"].difference == 0


def test_compare_results_reports_relative_difference():
    higher = BaselineMetrics(meals_delivered=110, cost_per_meal=5.0, program_efficiency=90)
    lower = BaselineMetrics(meals_delivered=100, cost_per_meal=0.0, program_efficiency=80)

    rows = {row.metric: row for row in compare_results(higher, lower)}

    assert rows["meals_delivered"].difference == pytest.approx(10)
    assert rows["meals_delivered"].percent_difference == pytest.approx(10)
    assert rows["meals_delivered"].format is MetricFormat.NUMBER
    assert rows["cost_per_meal"].percent_difference == 0.0
    assert rows["cost_per_meal"].format is MetricFormat.CURRENCY
    assert rows["program_efficiency"].format is MetricFormat.PERCENTAGE


def test_compare_results_identical_snapshots():
    rows = compare_results(DEFAULT_BASELINE, DEFAULT_BASELINE)

    assert all(row.difference == 0 and row.percent_difference == 0 for row in rows)


@pytest.mark.parametrize(
    ("percent", "level"),
    [
        (99.0, RiskLevel.CRITICAL),
        (90.0, RiskLevel.CRITICAL),
        (89.9, RiskLevel.HIGH),
        (75.0, RiskLevel.HIGH),
        (60.0, RiskLevel.MODERATE),
        (59.9, RiskLevel.SAFE),
        (0.0, RiskLevel.SAFE),
    ],
)
def test_classify_concentration_risk(percent, level):
    assert classify_concentration_risk(percent) is level
