"""Core domain package for FoodBank Pulse."""

from .exceptions import DonationFeedError, FoodBankError, ScenarioNotFoundError
from .models import (
    DEFAULT_BASELINE,
    BaselineMetrics,
    CalculatedMetrics,
    DonationRecord,
    DonationStatus,
    DonationSummary,
    MetricFormat,
    MonthlyAggregate,
    ScenarioFactors,
    UserId,
    new_user_id,
)

__all__ = [
    "DEFAULT_BASELINE",
    "BaselineMetrics",
    "CalculatedMetrics",
    "DonationFeedError",
    "DonationRecord",
    "DonationStatus",
    "DonationSummary",
    "FoodBankError",
    "MetricFormat",
    "MonthlyAggregate",
    "ScenarioFactors",
    "ScenarioNotFoundError",
    "UserId",
    "new_user_id",
]
