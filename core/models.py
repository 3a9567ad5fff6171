"""Shared data model definitions for FoodBank Pulse."""

from __future__ import annotations

import math
import secrets
import string
import time
from dataclasses import asdict, dataclass, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, NewType, TypedDict

import pandas as pd

UserId = NewType("UserId", str)

_BASE36 = string.digits + string.ascii_lowercase


def new_user_id() -> UserId:
    """Return a fresh opaque user identifier (``user_<ms>_<random>``)."""

    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return UserId(f"user_{int(time.time() * 1000)}_{suffix}")


def coerce_amount(value: Any) -> float:
    """Return ``value`` as a non-negative finite float, ``0.0`` otherwise."""

    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def coerce_finite(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class DonationStatus(str, Enum):
    PAID = "paid"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "DonationStatus":
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.PAID.value:
            return cls.PAID
        return cls.OTHER


class MetricFormat(str, Enum):
    NUMBER = "number"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string, date or datetime into a ``datetime``.

    Raises ``ValueError`` when the value cannot be interpreted as a date.
    """

    if isinstance(value, datetime):
        if pd.isna(value):
            raise ValueError("Donation row has no date")
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("Donation row has no date")
    try:
        parsed = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unsupported date value: {value!r}") from exc
    if pd.isna(parsed):
        raise ValueError(f"Unsupported date value: {value!r}")
    return parsed.to_pydatetime()


@dataclass(frozen=True)
class DonationRecord:
    amount_local: float
    amount_foreign: float
    timestamp: datetime
    status: DonationStatus = DonationStatus.PAID
    donation_id: int | None = None
    currency: str = "EGP"
    program_id: int | None = None
    city: str | None = None
    payment_type: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DonationRecord":
        """Build a record from a raw proxy or Metabase row.

        Amounts are coerced to non-negative floats. The ``date`` column is
        mandatory; a missing or unparseable date raises ``ValueError``. A missing
        or empty status counts as paid.
        """

        return cls(
            amount_local=coerce_amount(row.get("amount_egp", row.get("amount_local"))),
            amount_foreign=coerce_amount(row.get("amount_usd", row.get("amount_foreign"))),
            timestamp=parse_timestamp(row.get("date", row.get("timestamp"))),
            status=DonationStatus.parse(row.get("status") or DonationStatus.PAID.value),
            donation_id=_optional_int(row.get("id", row.get("donation_id"))),
            currency=str(row.get("currency") or "EGP"),
            program_id=_optional_int(row.get("program_id")),
            city=row.get("city") or None,
            payment_type=row.get("payment_type") or None,
        )


def _optional_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class MonthlyAggregate:
    month_key: str
    total_local: float
    total_foreign: float
    count: int
    period_start: date

    @property
    def average_per_record(self) -> float:
        if self.count <= 0:
            return 0.0
        return self.total_local / self.count


class DonationSummary(TypedDict):
    total_local: float
    total_foreign: float
    count: int
    average: float
    month_over_month_growth_percent: float


# Persisted (camelCase) key for each factor, followed by accepted aliases.
_FACTOR_KEYS: dict[str, tuple[str, ...]] = {
    "economic_growth": ("economicGrowth",),
    "inflation_rate": ("inflationRate",),
    "donor_sentiment": ("donorSentiment",),
    "operational_efficiency": ("operationalEfficiency",),
    "food_prices": ("foodPrices",),
    "unemployment_rate": ("unemploymentRate",),
    "corporate_csr": ("corporateCSR", "corporateCsr"),
    "government_support": ("governmentSupport",),
    "exchange_rate": ("exchangeRate", "exchangeRateEGP"),
    "logistics_cost_index": ("logisticsCostIndex", "logisticsCost"),
    "regional_shock": ("regionalShock",),
}


@dataclass(frozen=True)
class ScenarioFactors:
    """Signed percent deviations from a neutral economic baseline."""

    economic_growth: float = 0.0
    inflation_rate: float = 0.0
    donor_sentiment: float = 0.0
    operational_efficiency: float = 0.0
    food_prices: float = 0.0
    unemployment_rate: float = 0.0
    corporate_csr: float = 0.0
    government_support: float = 0.0
    exchange_rate: float = 0.0
    logistics_cost_index: float = 0.0
    regional_shock: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScenarioFactors":
        values: dict[str, float] = {}
        for name, aliases in _FACTOR_KEYS.items():
            for key in (name, *aliases):
                if key in data:
                    values[name] = coerce_finite(data[key])
                    break
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        return {aliases[0]: float(getattr(self, name)) for name, aliases in _FACTOR_KEYS.items()}

    def is_neutral(self) -> bool:
        return all(getattr(self, field.name) == 0 for field in fields(self))


FACTOR_NAMES: tuple[str, ...] = tuple(_FACTOR_KEYS)


_METRIC_KEYS: dict[str, str] = {
    "meals_delivered": "mealsDelivered",
    "people_served": "peopleServed",
    "cost_per_meal": "costPerMeal",
    "program_efficiency": "programEfficiency",
    "revenue": "revenue",
    "expenses": "expenses",
    "reserves": "reserves",
    "cash_position": "cashPosition",
}

METRIC_NAMES: tuple[str, ...] = tuple(_METRIC_KEYS)

METRIC_FORMATS: dict[str, MetricFormat] = {
    "meals_delivered": MetricFormat.NUMBER,
    "people_served": MetricFormat.NUMBER,
    "cost_per_meal": MetricFormat.CURRENCY,
    "program_efficiency": MetricFormat.PERCENTAGE,
    "revenue": MetricFormat.CURRENCY,
    "expenses": MetricFormat.CURRENCY,
    "reserves": MetricFormat.CURRENCY,
    "cash_position": MetricFormat.CURRENCY,
}


@dataclass(frozen=True)
class BaselineMetrics:
    meals_delivered: float = 0.0
    people_served: float = 0.0
    cost_per_meal: float = 0.0
    program_efficiency: float = 0.0
    revenue: float = 0.0
    expenses: float = 0.0
    reserves: float = 0.0
    cash_position: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BaselineMetrics":
        values: dict[str, float] = {}
        for name, camel in _METRIC_KEYS.items():
            for key in (name, camel):
                if key in data:
                    values[name] = coerce_finite(data[key])
                    break
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        return {camel: float(getattr(self, name)) for name, camel in _METRIC_KEYS.items()}


DEFAULT_BASELINE = BaselineMetrics(
    meals_delivered=367_490_721,
    people_served=4_960_000,
    cost_per_meal=6.36,
    program_efficiency=83,
    revenue=2_200_000_000,
    expenses=2_316_000_000,
    reserves=731_200_000,
    cash_position=459_800_000,
)


@dataclass(frozen=True)
class CalculatedMetrics:
    meals_delivered: float
    people_served: float
    cost_per_meal: float
    program_efficiency: float
    revenue: float
    expenses: float
    reserves: float
    cash_position: float
    meals_delivered_change: float = 0.0
    people_served_change: float = 0.0
    cost_per_meal_change: float = 0.0
    program_efficiency_change: float = 0.0
    revenue_change: float = 0.0
    expenses_change: float = 0.0
    reserves_change: float = 0.0
    cash_position_change: float = 0.0
    demand_change: float = 0.0

    @classmethod
    def unchanged(cls, baseline: BaselineMetrics) -> "CalculatedMetrics":
        return cls(**{name: getattr(baseline, name) for name in METRIC_NAMES})

    def to_baseline(self) -> BaselineMetrics:
        return BaselineMetrics(**{name: getattr(self, name) for name in METRIC_NAMES})

    def change_for(self, metric: str) -> float:
        return float(getattr(self, f"{metric}_change"))

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


__all__ = [
    "UserId",
    "new_user_id",
    "coerce_amount",
    "coerce_finite",
    "parse_timestamp",
    "DonationStatus",
    "MetricFormat",
    "DonationRecord",
    "MonthlyAggregate",
    "DonationSummary",
    "ScenarioFactors",
    "FACTOR_NAMES",
    "BaselineMetrics",
    "DEFAULT_BASELINE",
    "METRIC_NAMES",
    "METRIC_FORMATS",
    "CalculatedMetrics",
]
