"""Formatting helpers for FoodBank Pulse metrics."""

from __future__ import annotations

import math
import re

from core.models import MetricFormat

__all__ = [
    "CURRENCY_CODE",
    "format_change",
    "format_compact",
    "format_metric",
    "metric_label",
]

CURRENCY_CODE = "EGP"

_LABEL_OVERRIDES = {
    "corporate_csr": "Corporate CSR",
}


def metric_label(name: str) -> str:
    """Turn ``food_prices`` or ``foodPrices`` into ``Food Prices``."""

    if name in _LABEL_OVERRIDES:
        return _LABEL_OVERRIDES[name]
    spaced = re.sub(r"(?<=[a-z0-9])([A-Z])", r" \1", name).replace("_", " ")
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())


def format_metric(value: float, fmt: MetricFormat, *, currency: str = CURRENCY_CODE) -> str:
    if not math.isfinite(value):
        value = 0.0
    fmt = MetricFormat(fmt)
    if fmt is MetricFormat.NUMBER:
        return f"{value:,.0f}"
    if fmt is MetricFormat.CURRENCY:
        return f"{currency} {value:,.2f}"
    if fmt is MetricFormat.PERCENTAGE:
        return f"{value:.1f}%"
    raise ValueError(f"Unsupported metric format: {fmt!r}")


def format_compact(value: float) -> str:
    if value > 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    if value > 1_000:
        return f"{value / 1_000:.2f}K"
    return f"{value:.2f}"


def format_change(change: float) -> str:
    if not math.isfinite(change):
        change = 0.0
    sign = "+" if change > 0 else ""
    return f"{sign}{change:.1f}%"
