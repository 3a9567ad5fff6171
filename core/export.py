"""CSV and JSON export of executive metrics."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Optional, Union

import pandas as pd

from core.formatting import format_change, format_compact, metric_label
from core.models import METRIC_NAMES, BaselineMetrics, CalculatedMetrics

__all__ = ["EXPORT_COLUMNS", "export_csv", "export_json", "metrics_export_frame"]

EXPORT_COLUMNS = ["Metric", "Value", "Change", "Status"]
DEFAULT_TITLE = "EFB Executive Metrics"


def metrics_export_frame(metrics: Union[BaselineMetrics, CalculatedMetrics]) -> pd.DataFrame:
    rows: list[dict[str, str]] = []
    for name in METRIC_NAMES:
        value = float(getattr(metrics, name))
        if isinstance(metrics, CalculatedMetrics):
            change = metrics.change_for(name)
            change_label = format_change(change)
            status = "Normal" if change == 0 else ("Up" if change > 0 else "Down")
        else:
            change_label = "N/A"
            status = "Normal"
        rows.append(
            {
                "Metric": metric_label(name),
                "Value": format_compact(value),
                "Change": change_label,
                "Status": status,
            }
        )
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def _generated_at(moment: Optional[datetime]) -> str:
    return (moment or datetime.now(timezone.utc)).isoformat()


def export_csv(
    frame: pd.DataFrame,
    *,
    title: str = DEFAULT_TITLE,
    generated_at: Optional[datetime] = None,
    period: Optional[str] = None,
) -> str:
    """Return CSV text preceded by ``#`` metadata lines."""

    header = [f"# {title}", f"# Generated: {_generated_at(generated_at)}"]
    if period:
        header.append(f"# Period: {period}")
    return "\n".join(header) + "\n\n" + frame.to_csv(index=False)


def export_json(
    frame: pd.DataFrame,
    *,
    title: str = DEFAULT_TITLE,
    generated_at: Optional[datetime] = None,
    period: Optional[str] = None,
) -> str:
    metadata: dict[str, str] = {"generatedAt": _generated_at(generated_at)}
    if period:
        metadata["period"] = period
    document = {
        "title": title,
        "metadata": metadata,
        "data": frame.to_dict(orient="records"),
    }
    return json.dumps(document, indent=2, default=str)
