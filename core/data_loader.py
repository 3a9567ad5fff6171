"""Data loading utilities for exported donation files."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Final, Iterable, Mapping

import pandas as pd

from core.models import DonationRecord, DonationStatus

__all__ = ["load_donations", "parse_donation_payload", "records_from_rows", "rows_from_payload"]

logger = logging.getLogger(__name__)

_CACHE_SIZE: Final[int] = 8


def records_from_rows(
    rows: Iterable[Mapping[str, Any]],
    *,
    paid_only: bool = True,
) -> list[DonationRecord]:
    """Convert raw donation rows into records, skipping undated rows."""

    records: list[DonationRecord] = []
    skipped = 0
    for row in rows:
        try:
            record = DonationRecord.from_row(row)
        except ValueError:
            skipped += 1
            continue
        if paid_only and record.status is not DonationStatus.PAID:
            continue
        records.append(record)

    if skipped:
        logger.debug("Skipped donation rows without a usable date", extra={"skipped": skipped})
    return records


def rows_from_payload(payload: Any) -> list[Mapping[str, Any]]:
    """Normalise a proxy or Metabase response into a list of row mappings.

    The proxy returns a list of objects; the Metabase dataset endpoint returns
    ``{"data": {"rows": [[...]], "cols": [{"name": ...}]}}``.
    """

    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, Mapping)]
    if not isinstance(payload, Mapping):
        raise ValueError(f"Unsupported donation payload: {type(payload).__name__}")

    data = payload.get("data")
    if isinstance(data, list):
        return [row for row in data if isinstance(row, Mapping)]
    if not isinstance(data, Mapping):
        raise ValueError("Donation payload has no data section")

    cols = data.get("cols") or []
    rows = data.get("rows") or []
    if not isinstance(cols, list) or not all(isinstance(col, Mapping) for col in cols):
        raise ValueError("Donation dataset columns must be objects")
    if not isinstance(rows, list) or not all(isinstance(row, (list, tuple)) for row in rows):
        raise ValueError("Donation dataset rows must be arrays")

    names = [str(col.get("name")) for col in cols]
    return [dict(zip(names, row)) for row in rows]


def parse_donation_payload(payload: Any) -> list[DonationRecord]:
    return records_from_rows(rows_from_payload(payload))


@lru_cache(maxsize=_CACHE_SIZE)
def load_donations(path: str | Path) -> tuple[DonationRecord, ...]:
    """Return paid donations parsed from a CSV or JSON export.

    Results are cached to avoid redundant disk reads when the dashboard is
    rebuilt from the same export several times during a session.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Donation export not found: {path}")

    if path.suffix.lower() == ".json":
        rows = rows_from_payload(json.loads(path.read_text(encoding="utf-8")))
    else:
        df = pd.read_csv(path)
        df = df.astype(object).where(df.notna(), None)
        rows = df.to_dict(orient="records")

    records = records_from_rows(rows)
    logger.info("Loaded donation export", extra={"path": str(path), "records": len(records)})
    return tuple(records)
