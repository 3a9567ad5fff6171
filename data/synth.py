"""Synthetic donation generator for the FoodBank Pulse dashboard.

Produces paid donation records with the seasonal shape seen in the live feed:
giving peaks around Ramadan (March/April) and at year end, and slows over the
summer. Amounts follow a tiered size distribution from small one-off gifts to
rare major donations.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from core.models import DonationRecord, DonationStatus

DEFAULT_COUNT = 2500
DEFAULT_START = date(2024, 1, 1)
DEFAULT_CONVERSION_RATE = 31.2

CITIES: Tuple[str, ...] = ("Cairo", "Alexandria", "Giza", "Luxor", "Aswan")

# Month number -> giving multiplier.
SEASONAL_MULTIPLIERS: dict[int, float] = {
    3: 2.5,
    4: 2.5,
    12: 1.8,
    7: 0.7,
    8: 0.7,
}


@dataclass(frozen=True)
class DonationTier:
    """Share of donations falling in an EGP amount band."""

    name: str
    probability: float
    low: float
    high: float


DONATION_TIERS: Sequence[DonationTier] = (
    DonationTier("small", 0.60, 50.0, 300.0),
    DonationTier("medium", 0.25, 300.0, 1_000.0),
    DonationTier("large", 0.10, 1_000.0, 5_000.0),
    DonationTier("major", 0.05, 5_000.0, 25_000.0),
)


def seasonal_multiplier(month: int) -> float:
    return SEASONAL_MULTIPLIERS.get(month, 1.0)


def generate_mock_donations(
    count: int = DEFAULT_COUNT,
    *,
    start: date = DEFAULT_START,
    end: Optional[date] = None,
    seed: Optional[int] = None,
    conversion_rate: float = DEFAULT_CONVERSION_RATE,
) -> List[DonationRecord]:
    """Generate ``count`` paid donations dated uniformly in ``[start, end]``."""

    if count < 0:
        raise ValueError("count must not be negative")
    if conversion_rate <= 0:
        raise ValueError("conversion_rate must be positive")

    end = end or date.today()
    if end < start:
        raise ValueError("end must not precede start")

    rng = np.random.default_rng(seed)
    span_days = (end - start).days
    probabilities = np.array([tier.probability for tier in DONATION_TIERS])
    probabilities = probabilities / probabilities.sum()

    records: List[DonationRecord] = []
    for index in range(count):
        day = start + timedelta(days=int(rng.integers(0, span_days + 1)))
        moment = datetime.combine(day, time()) + timedelta(seconds=int(rng.integers(0, 86_400)))

        tier = DONATION_TIERS[int(rng.choice(len(DONATION_TIERS), p=probabilities))]
        base_amount = rng.uniform(tier.low, tier.high)
        amount_egp = round(base_amount * seasonal_multiplier(moment.month), 2)

        records.append(
            DonationRecord(
                amount_local=amount_egp,
                amount_foreign=round(amount_egp / conversion_rate, 2),
                timestamp=moment,
                status=DonationStatus.PAID,
                donation_id=index + 1,
                currency="EGP",
                program_id=int(rng.integers(1, 6)),
                city=CITIES[int(rng.integers(0, len(CITIES)))],
                payment_type="card" if rng.random() > 0.7 else "bank_transfer",
            )
        )

    records.sort(key=lambda record: record.timestamp)
    return records


def mock_donations_frame(records: Sequence[DonationRecord]) -> pd.DataFrame:
    """Return ``records`` in the proxy's column layout."""

    return pd.DataFrame(
        [
            {
                "id": record.donation_id,
                "amount_egp": record.amount_local,
                "amount_usd": record.amount_foreign,
                "currency": record.currency,
                "date": record.timestamp.isoformat(),
                "status": record.status.value,
                "program_id": record.program_id,
                "city": record.city,
                "payment_type": record.payment_type,
            }
            for record in records
        ]
    )


def write_donations_csv(path: str, *, seed: Optional[int] = None, **kwargs) -> pd.DataFrame:
    """Generate synthetic donations and persist them to ``path``.

    Additional keyword arguments are forwarded to
    :func:`generate_mock_donations`.
    """

    df = mock_donations_frame(generate_mock_donations(seed=seed, **kwargs))
    df.to_csv(path, index=False)
    return df
