"""Donation feed client: live proxy with retry and mock fallback."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

import httpx

from config import Settings, get_settings
from core.data_loader import parse_donation_payload
from core.exceptions import DonationFeedError
from core.models import DonationRecord
from data.synth import generate_mock_donations

__all__ = ["DonationFeedClient", "fetch_donations"]

logger = logging.getLogger(__name__)


class DonationFeedClient:
    """Client for the donations proxy in front of the BI dataset endpoint."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
        fallback: Optional[Callable[[], List[DonationRecord]]] = generate_mock_donations,
    ) -> None:
        self.settings = settings or get_settings()
        self._http_client = http_client
        self._sleep = sleep
        self._fallback = fallback

    def fetch(self) -> List[DonationRecord]:
        """Return paid donations, falling back to mock data when the feed is down."""

        try:
            return self.fetch_live()
        except DonationFeedError as exc:
            if not self.settings.use_mock_fallback or self._fallback is None:
                raise
            logger.warning(
                "Falling back to mock donation data",
                extra={"reason": str(exc), "url": self.settings.donations_proxy_url},
            )
            return self._fallback()

    def fetch_live(self) -> List[DonationRecord]:
        """Fetch from the proxy with bounded exponential backoff.

        Retry strategy:
        - ``feed_max_retries`` retries after the first attempt
        - delays of base, 2*base, 4*base ... capped at ``feed_backoff_cap_seconds``
        - retries on network failures, HTTP errors and undecodable bodies

        Raises:
            DonationFeedError: when every attempt failed
        """

        attempts = self.settings.feed_max_retries + 1
        last_error: Optional[Exception] = None
        for attempt in range(attempts):
            try:
                return self._fetch_once()
            except (httpx.HTTPError, ValueError) as exc:
                last_error = exc
                logger.info(
                    "Donation feed attempt failed",
                    extra={"attempt": attempt + 1, "attempts": attempts, "error": str(exc)},
                )
                if attempt + 1 < attempts:
                    self._sleep(self.settings.backoff_delay(attempt))

        raise DonationFeedError(
            f"Donation feed unavailable after {attempts} attempts: {last_error}"
        ) from last_error

    def _fetch_once(self) -> List[DonationRecord]:
        if self._http_client is not None:
            response = self._http_client.get(self.settings.donations_proxy_url)
        else:
            with httpx.Client(**self.settings.http_client_kwargs) as client:
                response = client.get(self.settings.donations_proxy_url)
        response.raise_for_status()

        records = parse_donation_payload(response.json())
        logger.info("Fetched donations via proxy", extra={"records": len(records)})
        return records


def fetch_donations(settings: Optional[Settings] = None) -> List[DonationRecord]:
    return DonationFeedClient(settings).fetch()
