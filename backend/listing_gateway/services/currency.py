import logging
import math
from datetime import datetime, timezone
from typing import Any

import httpx

from listing_gateway.schemas.listing import ExchangeRate

logger = logging.getLogger(__name__)


def _extract_rate(payload: Any, currency: str) -> float:
    rates = payload.get("conversion_rates") if isinstance(payload, dict) else None
    if not isinstance(rates, dict):
        raise ValueError("Quote response has no conversion_rates table")
    value = rates.get(currency)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Quote response has no numeric rate for {currency}")
    try:
        rate = float(value)
    except OverflowError as exc:
        raise ValueError(f"Quote response rate for {currency} is out of range") from exc
    if not math.isfinite(rate) or rate <= 0:
        raise ValueError(f"Quote response has an unusable rate for {currency}: {rate}")
    return rate


class CurrencyConverter:
    """Holds the active base -> target exchange rate.

    ``refresh_rate`` never raises: any failure resets the rate to the
    configured fallback constant so prices can still be rendered.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        quote_url: str,
        base: str = "USD",
        target: str = "PKR",
        fallback_rate: float = 278.41,
    ) -> None:
        self.client = client
        self.quote_url = quote_url
        self.base = base
        self.target = target
        self.fallback_rate = fallback_rate
        self._rate = self._fallback()

    @property
    def rate(self) -> ExchangeRate:
        return self._rate

    def _fallback(self) -> ExchangeRate:
        return ExchangeRate(base=self.base, target=self.target, rate=self.fallback_rate, source="fallback")

    async def refresh_rate(self) -> ExchangeRate:
        try:
            response = await self.client.get(self.quote_url)
            response.raise_for_status()
            value = _extract_rate(response.json(), self.target)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, RecursionError) as exc:
            logger.warning(
                "Failed to fetch %s to %s rate, using %s: %s",
                self.base,
                self.target,
                self.fallback_rate,
                exc,
            )
            self._rate = self._fallback()
            return self._rate

        self._rate = ExchangeRate(
            base=self.base,
            target=self.target,
            rate=value,
            source="live",
            fetched_at=datetime.now(timezone.utc),
        )
        logger.info("Updated exchange rate: 1 %s = %s %s", self.base, value, self.target)
        return self._rate
