"""Time-windowed cache in front of the faucet wallet balance query."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from faucet.domain.claims.exceptions import DistributorError, UpstreamUnavailableError
from faucet.domain.gateways import Distributor

logger = logging.getLogger(__name__)

BALANCE_CACHE_WINDOW = 60.0


@dataclass(slots=True, frozen=True)
class BalanceReading:
    amount: float
    cached: bool


class BalanceCache:
    """Process-wide cached balance, created once and shared by all requests.

    Readers that find a fresh value return without waiting. A stale or empty
    entry is refreshed under ``_lock``; callers queued behind a refresh
    re-check freshness once they get the lock, so a burst of misses costs a
    single upstream query per window.
    """

    def __init__(
        self,
        distributor: Distributor,
        window: float = BALANCE_CACHE_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._distributor = distributor
        self._window = window
        self._clock = clock
        self._lock = asyncio.Lock()
        self._value: float | None = None
        self._fetched_at: float | None = None

    def _fresh_value(self) -> float | None:
        if self._value is None or self._fetched_at is None:
            return None
        if self._clock() - self._fetched_at >= self._window:
            return None
        return self._value

    async def get_balance(self) -> BalanceReading:
        value = self._fresh_value()
        if value is not None:
            logger.debug("Returning cached balance: %f SOL", value)
            return BalanceReading(amount=value, cached=True)

        async with self._lock:
            value = self._fresh_value()
            if value is not None:
                logger.debug("Another request refreshed the cache, returning %f SOL", value)
                return BalanceReading(amount=value, cached=True)

            logger.info("Fetching fresh faucet balance")
            try:
                amount = await self._distributor.query_balance()
            except DistributorError as exc:
                logger.error("Error getting faucet balance: %s", exc)
                raise UpstreamUnavailableError("Failed to get balance") from exc

            self._value = amount
            self._fetched_at = self._clock()
            return BalanceReading(amount=amount, cached=False)
