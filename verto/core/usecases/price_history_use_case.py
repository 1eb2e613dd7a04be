import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from ..domain.validators import ensure_valid_hash
from ..repositories.cache_repository import CacheRepository
from ..services.price_aggregation_service import DAY, PriceAggregationService


class PriceHistoryUseCase:
    """
    Price and volume series for a token, computed client-side from the
    cache order log.
    """

    def __init__(
        self,
        cache: CacheRepository,
        aggregator: PriceAggregationService,
        max_lookback_days: int = 30,
        logger: logging.Logger | None = None,
    ):
        self._cache = cache
        self._aggregator = aggregator
        self._max_lookback_days = max_lookback_days
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _now(now: Optional[datetime]) -> datetime:
        return now or datetime.now(timezone.utc)

    async def latest_price(self, token_id: str, now: Optional[datetime] = None) -> Optional[float]:
        """
        Average price of the most recent day that has priced orders, walking
        back one day at a time for at most `max_lookback_days` days.

        :return: Price in native units per token, or None if nothing was found.
        """
        ensure_valid_hash(token_id, "token id")
        high = self._aggregator.next_midnight(self._now(now))

        for _ in range(self._max_lookback_days):
            low = high - DAY
            orders = await self._cache.fetch_orders(token_id, int(low.timestamp()), int(high.timestamp()))
            price = self._aggregator.average_price(orders)
            if price is not None:
                return price
            high = low

        self._logger.info("No priced order for %s in the last %s days", token_id, self._max_lookback_days)
        return None

    async def price_history(self, token_id: str, now: Optional[datetime] = None) -> Dict[str, float]:
        """Date label ("Mon DD, YYYY") -> average price, newest first, gaps filled."""
        ensure_valid_hash(token_id, "token id")
        orders = await self._cache.fetch_orders(token_id)
        return self._aggregator.daily_prices(orders, self._now(now))

    async def volume_history(self, token_id: str, now: Optional[datetime] = None) -> Dict[str, float]:
        """Date label -> traded token volume, newest first, 0 on empty days."""
        ensure_valid_hash(token_id, "token id")
        orders = await self._cache.fetch_orders(token_id)
        return self._aggregator.daily_volumes(orders, self._now(now))

    async def latest_volume(self, token_id: str, now: Optional[datetime] = None) -> float:
        history = await self.volume_history(token_id, now)
        return next(iter(history.values()), 0.0)
