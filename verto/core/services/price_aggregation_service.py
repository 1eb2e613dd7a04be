from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ..domain.entities.token_entity import OrderLogEntry

DAY = timedelta(days=1)
DATE_LABEL_FMT = "%b %d, %Y"


class PriceAggregationService:
    """
    Stateless helper turning the cache order log into daily series.

    - price of an order = input / output, only for successful orders paid in
      the native unit (e.g. "10 AR" -> "2500 VRT" gives 0.004 AR per VRT);
    - a day window is [midnight - 1d, midnight], both ends inclusive;
    - empty days are back-filled from the next older known day, then
      forward-filled, so the series has no gaps.
    """

    def __init__(self, native_unit: str = "AR"):
        self._native_unit = native_unit

    @staticmethod
    def next_midnight(now: datetime) -> datetime:
        """Midnight (UTC) at the start of tomorrow, the upper bound of the first window."""
        now = now.astimezone(timezone.utc)
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return today + DAY

    def to_frame(self, orders: Sequence[OrderLogEntry]) -> pd.DataFrame:
        rows = []
        for o in orders:
            if o.status != "success":
                continue
            try:
                inp, unit, out = o.input_amount, o.input_unit, o.output_amount
            except ValueError:
                continue
            if unit == self._native_unit and out:
                price = inp / out
            else:
                price = float("nan")
            volume = out if unit == self._native_unit else inp
            rows.append({"timestamp": int(o.timestamp), "price": price, "volume": volume})
        return pd.DataFrame(rows, columns=["timestamp", "price", "volume"])

    def average_price(self, orders: Sequence[OrderLogEntry]) -> Optional[float]:
        df = self.to_frame(orders)
        prices = pd.to_numeric(df["price"], errors="coerce").dropna()
        if prices.empty:
            return None
        return float(prices.mean())

    @staticmethod
    def day_windows(orders: Sequence[OrderLogEntry], now: datetime) -> List[Tuple[datetime, datetime]]:
        """Windows (low, high) from tomorrow's midnight back to the oldest order, newest first."""
        if not orders:
            return []
        oldest = min(o.timestamp for o in orders)
        high = PriceAggregationService.next_midnight(now)
        windows = []
        while high.timestamp() >= oldest:
            low = high - DAY
            windows.append((low, high))
            high = low
        return windows

    def _daily(self, orders: Sequence[OrderLogEntry], now: datetime, column: str, agg: str) -> pd.Series:
        df = self.to_frame(orders)
        labels, values = [], []
        for low, high in self.day_windows(orders, now):
            mask = (df["timestamp"] >= low.timestamp()) & (df["timestamp"] <= high.timestamp())
            day = pd.to_numeric(df.loc[mask, column], errors="coerce").dropna()
            labels.append(low.strftime(DATE_LABEL_FMT))
            if agg == "mean":
                values.append(float(day.mean()) if not day.empty else float("nan"))
            else:
                values.append(float(day.sum()))
        # newest first, like the windows
        return pd.Series(values, index=labels, dtype="float64")

    def daily_prices(self, orders: Sequence[OrderLogEntry], now: datetime) -> Dict[str, float]:
        series = self._daily(orders, now, "price", "mean")
        if series.empty:
            return {}
        chronological = series.iloc[::-1].ffill().bfill()
        return chronological.iloc[::-1].to_dict()

    def daily_volumes(self, orders: Sequence[OrderLogEntry], now: datetime) -> Dict[str, float]:
        series = self._daily(orders, now, "volume", "sum")
        return series.to_dict()
