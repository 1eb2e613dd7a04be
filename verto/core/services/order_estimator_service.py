import logging
import math
from typing import List, Optional, Sequence

from ..domain.entities.order_entity import EstimateResult, Order, SwapPair
from ..domain.exceptions import ComputationError


class OrderEstimatorService:
    """
    Stateless swap estimator over an order-book snapshot.

    Walks the reverse-side orders in the order the snapshot returned them
    (the CLOB keeps them best-price-first) and predicts how much of the
    `to` token is receivable immediately, and how much the unmatched
    remainder would bring at the limit price or at the average
    same-direction price.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @staticmethod
    def split_orders(orders: Sequence[Order], pair: SwapPair) -> tuple[List[Order], List[Order]]:
        """
        :return: (reverse_orders, same_direction_orders). Reverse orders offer
                 anything but `pair.from_token`, i.e. what the swap matches against.
        """
        reverse = [o for o in orders if o.token != pair.from_token]
        same = [o for o in orders if o.token == pair.from_token]
        return reverse, same

    @staticmethod
    def average_price(orders: Sequence[Order]) -> float:
        """Arithmetic mean of the priced orders; NaN when none is priced."""
        prices = [o.price for o in orders if o.price is not None]
        if not prices:
            return math.nan
        return sum(prices) / len(prices)

    def estimate(
        self,
        orders: Sequence[Order],
        pair: SwapPair,
        amount: float,
        price: Optional[float] = None,
    ) -> EstimateResult:
        """
        :param orders: Active orders for the unordered pair {from, to}.
        :param pair: Swap direction.
        :param amount: Quantity of `from` token sent (> 0, validated upstream).
        :param price: Optional limit price; only orders at exactly this price match.
        :return: EstimateResult(immediate, rest).
        :raises ComputationError: a matching reverse order is priced at 0.
        """
        reverse_orders, same_orders = self.split_orders(orders, pair)
        avg_price = self.average_price(same_orders)

        remaining = float(amount)
        immediate = 0.0

        for order in reverse_orders:
            if remaining <= 0:
                break
            if price is not None and order.price != price:
                continue
            if order.price is None:
                self._logger.debug("Skipping unpriced order %s", order.id)
                continue
            if order.price == 0:
                raise ComputationError(f"Order {order.id} has a price of 0; cannot compute 1/price")

            reverse_price = 1 / order.price
            if remaining * (price or reverse_price) <= order.quantity:
                immediate += remaining * reverse_price
                remaining = 0.0
                break

            immediate += order.quantity
            remaining -= order.quantity * order.price

        rest = remaining * (price or avg_price) if remaining > 0 else None

        self._logger.debug(
            "Estimate %s->%s amount=%s price=%s: immediate=%s rest=%s (reverse=%s same=%s)",
            pair.from_token, pair.to_token, amount, price, immediate, rest,
            len(reverse_orders), len(same_orders),
        )
        return EstimateResult(immediate=immediate, rest=rest)
