import logging
from typing import Any, Optional

from ..domain.entities.order_entity import EstimateResult
from ..domain.validators import ensure_limit_price, ensure_positive_amount, ensure_swap_pair
from ..services.order_estimator_service import OrderEstimatorService
from .order_book_use_case import OrderBookUseCase


class EstimateSwapUseCase:
    """
    Predicts the outcome of a swap from a fresh order-book snapshot without
    writing anything. All input validation happens before the snapshot read.
    """

    def __init__(
        self,
        order_book: OrderBookUseCase,
        estimator: OrderEstimatorService,
        logger: logging.Logger | None = None,
    ):
        self._order_book = order_book
        self._estimator = estimator
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def estimate_swap(self, pair: Any, amount: float, price: Optional[float] = None) -> EstimateResult:
        """
        :param pair: SwapPair or {"from": tokenId, "to": tokenId}.
        :param amount: Quantity of `from` token to send (> 0).
        :param price: Optional limit price.
        :raises ValidationError: malformed pair/amount/price.
        :raises ComputationError: a matching order is priced at 0.
        """
        swap_pair = ensure_swap_pair(pair)
        amount = ensure_positive_amount(amount)
        price = ensure_limit_price(price)

        orders = await self._order_book.get_order_book(swap_pair.as_tuple())
        return self._estimator.estimate(orders, swap_pair, amount, price)
