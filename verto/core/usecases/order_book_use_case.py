import logging
from typing import List, Optional, Sequence, Union

from ..domain.entities.order_entity import OrderWithPair
from ..services.contract_state_service import ContractStateService

OrderBookFilter = Union[None, str, Sequence[str]]


class OrderBookUseCase:
    """
    Read side of the CLOB contract: flattens state.pairs[].orders[] into
    orders carrying their pair, optionally filtered by token or by pair.
    """

    def __init__(
        self,
        state_service: ContractStateService,
        clob_contract: str,
        logger: logging.Logger | None = None,
    ):
        self._states = state_service
        self._clob_contract = clob_contract
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _matches(order: OrderWithPair, selector: OrderBookFilter) -> bool:
        if selector is None:
            return True
        if isinstance(selector, str):
            return selector in order.pair
        return all(token_id in order.pair for token_id in selector)

    async def get_order_book(self, selector: OrderBookFilter = None) -> List[OrderWithPair]:
        """
        :param selector: None for every order, a token id for every pair that
                         contains it, or a (tokenA, tokenB) pair (order-insensitive).
        """
        state = await self._states.get_clob_state(self._clob_contract)
        orders = [o for o in state.orders_with_pair() if self._matches(o, selector)]
        self._logger.debug("Order book %s: %s orders", selector, len(orders))
        return orders

    async def get_order(self, order_id: str) -> Optional[OrderWithPair]:
        for order in await self.get_order_book():
            if order.id == order_id:
                return order
        return None
