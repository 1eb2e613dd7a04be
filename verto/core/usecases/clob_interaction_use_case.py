import logging
from typing import Iterable, Sequence

from ..domain.entities.interaction_entity import Tag, build_tags
from ..domain.enums.verto_enums import InteractionAction
from ..domain.exceptions import InteractionFailedError, ValidationError
from ..domain.validators import ensure_valid_pair
from ..repositories.ledger_repository import LedgerRepository
from ..services.contract_state_service import ContractStateService
from .order_book_use_case import OrderBookUseCase


class ClobInteractionUseCase:
    """
    Administrative CLOB writes: register a pair, cancel an order.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        state_service: ContractStateService,
        order_book: OrderBookUseCase,
        clob_contract: str,
        logger: logging.Logger | None = None,
    ):
        self._ledger = ledger
        self._states = state_service
        self._order_book = order_book
        self._clob_contract = clob_contract
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def add_pair(self, pair: Sequence[str], tags: Iterable[Tag] = ()) -> str:
        """
        :param pair: Tuple of two token ids.
        :return: addPair interaction id.
        """
        pair = ensure_valid_pair(pair)

        receipt = await self._ledger.submit_interaction(
            self._clob_contract,
            {"function": "addPair", "pair": list(pair)},
            build_tags(InteractionAction.ADD_PAIR, tags),
        )
        if not receipt.id:
            raise InteractionFailedError("Could not add pair.")

        await self._states.refresh(self._clob_contract)
        self._logger.info("Pair %s/%s added: %s", pair[0], pair[1], receipt.id)
        return receipt.id

    async def cancel(self, order_id: str) -> str:
        """
        Cancel an order; the contract returns the non-filled tokens and removes
        it from the book.

        :return: cancelOrder interaction id.
        """
        order = await self._order_book.get_order(order_id)
        if order is None:
            raise ValidationError(f"Order {order_id} does not exist")

        receipt = await self._ledger.submit_interaction(
            self._clob_contract,
            {"function": "cancelOrder", "orderID": order_id},
            build_tags(InteractionAction.CANCEL_ORDER),
        )
        if not receipt.id:
            raise InteractionFailedError("Order could not be cancelled")

        await self._states.refresh(self._clob_contract, *order.pair)
        self._logger.info("Order %s cancelled: %s", order_id, receipt.id)
        return receipt.id
