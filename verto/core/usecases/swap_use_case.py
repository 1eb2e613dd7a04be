import asyncio
import logging
from typing import Any, Iterable, Optional, Set

from ..domain.entities.interaction_entity import Tag, build_tags
from ..domain.enums.verto_enums import FeeTarget, InteractionAction
from ..domain.exceptions import InteractionFailedError
from ..domain.validators import ensure_limit_price, ensure_positive_amount, ensure_swap_pair, ensure_valid_hash
from ..repositories.hook_repository import SwapHookRepository
from ..repositories.ledger_repository import LedgerRepository
from ..services.contract_state_service import ContractStateService
from .create_fee_use_case import CreateFeeUseCase
from .token_use_case import TokenUseCase


class SwapUseCase:
    """
    Places an order on the CLOB contract.

    Strict order of writes:
      1) transfer `amount` of the `from` token to the CLOB contract (Send-Input)
      2) createOrder referencing that transfer
      3) exchange fee, then token-holder fee
      4) fire-and-forget webhook (never awaited by the swap)
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        state_service: ContractStateService,
        token_use_case: TokenUseCase,
        create_fee_use_case: CreateFeeUseCase,
        clob_contract: str,
        hook: Optional[SwapHookRepository] = None,
        logger: logging.Logger | None = None,
    ):
        self._ledger = ledger
        self._states = state_service
        self._token = token_use_case
        self._fees = create_fee_use_case
        self._clob_contract = clob_contract
        self._hook = hook
        self._hook_tasks: Set[asyncio.Task] = set()
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def swap(
        self,
        pair: Any,
        amount: float,
        price: Optional[float] = None,
        tags: Iterable[Tag] = (),
    ) -> str:
        """
        :param pair: SwapPair or {"from": tokenId, "to": tokenId}; must be an existing pair.
        :param amount: Quantity of `from` token sent to the contract.
        :param price: Optional limit price.
        :param tags: Extra tags for the createOrder interaction.
        :return: Order id (createOrder interaction id).
        """
        swap_pair = ensure_swap_pair(pair)
        amount = ensure_positive_amount(amount)
        price = ensure_limit_price(price)
        ensure_valid_hash(self._clob_contract, "CLOB contract")
        self._fees.ensure_configured()

        transfer_id = await self._token.transfer(
            amount,
            swap_pair.from_token,
            self._clob_contract,
            [Tag(name="Type", value="Send-Input")],
        )

        order_input = {
            "function": "createOrder",
            "transaction": transfer_id,
            "pair": [swap_pair.from_token, swap_pair.to_token],
        }
        if price is not None:
            order_input["price"] = price

        receipt = await self._ledger.submit_interaction(
            self._clob_contract,
            order_input,
            build_tags(InteractionAction.ORDER, tags),
        )
        if not receipt.succeeded:
            raise InteractionFailedError(receipt.message, interaction_id=receipt.id)

        order_id = receipt.id
        await self._states.refresh(swap_pair.from_token, self._clob_contract, swap_pair.to_token)
        self._logger.info(
            "Order %s created: %s %s -> %s (price=%s)",
            order_id, amount, swap_pair.from_token, swap_pair.to_token, price,
        )

        await self._fees.create_fee(amount, swap_pair.from_token, order_id, FeeTarget.EXCHANGE)
        await self._fees.create_fee(amount, swap_pair.from_token, order_id, FeeTarget.TOKEN_HOLDER)

        self._schedule_hook(order_id)
        return order_id

    def _schedule_hook(self, order_id: str) -> None:
        if self._hook is None:
            return
        task = asyncio.create_task(self._hook.notify_transaction(order_id))
        self._hook_tasks.add(task)
        task.add_done_callback(self._on_hook_done)

    def _on_hook_done(self, task: asyncio.Task) -> None:
        self._hook_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.warning("Swap webhook failed: %s", exc)

    async def wait_for_hooks(self) -> None:
        """Await pending webhook calls (shutdown helper)."""
        if not self._hook_tasks:
            return
        await asyncio.gather(*list(self._hook_tasks), return_exceptions=True)
