import logging
from typing import Optional

from ..domain.entities.interaction_entity import FeeResult, Tag
from ..domain.enums.verto_enums import FeeTarget
from ..domain.validators import ensure_positive_amount, ensure_valid_hash
from ..repositories.ledger_repository import LedgerRepository
from ..services.contract_state_service import ContractStateService
from ..services.fee_calculator_service import FeeCalculatorService
from .token_use_case import TokenUseCase

FEE_TYPE_TAG = {
    FeeTarget.EXCHANGE: "Fee-Exchange",
    FeeTarget.TOKEN_HOLDER: "Fee-VRT-Holder",
}


class CreateFeeUseCase:
    """
    Computes a protocol fee for an order and pays it with a token transfer
    from the caller's wallet to the resolved recipient.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        state_service: ContractStateService,
        fee_calculator: FeeCalculatorService,
        token_use_case: TokenUseCase,
        exchange_contract: str,
        fee_rate: float,
        logger: logging.Logger | None = None,
    ):
        self._ledger = ledger
        self._states = state_service
        self._calculator = fee_calculator
        self._token = token_use_case
        self._exchange_contract = exchange_contract
        self._fee_rate = fee_rate
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def ensure_configured(self) -> None:
        """
        :raises ValidationError: the exchange wallet or the exchange token id is not a ledger id.
        """
        ensure_valid_hash(self._calculator.exchange_wallet, "exchange wallet")
        ensure_valid_hash(self._exchange_contract, "exchange contract")

    async def compute(self, amount: float, target: FeeTarget) -> FeeResult:
        """Fee amount + recipient, without paying it."""
        target = FeeTarget(target)
        if target is FeeTarget.EXCHANGE:
            return self._calculator.compute_fee(amount, self._fee_rate, target)

        holder_state = await self._states.get_token_state(self._exchange_contract)
        height = await self._ledger.get_network_height()
        return self._calculator.compute_fee(
            amount, self._fee_rate, target, holder_state=holder_state, height=height
        )

    async def create_fee(self, amount: float, token_id: str, order_id: str, target: FeeTarget) -> Optional[str]:
        """
        :param amount: Amount of the order the fee applies to.
        :param token_id: Token the fee is paid in (the swap's `from` token).
        :param order_id: Order interaction id, attached as the `Order` tag.
        :param target: FeeTarget.EXCHANGE or FeeTarget.TOKEN_HOLDER.
        :return: Fee transfer interaction id, or None when the fee rounds to 0.
        """
        ensure_positive_amount(amount)
        ensure_valid_hash(token_id, "token id")

        fee = await self.compute(amount, target)
        if fee.fee_amount <= 0:
            self._logger.debug("Fee for order %s rounds to 0; nothing to pay", order_id)
            return None

        tags = [
            Tag(name="Type", value=FEE_TYPE_TAG[fee.target]),
            Tag(name="Order", value=order_id),
        ]
        transfer_id = await self._token.transfer(fee.fee_amount, token_id, fee.recipient, tags)
        self._logger.info(
            "Fee %s (%s %s) for order %s -> %s: %s",
            fee.target.value, fee.fee_amount, token_id, order_id, fee.recipient, transfer_id,
        )
        return transfer_id
