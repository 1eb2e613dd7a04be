import math
from typing import Dict, List, Mapping, Optional

from ..domain.entities.community_entity import TokenHolderState, VaultEntry
from ..domain.entities.interaction_entity import FeeResult
from ..domain.enums.verto_enums import FeeTarget
from ..domain.exceptions import ValidationError
from .weighted_selector_service import WeightedSelectorService


class FeeCalculatorService:
    """
    Fee amount + fee recipient resolution.

    Amounts use a double ceiling, ceil(ceil(amount) * rate), which is what the
    protocol contracts expect and differs from ceil(amount * rate) for
    fractional amounts.
    """

    def __init__(self, selector: WeightedSelectorService, exchange_wallet: str):
        self._selector = selector
        self._exchange_wallet = exchange_wallet

    @property
    def exchange_wallet(self) -> str:
        return self._exchange_wallet

    @staticmethod
    def compute_fee_amount(amount: float, fee_rate: float) -> int:
        return math.ceil(math.ceil(amount) * fee_rate)

    @staticmethod
    def build_holder_weights(
        balances: Mapping[str, float],
        vault: Mapping[str, List[VaultEntry]],
        height: int,
    ) -> Dict[str, float]:
        """
        Holder weight = direct balance + every vault entry still locked at `height`.
        Holders only present in the vault are included.
        """
        weights: Dict[str, float] = {addr: float(bal) for addr, bal in balances.items()}
        for addr, entries in vault.items():
            locked = sum(e.balance for e in entries if e.is_locked_at(height))
            if locked:
                weights[addr] = weights.get(addr, 0.0) + locked
        return weights

    def select_token_holder(self, holder_state: TokenHolderState, height: int) -> str:
        weights = self.build_holder_weights(holder_state.balances, holder_state.vault, height)
        return self._selector.select(weights, fallback=self._exchange_wallet)

    def compute_fee(
        self,
        amount: float,
        fee_rate: float,
        target: FeeTarget,
        holder_state: Optional[TokenHolderState] = None,
        height: Optional[int] = None,
    ) -> FeeResult:
        """
        :param amount: Traded amount (same unit as the fee).
        :param fee_rate: Fraction of the (ceiled) amount, e.g. 0.005.
        :param target: FeeTarget.EXCHANGE or FeeTarget.TOKEN_HOLDER.
        :param holder_state: Exchange token state; required for TOKEN_HOLDER.
        :param height: Current ledger height; required for TOKEN_HOLDER.
        """
        target = FeeTarget(target)
        fee_amount = self.compute_fee_amount(amount, fee_rate)

        if target is FeeTarget.EXCHANGE:
            recipient = self._exchange_wallet
        else:
            if holder_state is None or height is None:
                raise ValidationError("token_holder fees need the holder state and the current height")
            recipient = self.select_token_holder(holder_state, height)

        return FeeResult(recipient=recipient, fee_amount=fee_amount, target=target)
