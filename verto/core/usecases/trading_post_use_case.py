import logging
from typing import Dict, List, Mapping, Optional, Tuple

from ..domain.entities.community_entity import VaultEntry
from ..domain.exceptions import ComputationError
from ..repositories.ledger_repository import LedgerRepository
from ..services.contract_state_service import ContractStateService
from ..services.stake_service import StakeService
from ..services.weighted_selector_service import WeightedSelectorService

GENESIS_QUERY = """
query($wallet: String!, $cursor: String) {
  transactions(
    recipients: [$wallet]
    tags: [
      { name: "Exchange", values: ["Verto"] }
      { name: "Type", values: ["Genesis"] }
    ]
    first: 100
    after: $cursor
  ) {
    pageInfo {
      hasNextPage
    }
    edges {
      cursor
      node {
        owner {
          address
        }
      }
    }
  }
}
"""


class TradingPostUseCase:
    """
    Trading posts are wallets that sent a Genesis transaction to the exchange
    wallet and still have stake locked in the exchange token vault. A post is
    recommended by weighted random draw over reputation.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        state_service: ContractStateService,
        selector: WeightedSelectorService,
        stake_service: StakeService,
        exchange_contract: str,
        exchange_wallet: str,
        logger: logging.Logger | None = None,
    ):
        self._ledger = ledger
        self._states = state_service
        self._selector = selector
        self._stakes = stake_service
        self._exchange_contract = exchange_contract
        self._exchange_wallet = exchange_wallet
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def _vault_and_height(self) -> Tuple[Dict[str, List[VaultEntry]], int]:
        state = await self._states.get_token_state(self._exchange_contract)
        height = await self._ledger.get_network_height()
        return state.vault, height

    async def _staked_posts(self) -> Tuple[List[str], Dict[str, List[VaultEntry]], int]:
        edges = await self._ledger.query_transactions(GENESIS_QUERY, {"wallet": self._exchange_wallet})
        candidates = list(dict.fromkeys(
            edge["node"]["owner"]["address"] for edge in edges
        ))
        vault, height = await self._vault_and_height()
        posts = [addr for addr in candidates if self._stakes.get_stake(addr, vault, height) > 0]
        self._logger.debug("Trading posts: %s candidates, %s with stake", len(candidates), len(posts))
        return posts, vault, height

    async def get_trading_posts(self) -> List[str]:
        posts, _, _ = await self._staked_posts()
        return posts

    async def get_reputation(
        self,
        address: str,
        vault: Optional[Mapping[str, List[VaultEntry]]] = None,
        height: Optional[int] = None,
    ) -> float:
        """reputation = stake/2 + time_staked/3 + native balance/6, rounded to 3 decimals."""
        if vault is None or height is None:
            vault, height = await self._vault_and_height()
        stake = self._stakes.get_stake(address, vault, height)
        time_staked = self._stakes.get_time_staked(address, vault, height)
        balance = await self._ledger.get_balance(address)
        return self._stakes.reputation(stake, time_staked, balance)

    async def recommend_post(self) -> str:
        """
        :raises ComputationError: no trading post has stake.
        """
        posts, vault, height = await self._staked_posts()
        if not posts:
            raise ComputationError("No trading post with stake to recommend")

        reputations = {post: await self.get_reputation(post, vault, height) for post in posts}
        best = max(reputations, key=reputations.get)
        return self._selector.select(reputations, fallback=best)
