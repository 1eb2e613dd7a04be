from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ..domain.entities.community_entity import CommunityToken, UserEntity
from ..domain.entities.token_entity import OrderLogEntry, TokenEntity, UserBalance
from ..domain.enums.verto_enums import TokenType


class CacheRepository(ABC):
    """
    Port to the remote caching/indexing service (pre-evaluated contract
    states, token and user metadata, order log).
    """

    @abstractmethod
    async def fetch_contract(self, contract_id: str) -> Optional[Dict[str, Any]]:
        """Return {"state": {...}, "validity": {...}} or None on cache miss."""
        raise NotImplementedError

    async def fetch_contract_state(self, contract_id: str) -> Optional[Dict[str, Any]]:
        contract = await self.fetch_contract(contract_id)
        if not contract:
            return None
        return contract.get("state")

    @abstractmethod
    async def fetch_tokens(self, type: Optional[TokenType] = None) -> List[CommunityToken]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_token_metadata(self, contract_id: str) -> Optional[CommunityToken]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_token_state_metadata(self, contract_id: str) -> Optional[TokenEntity]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_users(self) -> List[UserEntity]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_balances_for_address(self, address: str) -> List[UserBalance]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_orders(
        self,
        token_id: str,
        from_ts: Optional[int] = None,
        to_ts: Optional[int] = None,
    ) -> List[OrderLogEntry]:
        """Order log for a token, newest first, optionally bounded by unix timestamps."""
        raise NotImplementedError

    @abstractmethod
    async def refresh_contracts(self, contract_ids: Sequence[str]) -> None:
        """Ask the cache to re-index contracts touched by a write. Best effort."""
        raise NotImplementedError
