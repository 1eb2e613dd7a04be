import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..domain.entities.community_entity import CommunityState, TokenHolderState
from ..domain.entities.order_entity import ClobState
from ..domain.exceptions import CollaboratorError
from ..repositories.cache_repository import CacheRepository
from ..repositories.ledger_repository import LedgerRepository


class ContractStateService:
    """
    Reads contract states cache-first with a single fallback to the ledger
    evaluation, and parses them into typed snapshots.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        cache: Optional[CacheRepository],
        use_cache: bool = True,
        logger: logging.Logger | None = None,
    ):
        self._ledger = ledger
        self._cache = cache
        self._use_cache = use_cache and cache is not None
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def use_cache(self) -> bool:
        return self._use_cache

    async def get_state(self, contract_id: str) -> Dict[str, Any]:
        if self._use_cache:
            state = await self._cache.fetch_contract_state(contract_id)
            if state is not None:
                return state
            self._logger.debug("Cache miss for %s; evaluating from ledger", contract_id)
        return await self._ledger.read_contract_state(contract_id)

    async def get_validity(self, contract_id: str) -> Dict[str, bool]:
        """Interaction validity map, only known by the cache."""
        if not self._use_cache:
            return {}
        contract = await self._cache.fetch_contract(contract_id)
        return (contract or {}).get("validity") or {}

    async def refresh(self, *contract_ids: str) -> None:
        """Let the cache re-index contracts after a write. No-op without cache."""
        if self._use_cache:
            await self._cache.refresh_contracts(list(contract_ids))

    @staticmethod
    def _parse(model, contract_id: str, raw: Dict[str, Any]):
        try:
            return model.model_validate(raw)
        except PydanticValidationError as exc:
            raise CollaboratorError("contract-state", f"unexpected state shape for {contract_id}: {exc}") from exc

    async def get_clob_state(self, contract_id: str) -> ClobState:
        return self._parse(ClobState, contract_id, await self.get_state(contract_id))

    async def get_token_state(self, contract_id: str) -> TokenHolderState:
        return self._parse(TokenHolderState, contract_id, await self.get_state(contract_id))

    async def get_community_state(self, contract_id: str) -> CommunityState:
        return self._parse(CommunityState, contract_id, await self.get_state(contract_id))
