from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ..domain.entities.interaction_entity import InteractionReceipt, Tag


class LedgerRepository(ABC):
    """
    Port to the ledger: write interactions, contract evaluation and
    GraphQL transaction search. Implementations raise CollaboratorError
    on transport failures and never retry.
    """

    @abstractmethod
    async def submit_interaction(
        self,
        contract_id: str,
        input: Dict[str, Any],
        tags: Sequence[Tag],
        target: Optional[str] = None,
        quantity: str = "0",
    ) -> InteractionReceipt:
        """Sign + post an interaction `{function, ...args}` to `contract_id`."""
        raise NotImplementedError

    @abstractmethod
    async def read_contract_state(self, contract_id: str) -> Dict[str, Any]:
        """Evaluate the latest state of a contract directly from the ledger."""
        raise NotImplementedError

    @abstractmethod
    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run one GraphQL query and return the `data` block."""
        raise NotImplementedError

    @abstractmethod
    async def query_transactions(self, query: str, variables: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Run a paginated `transactions(...)` query and return every edge.
        The query must accept `$cursor: String` and select `pageInfo.hasNextPage` + `cursor`.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_network_height(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def get_balance(self, address: str) -> float:
        """Native (AR) balance of a wallet, already converted from winston."""
        raise NotImplementedError
