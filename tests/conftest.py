from typing import Any, Dict, List, Optional, Sequence

import pytest

from verto.core.domain.entities.community_entity import CommunityToken, UserEntity
from verto.core.domain.entities.interaction_entity import InteractionReceipt, Tag
from verto.core.domain.entities.token_entity import OrderLogEntry, TokenEntity, UserBalance
from verto.core.domain.enums.verto_enums import TokenType
from verto.core.repositories.cache_repository import CacheRepository
from verto.core.repositories.hook_repository import SwapHookRepository
from verto.core.repositories.ledger_repository import LedgerRepository


def addr(ch: str) -> str:
    """43-char ledger id made of a single character."""
    return ch * 43


TOKEN_A = addr("A")
TOKEN_B = addr("B")
CLOB = addr("C")
COMMUNITY = addr("D")
EXCHANGE_TOKEN = addr("E")
EXCHANGE_WALLET = addr("W")
USER = addr("u")


class FakeLedger(LedgerRepository):
    def __init__(self):
        self.states: Dict[str, Dict[str, Any]] = {}
        self.submitted: List[Dict[str, Any]] = []
        self.receipts: List[InteractionReceipt] = []
        self.graphql_responses: List[Dict[str, Any]] = []
        self.graphql_calls: List[Dict[str, Any]] = []
        self.edges: List[Dict[str, Any]] = []
        self.height = 1000
        self.balances: Dict[str, float] = {}

    async def submit_interaction(
        self,
        contract_id: str,
        input: Dict[str, Any],
        tags: Sequence[Tag],
        target: Optional[str] = None,
        quantity: str = "0",
    ) -> InteractionReceipt:
        self.submitted.append({
            "contract_id": contract_id,
            "input": input,
            "tags": list(tags),
            "target": target,
            "quantity": quantity,
        })
        if self.receipts:
            return self.receipts.pop(0)
        return InteractionReceipt(
            id=f"tx{len(self.submitted)}",
            type="ok",
            result={"status": "success"},
        )

    async def read_contract_state(self, contract_id: str) -> Dict[str, Any]:
        return self.states[contract_id]

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self.graphql_calls.append({"query": query, "variables": variables})
        return self.graphql_responses.pop(0) if self.graphql_responses else {}

    async def query_transactions(self, query: str, variables: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return list(self.edges)

    async def get_network_height(self) -> int:
        return self.height

    async def get_balance(self, address: str) -> float:
        return self.balances.get(address, 0.0)


class FakeCache(CacheRepository):
    def __init__(self):
        self.contracts: Dict[str, Dict[str, Any]] = {}
        self.tokens: List[CommunityToken] = []
        self.token_meta: Dict[str, TokenEntity] = {}
        self.users: List[UserEntity] = []
        self.balances: Dict[str, List[UserBalance]] = {}
        self.orders: List[OrderLogEntry] = []
        self.order_queries: List[tuple] = []
        self.refreshed: List[List[str]] = []

    async def fetch_contract(self, contract_id: str) -> Optional[Dict[str, Any]]:
        return self.contracts.get(contract_id)

    async def fetch_tokens(self, type: Optional[TokenType] = None) -> List[CommunityToken]:
        return [t for t in self.tokens if type is None or t.type == type]

    async def fetch_token_metadata(self, contract_id: str) -> Optional[CommunityToken]:
        return next((t for t in self.tokens if t.id == contract_id), None)

    async def fetch_token_state_metadata(self, contract_id: str) -> Optional[TokenEntity]:
        return self.token_meta.get(contract_id)

    async def fetch_users(self) -> List[UserEntity]:
        return list(self.users)

    async def fetch_balances_for_address(self, address: str) -> List[UserBalance]:
        return self.balances.get(address, [])

    async def fetch_orders(
        self,
        token_id: str,
        from_ts: Optional[int] = None,
        to_ts: Optional[int] = None,
    ) -> List[OrderLogEntry]:
        self.order_queries.append((token_id, from_ts, to_ts))
        return [
            o for o in self.orders
            if (from_ts is None or o.timestamp >= from_ts) and (to_ts is None or o.timestamp <= to_ts)
        ]

    async def refresh_contracts(self, contract_ids: Sequence[str]) -> None:
        self.refreshed.append(list(contract_ids))


class FakeHook(SwapHookRepository):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.notified: List[str] = []

    async def notify_transaction(self, order_id: str) -> None:
        self.notified.append(order_id)
        if self.fail:
            raise RuntimeError("hook down")


def clob_state(*pairs: Dict[str, Any]) -> Dict[str, Any]:
    return {"pairs": list(pairs), "emergencyHaltWallet": addr("h")}


def order(id: str, token: str, price: Optional[float], quantity: float, creator: str = USER) -> Dict[str, Any]:
    return {
        "id": id,
        "creator": creator,
        "token": token,
        "price": price,
        "quantity": quantity,
        "originalQuantity": quantity,
        "transaction": f"{id}-tx",
    }


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()
