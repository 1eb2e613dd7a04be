import json
import logging
import time
from typing import Any, Dict, List, Optional

from ..domain.entities.community_entity import UserEntity
from ..domain.entities.interaction_entity import get_tag_value
from ..domain.entities.order_entity import OrderWithPair
from ..domain.entities.token_entity import TransactionEntity, UserBalance
from ..domain.enums.verto_enums import TransactionDirection, TransactionStatus
from ..domain.exceptions import CollaboratorError
from ..repositories.cache_repository import CacheRepository
from ..repositories.ledger_repository import LedgerRepository
from ..services.contract_state_service import ContractStateService
from .order_book_use_case import OrderBookUseCase
from .token_use_case import TokenUseCase

TX_HEIGHT_QUERY = """
query($id: ID!) {
  transaction(id: $id) {
    id
    block {
      height
    }
  }
}
"""

_TX_FIELDS = """
      edges {
        node {
          id
          owner {
            address
          }
          recipient
          quantity {
            ar
            winston
          }
          tags {
            name
            value
          }
          block {
            timestamp
          }
        }
      }
"""

OUT_TX_QUERY = (
    "query ($addr: String!, $max: Int) {\n"
    "  transactions (owners: [$addr], block: { max: $max }) {"
    + _TX_FIELDS
    + "  }\n}\n"
)

IN_TX_QUERY = (
    "query ($addr: String!, $max: Int) {\n"
    "  transactions (recipients: [$addr], block: { max: $max }) {"
    + _TX_FIELDS
    + "  }\n}\n"
)

LATEST_TX_LIMIT = 5


class UserUseCase:
    """
    Wallet-centric reads: profile, balances, open orders and the latest
    native/token transactions.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        cache: Optional[CacheRepository],
        state_service: ContractStateService,
        token_use_case: TokenUseCase,
        order_book: OrderBookUseCase,
        community_contract: str,
        logger: logging.Logger | None = None,
    ):
        self._ledger = ledger
        self._cache = cache
        self._states = state_service
        self._token = token_use_case
        self._order_book = order_book
        self._community_contract = community_contract
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def get_user(self, value: str) -> Optional[UserEntity]:
        """
        :param value: Username or one of the user's wallet addresses.
        """
        if self._states.use_cache:
            people = await self._cache.fetch_users()
        else:
            people = (await self._states.get_community_state(self._community_contract)).people

        for user in people:
            if user.matches(value):
                return user
        return None

    async def get_balances(self, address: str) -> List[UserBalance]:
        """Listed assets held by `address`."""
        if self._states.use_cache:
            return await self._cache.fetch_balances_for_address(address)

        balances: List[UserBalance] = []
        for token in await self._token.get_tokens():
            state = await self._states.get_token_state(token.id)
            balance = state.balances.get(address)
            if not balance:
                continue
            balances.append(UserBalance(
                contract_id=token.id,
                name=token.name,
                ticker=token.ticker,
                logo=state.setting("communityLogo"),
                balance=balance,
                user_address=address,
            ))
        return balances

    async def get_orders(self, address: str) -> List[OrderWithPair]:
        return [o for o in await self._order_book.get_order_book() if o.creator == address]

    async def _max_height(self, after: Optional[str]) -> Optional[int]:
        if not after:
            return None
        data = await self._ledger.graphql(TX_HEIGHT_QUERY, {"id": after})
        tx = (data or {}).get("transaction") or {}
        return ((tx.get("block") or {}).get("height"))

    async def _transfer_amount(self, node: Dict[str, Any]) -> tuple[Optional[str], Optional[TransactionStatus]]:
        """Token amount label + validity status for SmartWeave transfer interactions."""
        tags = node.get("tags") or []
        if get_tag_value("App-Name", tags) != "SmartWeaveAction":
            return None, None

        raw_input = get_tag_value("Input", tags)
        contract_id = get_tag_value("Contract", tags)
        if not raw_input or not contract_id:
            return None, None
        try:
            parsed = json.loads(raw_input)
        except ValueError:
            return None, None
        if not isinstance(parsed, dict) or parsed.get("function") != "transfer" or not parsed.get("qty"):
            return None, None

        contract = await self._cached_contract(contract_id)
        if not contract:
            return None, None
        ticker = (contract.get("state") or {}).get("ticker") or "???"
        validity = contract.get("validity") or {}
        status = TransactionStatus.ERROR if validity.get(node["id"]) is False else None
        return f"{parsed['qty']} {ticker}", status

    async def _cached_contract(self, contract_id: str) -> Optional[Dict[str, Any]]:
        """Cache-only lookup; a miss or a cache failure just drops the token label."""
        if self._cache is None:
            return None
        try:
            return await self._cache.fetch_contract(contract_id)
        except CollaboratorError as exc:
            self._logger.warning("No cached state for %s: %s", contract_id, exc)
            return None

    async def get_transactions(self, address: str, after: Optional[str] = None) -> List[TransactionEntity]:
        """
        Latest transactions (in + out) of a wallet, newest first.

        :param address: Wallet address.
        :param after: Optional transaction id used for pagination; only older
                      transactions are returned.
        """
        max_height = await self._max_height(after)
        variables = {"addr": address, "max": max_height}

        out_data = await self._ledger.graphql(OUT_TX_QUERY, variables)
        in_data = await self._ledger.graphql(IN_TX_QUERY, variables)
        out_edges = ((out_data or {}).get("transactions") or {}).get("edges") or []
        in_edges = ((in_data or {}).get("transactions") or {}).get("edges") or []

        if after:
            in_ids = [e["node"]["id"] for e in in_edges]
            out_ids = [e["node"]["id"] for e in out_edges]
            if after in in_ids:
                in_edges = in_edges[in_ids.index(after) + 1:]
            if after in out_ids:
                out_edges = out_edges[out_ids.index(after) + 1:]

        seen = set()
        result: List[TransactionEntity] = []
        for edge in [*in_edges, *out_edges]:
            node = edge["node"]
            if node["id"] in seen:
                continue
            seen.add(node["id"])

            amount, status = await self._transfer_amount(node)
            block = node.get("block")
            if not block:
                status = TransactionStatus.PENDING
            result.append(TransactionEntity(
                id=node["id"],
                status=status or TransactionStatus.SUCCESS,
                type=(
                    TransactionDirection.OUT
                    if (node.get("owner") or {}).get("address") == address
                    else TransactionDirection.IN
                ),
                amount=amount or f"{float((node.get('quantity') or {}).get('ar') or 0)} AR",
                timestamp=block.get("timestamp") if block else None,
            ))

        now = int(time.time())
        result.sort(key=lambda tx: now if tx.timestamp is None else tx.timestamp, reverse=True)
        return result[:LATEST_TX_LIMIT]
