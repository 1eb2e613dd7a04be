import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ....core.domain.entities.interaction_entity import InteractionReceipt, Tag
from ....core.domain.exceptions import CollaboratorError
from ....core.repositories.ledger_repository import LedgerRepository

WINSTON_PER_AR = 10 ** 12


class GatewayHttpClient(LedgerRepository):
    """
    Async HTTP access to the ledger.

      {gateway_url}/graphql                -> transaction search
      {gateway_url}/info                   -> network height
      {gateway_url}/wallet/{addr}/balance  -> winston balance (plain text)
      {evaluator_url}/{contract_id}        -> {"state": {...}} evaluated contract state
      {relay_url}/interactions             -> signs with the configured wallet and posts

    No retries: every failure surfaces as CollaboratorError.
    """

    SERVICE = "ledger"

    def __init__(
        self,
        gateway_url: str,
        relay_url: str,
        evaluator_url: str,
        timeout_sec: float = 30.0,
        max_pages: int = 50,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._gateway_url = gateway_url.rstrip("/")
        self._relay_url = relay_url.rstrip("/")
        self._evaluator_url = evaluator_url.rstrip("/")
        self._timeout = timeout_sec
        self._max_pages = max_pages
        self._transport = transport
        self._logger = logging.getLogger(self.__class__.__name__)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            self._logger.warning("%s %s failed: %s", method, url, exc)
            raise CollaboratorError(self.SERVICE, f"{method} {url} failed: {exc}", url=url) from exc

        if r.status_code >= 400:
            self._logger.warning("%s non-2xx %s: %s %s", method, url, r.status_code, r.text)
            raise CollaboratorError(
                self.SERVICE, f"{method} {url} returned {r.status_code}", status_code=r.status_code, url=url
            )
        return r

    @classmethod
    def _json(cls, r: httpx.Response) -> Any:
        try:
            return r.json()
        except ValueError as exc:
            raise CollaboratorError(cls.SERVICE, f"invalid JSON from {r.request.url}", url=str(r.request.url)) from exc

    async def submit_interaction(
        self,
        contract_id: str,
        input: Dict[str, Any],
        tags: Sequence[Tag],
        target: Optional[str] = None,
        quantity: str = "0",
    ) -> InteractionReceipt:
        url = f"{self._relay_url}/interactions"
        payload = {
            "contractId": contract_id,
            "input": input,
            "tags": [t.model_dump() for t in tags],
            "target": target,
            "quantity": quantity,
        }
        r = await self._request("POST", url, json=payload)
        receipt = InteractionReceipt.model_validate(self._json(r))
        self._logger.debug("Interaction %s on %s: %s", input.get("function"), contract_id, receipt.id)
        return receipt

    async def read_contract_state(self, contract_id: str) -> Dict[str, Any]:
        url = f"{self._evaluator_url}/{contract_id}"
        body = self._json(await self._request("GET", url))
        state = body.get("state") if isinstance(body, dict) else None
        if state is None:
            raise CollaboratorError(self.SERVICE, f"no state for contract {contract_id}", url=url)
        return state

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self._gateway_url}/graphql"
        body = self._json(await self._request("POST", url, json={"query": query, "variables": variables or {}}))
        if body.get("errors"):
            raise CollaboratorError(self.SERVICE, f"GraphQL errors: {body['errors']}", url=url)
        return body.get("data") or {}

    async def query_transactions(self, query: str, variables: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        edges: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        for _ in range(self._max_pages):
            data = await self.graphql(query, {**(variables or {}), "cursor": cursor})
            page = data.get("transactions") or {}
            page_edges = page.get("edges") or []
            edges.extend(page_edges)

            if not page_edges or not (page.get("pageInfo") or {}).get("hasNextPage"):
                return edges
            cursor = page_edges[-1].get("cursor")

        self._logger.warning("Stopped paginating after %s pages (%s edges)", self._max_pages, len(edges))
        return edges

    async def get_network_height(self) -> int:
        body = self._json(await self._request("GET", f"{self._gateway_url}/info"))
        return int(body["height"])

    async def get_balance(self, address: str) -> float:
        r = await self._request("GET", f"{self._gateway_url}/wallet/{address}/balance")
        try:
            winston = int(r.text.strip())
        except ValueError as exc:
            raise CollaboratorError(self.SERVICE, f"invalid balance for {address}: {r.text!r}") from exc
        return winston / WINSTON_PER_AR
