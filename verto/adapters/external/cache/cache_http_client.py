import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from ....core.domain.entities.community_entity import CommunityToken, UserEntity
from ....core.domain.entities.token_entity import OrderLogEntry, TokenEntity, UserBalance
from ....core.domain.enums.verto_enums import TokenType
from ....core.domain.exceptions import CollaboratorError
from ....core.repositories.cache_repository import CacheRepository


class CacheHttpClient(CacheRepository):
    """
    Client for the Verto cache service (pre-evaluated contract states plus
    token, user and order-log indexes).
    """

    SERVICE = "cache"

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_sec
        self._transport = transport
        self._logger = logging.getLogger(self.__class__.__name__)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout, transport=self._transport)

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None, allow_missing: bool = False) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with self._client() as client:
                r = await client.get(path, params={k: v for k, v in (params or {}).items() if v is not None})
        except httpx.HTTPError as exc:
            self._logger.warning("GET %s failed: %s", url, exc)
            raise CollaboratorError(self.SERVICE, f"GET {url} failed: {exc}", url=url) from exc

        if allow_missing and r.status_code == 404:
            return None
        if r.status_code >= 400:
            self._logger.warning("GET non-2xx %s: %s %s", url, r.status_code, r.text)
            raise CollaboratorError(self.SERVICE, f"GET {url} returned {r.status_code}", status_code=r.status_code, url=url)

        try:
            return r.json()
        except ValueError as exc:
            raise CollaboratorError(self.SERVICE, f"invalid JSON from {url}", url=url) from exc

    def _parse(self, adapter: TypeAdapter, data: Any, path: str) -> Any:
        try:
            return adapter.validate_python(data)
        except ValidationError as exc:
            raise CollaboratorError(self.SERVICE, f"unexpected payload from {path}: {exc}") from exc

    async def fetch_contract(self, contract_id: str) -> Optional[Dict[str, Any]]:
        data = await self._get(f"/contracts/{contract_id}", allow_missing=True)
        if not data or "state" not in data:
            return None
        return data

    async def fetch_tokens(self, type: Optional[TokenType] = None) -> List[CommunityToken]:
        path = "/tokens"
        data = await self._get(path, {"type": type.value if type else None})
        return self._parse(TypeAdapter(List[CommunityToken]), data or [], path)

    async def fetch_token_metadata(self, contract_id: str) -> Optional[CommunityToken]:
        path = f"/tokens/{contract_id}/metadata"
        data = await self._get(path, allow_missing=True)
        return self._parse(TypeAdapter(CommunityToken), data, path) if data else None

    async def fetch_token_state_metadata(self, contract_id: str) -> Optional[TokenEntity]:
        path = f"/tokens/{contract_id}/state-metadata"
        data = await self._get(path, allow_missing=True)
        return self._parse(TypeAdapter(TokenEntity), data, path) if data else None

    async def fetch_users(self) -> List[UserEntity]:
        path = "/users"
        return self._parse(TypeAdapter(List[UserEntity]), await self._get(path) or [], path)

    async def fetch_balances_for_address(self, address: str) -> List[UserBalance]:
        path = f"/balances/{address}"
        data = await self._get(path, allow_missing=True)
        return self._parse(TypeAdapter(List[UserBalance]), data or [], path)

    async def fetch_orders(
        self,
        token_id: str,
        from_ts: Optional[int] = None,
        to_ts: Optional[int] = None,
    ) -> List[OrderLogEntry]:
        path = "/orders"
        data = await self._get(path, {"token": token_id, "from": from_ts, "to": to_ts})
        return self._parse(TypeAdapter(List[OrderLogEntry]), data or [], path)

    async def refresh_contracts(self, contract_ids: Sequence[str]) -> None:
        ids = [c for c in contract_ids if c]
        if not ids:
            return
        try:
            async with self._client() as client:
                r = await client.post("/hook", json={"contracts": ids})
            if r.status_code >= 400:
                self._logger.warning("Cache refresh for %s returned %s", ids, r.status_code)
        except httpx.HTTPError as exc:
            self._logger.warning("Cache refresh for %s failed: %s", ids, exc)
