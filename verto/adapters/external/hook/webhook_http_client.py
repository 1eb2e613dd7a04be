import logging
from typing import Optional

import httpx

from ....core.repositories.hook_repository import SwapHookRepository


class WebhookHttpClient(SwapHookRepository):
    """POST {hook_url}/api/transaction?id=<order_id> after every swap."""

    def __init__(
        self,
        hook_url: str,
        timeout_sec: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._hook_url = hook_url.rstrip("/")
        self._timeout = timeout_sec
        self._transport = transport
        self._logger = logging.getLogger(self.__class__.__name__)

    async def notify_transaction(self, order_id: str) -> None:
        url = f"{self._hook_url}/api/transaction"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.post(url, params={"id": order_id})
        except httpx.HTTPError as exc:
            self._logger.warning("Webhook for %s failed: %s", order_id, exc)
            return

        if r.status_code >= 400:
            self._logger.warning("Webhook for %s returned %s: %s", order_id, r.status_code, r.text)
        else:
            self._logger.debug("Webhook sent for %s", order_id)
