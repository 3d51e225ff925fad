"""Notifications through an HTTP endpoint."""

from __future__ import annotations

import httpx

from skillhook.config import NotifyConfig
from skillhook.notify.base import Notifier
from skillhook.utils.logging import get_logger

log = get_logger(__name__)


class HttpNotifier(Notifier):
    def __init__(self, config: NotifyConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    @property
    def name(self) -> str:
        return "http"

    async def send(self, channel: str, target: str, text: str) -> bool:
        body = {"channel": channel, "target": target, "text": text}
        resp = await self._client.post(self._config.url, json=body)
        if resp.status_code >= 400:
            log.error("notifier_http_error", status=resp.status_code, body=resp.text[:200])
            return False
        return True

    async def close(self) -> None:
        await self._client.aclose()
