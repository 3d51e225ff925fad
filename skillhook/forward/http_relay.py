"""Relay of webhook bodies to skills listening on a local port."""

from __future__ import annotations

from typing import Any

import httpx

from skillhook.errors import TransportError
from skillhook.utils.logging import get_logger

log = get_logger(__name__)


class HttpRelay:
    """POSTs the webhook body to ``http://localhost:<port><path>``.

    Any response counts as delivered; only failing to send is an error.
    """

    def __init__(self, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def post(self, port: int, path: str, body: Any) -> httpx.Response:
        url = f"http://localhost:{port}{path}"
        client = await self._get_client()
        try:
            resp = await client.post(url, json=body, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise TransportError(f"Relay to {url} timed out after {self._timeout:g}s", url=url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Relay to {url} failed: {e}", url=url) from e
        log.info("http_relay_response", url=url, status=resp.status_code)
        return resp
