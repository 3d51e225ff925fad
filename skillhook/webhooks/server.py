"""Webhook HTTP server using aiohttp."""

from __future__ import annotations

import json
import time
from typing import Any
from urllib.parse import parse_qsl

from aiohttp import web
from multidict import MultiDict, MultiMapping

from skillhook.config import ServerConfig
from skillhook.core.bus import EventBus, WebhookReceived
from skillhook.core.pipeline import EventPipeline
from skillhook.utils.logging import get_logger
from skillhook.webhooks.models import WebhookEvent

log = get_logger(__name__)

NON_WEBHOOK_NOTE = "non-webhook-path"


def _flatten(values: MultiMapping[str]) -> dict[str, Any]:
    """Single values stay scalars; repeated keys become lists."""
    result: dict[str, Any] = {}
    for key in dict.fromkeys(values.keys()):
        items = values.getall(key)
        result[key] = items[0] if len(items) == 1 else list(items)
    return result


def parse_body(raw: bytes, content_type: str) -> Any:
    """JSON and urlencoded bodies are decoded; anything else is kept as text."""
    if not raw.strip():
        return None
    text = raw.decode("utf-8", errors="replace")
    if content_type == "application/json" or content_type.endswith("+json"):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            log.warning("webhook_body_invalid_json", size=len(raw))
            return text
    if content_type == "application/x-www-form-urlencoded":
        return _flatten(MultiDict(parse_qsl(text, keep_blank_values=True)))
    return text


class WebhookServer:
    """Accepts any request on any path and acknowledges it immediately.

    Requests on the webhook path are published to the bus for routing;
    everything else is only recorded in the event log.
    """

    def __init__(self, config: ServerConfig, bus: EventBus, pipeline: EventPipeline) -> None:
        self._config = config
        self._bus = bus
        self._pipeline = pipeline
        self._runner: web.AppRunner | None = None
        self._started = time.monotonic()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        app = self.build_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.bind, self._config.port)
        await site.start()
        self._started = time.monotonic()
        log.info(
            "webhook_server_started",
            bind=self._config.bind,
            port=self._config.port,
            webhook_path=self._config.webhook_path,
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        log.info("webhook_server_stopped")

    # ------------------------------------------------------------------
    # App construction
    # ------------------------------------------------------------------

    def build_app(self) -> web.Application:
        app = web.Application(client_max_size=self._config.max_body_size)
        app.router.add_get("/health", self._handle_health)
        app.router.add_route("*", "/{tail:.*}", self._handle_request)
        return app

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def _handle_health(self, request: web.Request) -> web.Response:
        uptime = round(time.monotonic() - self._started, 3)
        return web.json_response({"status": "ok", "uptime": uptime})

    async def _handle_request(self, request: web.Request) -> web.Response:
        raw = await request.read()
        is_webhook = self._pipeline.is_webhook_path(request.path)

        event = WebhookEvent(
            method=request.method,
            path=request.path,
            query=_flatten(request.query),
            headers=dict(request.headers),
            body=parse_body(raw, request.content_type),
            note=None if is_webhook else NON_WEBHOOK_NOTE,
        )
        self._pipeline.record(event)

        if not is_webhook:
            return web.json_response({"status": "ok"})

        # Acknowledge without waiting on routing; workers pick the event up.
        await self._bus.publish(WebhookReceived(webhook=event))
        log.info("webhook_received", event_id=event.id, method=event.method)
        return web.json_response({"status": "received", "id": event.id})
