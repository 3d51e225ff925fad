"""Tests for the inbound aiohttp server."""

import asyncio
import io
import json
from unittest.mock import AsyncMock

import pytest
from aiohttp.test_utils import TestClient, TestServer

from skillhook.config import NotifyConfig, ServerConfig
from skillhook.core.bus import EventBus, EventType
from skillhook.core.pipeline import EventPipeline
from skillhook.forward.dispatcher import ForwardDispatcher
from skillhook.forward.outcome import NoMatch
from skillhook.notify.adapter import NotifierAdapter
from skillhook.webhooks.event_log import EventLog
from skillhook.webhooks.server import WebhookServer, parse_body


# ---------------------------------------------------------------------------
# Body parsing
# ---------------------------------------------------------------------------

class TestParseBody:
    def test_json(self):
        assert parse_body(b'{"event": "x"}', "application/json") == {"event": "x"}

    def test_vendor_json(self):
        assert parse_body(b'{"a": 1}', "application/vnd.api+json") == {"a": 1}

    def test_invalid_json_kept_as_text(self):
        assert parse_body(b"not json", "application/json") == "not json"

    def test_form(self):
        assert parse_body(b"a=1&b=2&b=3", "application/x-www-form-urlencoded") == {"a": "1", "b": ["2", "3"]}

    def test_empty(self):
        assert parse_body(b"", "application/json") is None

    def test_plain_text(self):
        assert parse_body(b"hello", "text/plain") == "hello"


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------

@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def dispatcher():
    dispatcher = AsyncMock(spec=ForwardDispatcher)
    dispatcher.auto_forward.return_value = NoMatch(event_type="x")
    dispatcher.event_type_of.return_value = "x"
    return dispatcher


@pytest.fixture
def notifier():
    return AsyncMock(spec=NotifierAdapter)


@pytest.fixture
def pipeline(registry, dispatcher, notifier, stream):
    return EventPipeline("/webhook", registry, dispatcher, notifier, EventLog(stream))


@pytest.fixture
def server(bus, pipeline):
    return WebhookServer(ServerConfig(webhook_path="/webhook"), bus, pipeline)


@pytest.fixture
async def client(server, bus, pipeline):
    bus.subscribe(EventType.WEBHOOK_RECEIVED, pipeline.on_webhook, workers=2)
    await bus.start()
    app = server.build_app()
    async with TestClient(TestServer(app)) as c:
        yield c
    await bus.stop()


def records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestWebhookServer:
    async def test_webhook_path_acknowledged_with_id(self, client, bus, stream, dispatcher, notifier):
        resp = await client.post("/webhook", json={"event": "x"})

        assert resp.status == 200
        body = await resp.json()
        assert body["status"] == "received"

        await bus.join()
        logged = records(stream)
        assert len(logged) == 1
        assert logged[0]["id"] == body["id"]
        assert logged[0]["body"] == {"event": "x"}
        assert "note" not in logged[0]
        dispatcher.auto_forward.assert_awaited_once()
        notifier.notify.assert_awaited_once()

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    async def test_any_method_on_webhook_path(self, client, bus, method, stream):
        resp = await client.request(method, "/webhook?challenge=abc")

        assert resp.status == 200
        assert (await resp.json())["status"] == "received"
        await bus.join()
        logged = records(stream)[0]
        assert logged["method"] == method
        assert logged["query"] == {"challenge": "abc"}

    async def test_other_path_generic_ack(self, client, bus, stream, dispatcher, notifier):
        resp = await client.post("/wp-login.php", json={"event": "meeting.ended"})

        assert resp.status == 200
        assert await resp.json() == {"status": "ok"}

        await bus.join()
        logged = records(stream)
        assert logged[0]["note"] == "non-webhook-path"
        assert logged[0]["path"] == "/wp-login.php"
        dispatcher.auto_forward.assert_not_called()
        notifier.notify.assert_not_called()

    async def test_health(self, client, stream):
        resp = await client.get("/health")

        assert resp.status == 200
        body = await resp.json()
        assert body["status"] == "ok"
        assert body["uptime"] >= 0
        assert stream.getvalue() == ""

    async def test_ack_does_not_wait_for_routing(self, client, bus, dispatcher):
        release = asyncio.Event()

        async def slow_forward(*args, **kwargs):
            await release.wait()
            return NoMatch()

        dispatcher.auto_forward.side_effect = slow_forward

        resp = await asyncio.wait_for(client.post("/webhook", json={"event": "x"}), timeout=2)
        assert resp.status == 200

        release.set()
        await bus.join()

    async def test_routing_failure_does_not_change_ack(self, client, bus, dispatcher):
        dispatcher.auto_forward.side_effect = RuntimeError("boom")

        resp = await client.post("/webhook", json={"event": "x"})

        assert resp.status == 200
        assert (await resp.json())["status"] == "received"
        await bus.join()

    async def test_form_body(self, client, bus, stream):
        resp = await client.post("/webhook", data={"event": "x", "id": "1"})

        assert resp.status == 200
        await bus.join()
        assert records(stream)[0]["body"] == {"event": "x", "id": "1"}
