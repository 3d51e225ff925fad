"""Async pub/sub event bus with bounded worker pools per subscriber."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Coroutine
from uuid import uuid4

from skillhook.utils.logging import get_logger
from skillhook.webhooks.models import WebhookEvent

log = get_logger(__name__)


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

class EventType(str, Enum):
    WEBHOOK_RECEIVED = "webhook.received"


@dataclass
class Event:
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid4().hex[:12])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class WebhookReceived(Event):
    type: EventType = field(default=EventType.WEBHOOK_RECEIVED, init=False)

    # Populated by the inbound server, consumed by the pipeline
    webhook: WebhookEvent | None = field(default=None)


# ---------------------------------------------------------------------------
# Bus
# ---------------------------------------------------------------------------

Handler = Callable[[Event], Coroutine[Any, Any, None]]


@dataclass
class _Subscription:
    handler: Handler
    queue: asyncio.Queue[Event]
    workers: int


class EventBus:
    """Fire-and-forget delivery: ``publish`` never waits on handlers.

    Each subscription gets its own bounded queue drained by ``workers``
    concurrent consumers. A full queue drops the event with a warning.
    """

    def __init__(self, max_queue_size: int = 256) -> None:
        self._subscribers: dict[EventType, list[_Subscription]] = {}
        self._max_queue_size = max_queue_size
        self._running = False
        self._tasks: list[asyncio.Task[None]] = []

    def subscribe(self, event_type: EventType, handler: Handler, workers: int = 1) -> None:
        queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers.setdefault(event_type, []).append(
            _Subscription(handler, queue, max(1, workers))
        )

    async def publish(self, event: Event) -> bool:
        """Queue ``event`` for every subscriber. Returns False if any queue was full."""
        delivered = True
        for sub in self._subscribers.get(event.type, []):
            try:
                sub.queue.put_nowait(event)
            except asyncio.QueueFull:
                delivered = False
                log.warning(
                    "event_queue_full",
                    event_type=event.type.value,
                    handler=sub.handler.__qualname__,
                )
        return delivered

    async def start(self) -> None:
        self._running = True
        for event_type, subs in self._subscribers.items():
            for sub in subs:
                for n in range(sub.workers):
                    task = asyncio.create_task(
                        self._consumer(sub, event_type.value),
                        name=f"bus-{event_type.value}-{sub.handler.__qualname__}-{n}",
                    )
                    self._tasks.append(task)

    async def _consumer(self, sub: _Subscription, event_type: str) -> None:
        while self._running:
            try:
                event = await asyncio.wait_for(sub.queue.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            try:
                await sub.handler(event)
            except Exception:
                log.exception("handler_error", event_type=event_type, event_id=event.id)
            finally:
                sub.queue.task_done()

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        for subs in self._subscribers.values():
            for sub in subs:
                await sub.queue.join()

    async def stop(self) -> None:
        self._running = False
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
