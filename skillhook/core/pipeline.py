"""Per-event handling: log → auto-forward → notify operator."""

from __future__ import annotations

import asyncio

import structlog

from skillhook.core.bus import Event, WebhookReceived
from skillhook.core.messages import format_failed, format_forwarded, format_menu
from skillhook.forward.dispatcher import ForwardDispatcher
from skillhook.forward.outcome import Failed, ForwardOutcome, Forwarded, NoMatch
from skillhook.notify.adapter import NotifierAdapter
from skillhook.skills.matcher import match
from skillhook.skills.registry import SkillRegistry
from skillhook.utils.logging import get_logger
from skillhook.webhooks.event_log import EventLog
from skillhook.webhooks.models import WebhookEvent

log = get_logger(__name__)


class EventPipeline:
    """Routes one webhook event at a time; holds no state between events."""

    def __init__(
        self,
        webhook_path: str,
        registry: SkillRegistry,
        dispatcher: ForwardDispatcher,
        notifier: NotifierAdapter,
        event_log: EventLog | None = None,
    ) -> None:
        self._webhook_path = webhook_path
        self._registry = registry
        self._dispatcher = dispatcher
        self._notifier = notifier
        self._event_log = event_log

    async def on_webhook(self, event: Event) -> None:
        """Bus handler for ``WebhookReceived`` events; the event is already recorded."""
        if isinstance(event, WebhookReceived) and event.webhook is not None:
            await self.route(event.webhook)

    def is_webhook_path(self, path: str) -> bool:
        return path == self._webhook_path

    def record(self, event: WebhookEvent) -> None:
        """Write ``event`` to the event log. Never raises."""
        if self._event_log is not None:
            self._event_log.write(event)

    async def handle(self, event: WebhookEvent) -> ForwardOutcome:
        self.record(event)
        return await self.route(event)

    async def route(self, event: WebhookEvent) -> ForwardOutcome:
        with structlog.contextvars.bound_contextvars(event_id=event.id):
            return await self._route(event)

    async def _route(self, event: WebhookEvent) -> ForwardOutcome:
        if not self.is_webhook_path(event.path):
            log.debug("event_ignored_path", path=event.path)
            return NoMatch()

        skills = await asyncio.to_thread(self._registry.discover)
        outcome = await self._dispatcher.auto_forward(event.body, skills)
        event_type = self._dispatcher.event_type_of(event.body)

        log.info(
            "event_routed",
            event_type=event_type,
            outcome=type(outcome).__name__,
        )

        if isinstance(outcome, Forwarded):
            await self._notifier.notify(format_forwarded(outcome))
            return outcome

        menu = format_menu(event, event_type, match(event_type, skills))
        if isinstance(outcome, Failed):
            await self._notifier.notify(format_failed(outcome) + "\n\n" + menu)
        else:
            await self._notifier.notify(menu)
        return outcome
