"""Core modules for skillhook."""

from .bus import Event, EventBus, EventType, WebhookReceived
from .pipeline import EventPipeline

__all__ = [
    "Event",
    "EventBus",
    "EventType",
    "WebhookReceived",
    "EventPipeline",
]
