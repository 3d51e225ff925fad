"""Inbound webhook channel."""

from .event_log import EventLog
from .models import WebhookEvent

__all__ = ["EventLog", "WebhookEvent"]
