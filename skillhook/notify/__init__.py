"""Operator notification delivery."""

from .adapter import NotifierAdapter, create_notifier
from .base import Notifier
from .cli_notifier import CliNotifier
from .http_notifier import HttpNotifier

__all__ = [
    "NotifierAdapter",
    "create_notifier",
    "Notifier",
    "CliNotifier",
    "HttpNotifier",
]
