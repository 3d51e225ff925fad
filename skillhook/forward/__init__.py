"""Auto-forwarding of webhook events to skills."""

from .command import CommandResult, CommandRunner, render_command
from .dispatcher import ForwardDispatcher, extract_event_type
from .fieldpath import MISSING, resolve_field_path
from .http_relay import HttpRelay
from .outcome import Failed, ForwardOutcome, Forwarded, NoMatch, Transport

__all__ = [
    "CommandResult",
    "CommandRunner",
    "render_command",
    "ForwardDispatcher",
    "extract_event_type",
    "MISSING",
    "resolve_field_path",
    "HttpRelay",
    "Failed",
    "ForwardOutcome",
    "Forwarded",
    "NoMatch",
    "Transport",
]
