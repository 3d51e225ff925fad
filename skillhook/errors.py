"""Error taxonomy for routing, forwarding and notification."""

from __future__ import annotations

from typing import Any


class SkillhookError(Exception):
    """Base class for every skillhook error."""


class ManifestParseError(SkillhookError):
    """A skill manifest could not be read, decoded or validated."""

    def __init__(self, folder: str, reason: str) -> None:
        super().__init__(f"{folder}: {reason}")
        self.folder = folder
        self.reason = reason


class ForwardError(SkillhookError):
    """Base class for failures while forwarding an event to a skill."""

    kind = "forward"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class FieldExtractionError(ForwardError):
    """The identifier required by a command template is absent from the body."""

    kind = "field_extraction"


class TransportError(ForwardError):
    """The HTTP relay request could not be sent."""

    kind = "transport"


class ProcessError(ForwardError):
    """A skill command exited non-zero, timed out or could not be spawned."""

    kind = "process"


class NotificationError(SkillhookError):
    """The operator notification could not be delivered."""
