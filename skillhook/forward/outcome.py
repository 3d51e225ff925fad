"""Result of an auto-forward attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from skillhook.errors import ForwardError


class Transport(str, Enum):
    HTTP = "http"
    COMMAND = "command"


@dataclass(frozen=True)
class Forwarded:
    skill_name: str
    transport: Transport
    event_type: str = ""
    emoji: str = ""
    # http: status_code, url; command: description, meeting_id, output
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NoMatch:
    event_type: str = ""


@dataclass(frozen=True)
class Failed:
    skill_name: str
    error: ForwardError
    event_type: str = ""
    emoji: str = ""

    @property
    def reason(self) -> str:
        return self.error.kind


ForwardOutcome = Union[Forwarded, NoMatch, Failed]
