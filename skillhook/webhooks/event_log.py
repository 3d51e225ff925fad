"""Newline-delimited JSON log of every inbound event."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import IO, Any

from skillhook.utils.logging import get_logger
from skillhook.webhooks.models import WebhookEvent

log = get_logger(__name__)

_REDACTED_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "proxy-authorization"})


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    return {
        name: ("***REDACTED***" if name.lower() in _REDACTED_HEADERS else value)
        for name, value in headers.items()
    }


class EventLog:
    """Writes one JSON record per event to a text stream (stdout by default)."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._owned = False

    @classmethod
    def open(cls, path: str | Path | None) -> EventLog:
        if not path:
            return cls()
        target = Path(path).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        event_log = cls(open(target, "a", encoding="utf-8"))
        event_log._owned = True
        return event_log

    def write(self, event: WebhookEvent) -> None:
        record: dict[str, Any] = event.to_record()
        record["headers"] = redact_headers(record["headers"])
        try:
            line = json.dumps(record, ensure_ascii=False, default=str)
            self._stream.write(line + "\n")
            self._stream.flush()
        except (OSError, ValueError):
            log.exception("event_log_write_error", event_id=event.id)

    def close(self) -> None:
        if self._owned:
            self._stream.close()
