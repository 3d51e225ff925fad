"""Typed schema for the per-skill ``skill.json`` manifest."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

WILDCARD = "*"
DEFAULT_ID_PATH = "payload.object.id"


class CommandSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    command: str = Field(min_length=1)
    meeting_id_path: str = Field(default=DEFAULT_ID_PATH, alias="meetingIdPath")
    description: str = ""


class WebhookCapability(BaseModel):
    """The capability block that makes a skill eligible for webhook routing."""

    model_config = ConfigDict(populate_by_name=True)

    webhook_events: list[str] = Field(alias="webhookEvents", min_length=1)
    emoji: str = "🔧"
    forward_port: int | None = Field(default=None, alias="forwardPort", ge=1, le=65535)
    forward_path: str = Field(default="/", alias="forwardPath")
    webhook_commands: dict[str, CommandSpec] = Field(default_factory=dict, alias="webhookCommands")

    @field_validator("webhook_events")
    @classmethod
    def _dedupe_events(cls, events: list[str]) -> list[str]:
        seen: dict[str, None] = {}
        for event in events:
            event = event.strip()
            if not event:
                raise ValueError("event patterns must be non-empty strings")
            seen.setdefault(event, None)
        return list(seen)

    @field_validator("emoji", "forward_path", mode="before")
    @classmethod
    def _null_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("forward_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"


class SkillManifest(BaseModel):
    """A webhook-capable skill as seen by the router."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    folder: str
    path: Path
    emoji: str = "🔧"
    events: tuple[str, ...]
    forward_port: int | None = None
    forward_path: str = "/"
    webhook_commands: dict[str, CommandSpec] = Field(default_factory=dict)

    def can_forward(self, event_type: str) -> bool:
        """Whether an exact ``event_type`` match has a transport to forward over."""
        return self.forward_port is not None or event_type in self.webhook_commands

    @classmethod
    def from_document(
        cls, folder: str, path: Path, document: dict[str, Any], capability: WebhookCapability
    ) -> SkillManifest:
        return cls(
            name=str(document.get("name") or folder),
            description=str(document.get("description") or ""),
            folder=folder,
            path=path,
            emoji=capability.emoji,
            events=tuple(capability.webhook_events),
            forward_port=capability.forward_port,
            forward_path=capability.forward_path,
            webhook_commands=capability.webhook_commands,
        )
