"""Unattended forwarding of an event to the first exactly-matching skill."""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

from skillhook.config import ForwardConfig
from skillhook.errors import FieldExtractionError, ForwardError, ProcessError
from skillhook.forward.command import CommandRunner, render_command, truncate
from skillhook.forward.fieldpath import MISSING, resolve_field_path
from skillhook.forward.http_relay import HttpRelay
from skillhook.forward.outcome import Failed, ForwardOutcome, Forwarded, NoMatch, Transport
from skillhook.skills.manifest import CommandSpec, SkillManifest
from skillhook.skills.matcher import find_exact
from skillhook.skills.registry import SkillRegistry
from skillhook.utils.logging import get_logger

log = get_logger(__name__)


def extract_event_type(body: Any, field_path: str = "event") -> str:
    value = resolve_field_path(body, field_path)
    if value is MISSING or isinstance(value, (dict, list)):
        return ""
    return str(value)


class ForwardDispatcher:
    """Chooses a skill for an event and forwards it without operator input.

    Only literal event patterns qualify. The HTTP relay is used when the skill
    declares a port, otherwise a command keyed by the exact event type.
    """

    def __init__(
        self,
        registry: SkillRegistry,
        config: ForwardConfig | None = None,
        *,
        relay: HttpRelay | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or ForwardConfig()
        self._relay = relay or HttpRelay(timeout=self._config.http_timeout)
        self._runner = runner or CommandRunner(
            timeout=self._config.command_timeout,
            max_concurrent=self._config.max_concurrent_commands,
        )

    @property
    def config(self) -> ForwardConfig:
        return self._config

    async def close(self) -> None:
        await self._relay.close()

    def event_type_of(self, body: Any) -> str:
        return extract_event_type(body, self._config.event_field)

    async def auto_forward(
        self, body: Any, skills: Sequence[SkillManifest] | None = None
    ) -> ForwardOutcome:
        event_type = self.event_type_of(body)
        if skills is None:
            skills = await asyncio.to_thread(self._registry.discover)

        skill = find_exact(event_type, skills)
        if skill is None:
            log.debug("auto_forward_no_match", event_type=event_type)
            return NoMatch(event_type=event_type)

        if not skill.can_forward(event_type):
            log.info("auto_forward_not_configured", skill=skill.name, event_type=event_type)
            return NoMatch(event_type=event_type)

        try:
            if skill.forward_port is not None:
                return await self._relay_http(skill, event_type, body)
            spec = skill.webhook_commands[event_type]
            return await self._run_command(skill, event_type, spec, body)
        except ForwardError as e:
            log.warning(
                "auto_forward_failed",
                skill=skill.name,
                event_type=event_type,
                reason=e.kind,
                error=e.message,
            )
            return Failed(skill_name=skill.name, error=e, event_type=event_type, emoji=skill.emoji)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def _relay_http(
        self, skill: SkillManifest, event_type: str, body: Any
    ) -> Forwarded:
        assert skill.forward_port is not None
        resp = await self._relay.post(skill.forward_port, skill.forward_path, body)
        log.info(
            "auto_forward_http",
            skill=skill.name,
            event_type=event_type,
            status=resp.status_code,
        )
        details: dict[str, Any] = {
            "status_code": resp.status_code,
            "url": str(resp.request.url),
        }
        identifier = resolve_field_path(body, self._config.default_id_path)
        if identifier is not MISSING:
            details["identifier"] = str(identifier)
        return Forwarded(
            skill_name=skill.name,
            transport=Transport.HTTP,
            event_type=event_type,
            emoji=skill.emoji,
            details=details,
        )

    async def _run_command(
        self, skill: SkillManifest, event_type: str, spec: CommandSpec, body: Any
    ) -> Forwarded:
        description = spec.description or spec.command
        meeting_id = resolve_field_path(body, spec.meeting_id_path)
        if meeting_id is MISSING or meeting_id == "" or isinstance(meeting_id, (dict, list)):
            raise FieldExtractionError(
                f"No value at '{spec.meeting_id_path}' in event body",
                path=spec.meeting_id_path,
                description=description,
            )

        command = render_command(spec.command, meeting_id)
        log.info(
            "auto_forward_command",
            skill=skill.name,
            event_type=event_type,
            meeting_id=str(meeting_id),
        )
        try:
            result = await self._runner.run(command, skill.path)
        except ProcessError as e:
            e.details.update(description=description, meeting_id=str(meeting_id))
            output = e.details.get("stderr") or e.details.get("stdout") or ""
            e.details["output"] = truncate(output, self._config.output_limit)
            raise

        return Forwarded(
            skill_name=skill.name,
            transport=Transport.COMMAND,
            event_type=event_type,
            emoji=skill.emoji,
            details={
                "command": command,
                "description": description,
                "meeting_id": str(meeting_id),
                "output": result.stdout[: self._config.output_limit],
            },
        )
