"""Operator-facing notification texts."""

from __future__ import annotations

import json
from typing import Any, Sequence

from skillhook.forward.outcome import Failed, Forwarded, Transport
from skillhook.skills.manifest import SkillManifest
from skillhook.skills.matcher import MatchResult
from skillhook.webhooks.models import WebhookEvent

_PREVIEW_LIMIT = 300


def _preview(body: Any) -> str:
    if body is None:
        return "(empty)"
    if isinstance(body, str):
        text = body
    else:
        text = json.dumps(body, ensure_ascii=False, default=str)
    if len(text) > _PREVIEW_LIMIT:
        text = text[:_PREVIEW_LIMIT] + "…"
    return text


def format_forwarded(outcome: Forwarded) -> str:
    """Informational confirmation; nothing is asked of the operator."""
    event_type = outcome.event_type or "(unknown)"
    details = outcome.details
    lines = [f"{outcome.emoji} Auto-forwarded `{event_type}` to {outcome.skill_name}".strip()]

    if outcome.transport == Transport.COMMAND:
        lines.append(f"Action: {details.get('description', '')}")
        if details.get("meeting_id"):
            lines.append(f"Meeting: {details['meeting_id']}")
        if details.get("output"):
            lines.append(f"Output:\n{details['output']}")
    else:
        lines.append(f"Relayed via HTTP ({details.get('status_code', '?')})")
        if details.get("identifier"):
            lines.append(f"ID: {details['identifier']}")
    return "\n".join(lines)


def format_failed(outcome: Failed) -> str:
    error = outcome.error
    details = error.details
    event_type = outcome.event_type or "(unknown)"
    lines = [f"❌ Auto-forward of `{event_type}` to {outcome.skill_name} failed ({error.kind})"]
    if details.get("description"):
        lines.append(f"Action: {details['description']}")
    if details.get("meeting_id"):
        lines.append(f"Meeting: {details['meeting_id']}")
    lines.append(f"Error: {error.message}")
    if details.get("output"):
        lines.append(f"Output:\n{details['output']}")
    return "\n".join(lines)


def _entry(number: int, skill: SkillManifest) -> str:
    line = f"{number}. {skill.emoji} {skill.name}"
    if skill.description:
        line += f" — {skill.description}"
    return line


def format_menu(event: WebhookEvent, event_type: str, result: MatchResult) -> str:
    """Numbered menu of candidate skills, matching ones first, plus an ignore option."""
    lines = [
        f"📨 Webhook received: `{event_type or '(no event type)'}`",
        f"Event ID: {event.id}",
        f"Payload: {_preview(event.body)}",
        "",
    ]

    number = 0
    sections: Sequence[tuple[str, list[SkillManifest]]] = (
        ("Matching skills:", result.matching),
        ("Other skills:", result.others),
    )
    for title, skills in sections:
        if not skills:
            continue
        lines.append(title)
        for skill in skills:
            number += 1
            lines.append(_entry(number, skill))
        lines.append("")

    if number == 0:
        lines.append("No webhook-capable skills are installed.")
        lines.append("")

    lines.append("0. Ignore this event")
    lines.append("Reply with a number, or tell me what to do with it.")
    return "\n".join(lines)
