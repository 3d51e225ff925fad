"""Event-type to skill matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from skillhook.skills.manifest import WILDCARD, SkillManifest


@dataclass
class MatchResult:
    matching: list[SkillManifest] = field(default_factory=list)
    others: list[SkillManifest] = field(default_factory=list)


def pattern_matches(pattern: str, event_type: str) -> bool:
    """Exact equality, or prefix match for patterns ending in ``*``.

    ``payment.*`` matches ``payment.failed`` but not ``payment``.
    """
    if pattern.endswith(WILDCARD):
        return event_type.startswith(pattern[: -len(WILDCARD)])
    return pattern == event_type


def match(event_type: str, skills: Sequence[SkillManifest]) -> MatchResult:
    """Partition skills into those whose patterns accept ``event_type`` and the rest.

    Relative discovery order is preserved in both partitions.
    """
    result = MatchResult()
    for skill in skills:
        if any(pattern_matches(p, event_type) for p in skill.events):
            result.matching.append(skill)
        else:
            result.others.append(skill)
    return result


def find_exact(event_type: str, skills: Sequence[SkillManifest]) -> SkillManifest | None:
    """First skill declaring ``event_type`` literally; wildcards never count."""
    if not event_type or event_type.endswith(WILDCARD):
        return None
    for skill in skills:
        if event_type in skill.events:
            return skill
    return None
