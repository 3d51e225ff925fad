"""Skill discovery and event matching."""

from .manifest import CommandSpec, SkillManifest, WebhookCapability
from .matcher import MatchResult, find_exact, match, pattern_matches
from .registry import RegistryScan, SkillRegistry, SkippedSkill

__all__ = [
    "CommandSpec",
    "SkillManifest",
    "WebhookCapability",
    "MatchResult",
    "find_exact",
    "match",
    "pattern_matches",
    "RegistryScan",
    "SkillRegistry",
    "SkippedSkill",
]
