"""Discovery of installed skills that can handle webhooks."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from skillhook.config import SkillsConfig
from skillhook.errors import ManifestParseError
from skillhook.skills.manifest import SkillManifest, WebhookCapability
from skillhook.utils.logging import get_logger
from skillhook.utils.platform import PROJECT_DIR, running_from_checkout

log = get_logger(__name__)


@dataclass(frozen=True)
class SkippedSkill:
    folder: str
    reason: str


@dataclass
class RegistryScan:
    skills: list[SkillManifest] = field(default_factory=list)
    skipped: list[SkippedSkill] = field(default_factory=list)


class SkillRegistry:
    """Scans the skills root on every call; nothing is cached.

    Discovery order (folder name) is the tie-break priority used when more
    than one skill matches an event.
    """

    def __init__(self, config: SkillsConfig, own_dir: Path | None = None) -> None:
        self._config = config
        self._root = config.get_root()
        self._own_dir = (own_dir or PROJECT_DIR).resolve()
        if not config.root and not running_from_checkout():
            log.warning(
                "skills_root_defaulted",
                root=str(self._root),
                msg="skillhook is not running from a skill folder; set skills.root",
            )

    @property
    def root(self) -> Path:
        return self._root

    def discover(self) -> list[SkillManifest]:
        return self.scan().skills

    def scan(self) -> RegistryScan:
        result = RegistryScan()
        if not self._root.is_dir():
            log.warning("skills_root_missing", root=str(self._root))
            return result

        for entry in self._candidates():
            manifest_path = entry / self._config.manifest_name
            if not manifest_path.is_file():
                continue
            try:
                skill = self._load(entry, manifest_path)
            except ManifestParseError as e:
                log.warning("skill_manifest_invalid", folder=e.folder, reason=e.reason)
                result.skipped.append(SkippedSkill(e.folder, e.reason))
                continue
            if skill is None:
                reason = f"no '{self._config.capability_key}' block"
                log.warning("skill_not_webhook_capable", folder=entry.name, reason=reason)
                result.skipped.append(SkippedSkill(entry.name, reason))
                continue
            result.skills.append(skill)

        log.debug(
            "skills_discovered",
            count=len(result.skills),
            skipped=len(result.skipped),
        )
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _candidates(self) -> list[Path]:
        excluded = set(self._config.exclude)
        candidates = []
        for entry in sorted(self._root.iterdir(), key=lambda p: p.name):
            if not entry.is_dir() or entry.name.startswith("."):
                continue
            if entry.name in excluded or self._is_own_dir(entry):
                continue
            candidates.append(entry)
        return candidates

    def _is_own_dir(self, entry: Path) -> bool:
        resolved = entry.resolve()
        return resolved == self._own_dir or resolved in self._own_dir.parents

    def _load(self, entry: Path, manifest_path: Path) -> SkillManifest | None:
        folder = entry.name
        try:
            document = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestParseError(folder, f"unreadable manifest: {e}") from e
        except json.JSONDecodeError as e:
            raise ManifestParseError(folder, f"invalid JSON: {e}") from e

        if not isinstance(document, dict):
            raise ManifestParseError(folder, "manifest must be a JSON object")

        block = document.get(self._config.capability_key)
        if block is None:
            return None
        if not isinstance(block, dict):
            raise ManifestParseError(
                folder, f"'{self._config.capability_key}' must be an object"
            )

        try:
            capability = WebhookCapability.model_validate(block)
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ManifestParseError(folder, errors) from e

        return SkillManifest.from_document(folder, entry, document, capability)
