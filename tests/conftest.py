"""Shared fixtures: throwaway skill trees."""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from skillhook.config import SkillsConfig
from skillhook.skills.registry import SkillRegistry


@pytest.fixture
def skills_root(tmp_path: Path) -> Path:
    root = tmp_path / "skills"
    root.mkdir()
    return root


@pytest.fixture
def make_skill(skills_root: Path) -> Callable[..., Path]:
    """Create ``<skills_root>/<folder>/skill.json``.

    ``webhook`` is the capability block; ``raw`` writes text verbatim.
    """

    def _make(
        folder: str,
        webhook: dict[str, Any] | None = None,
        *,
        name: str | None = None,
        description: str = "",
        raw: str | None = None,
    ) -> Path:
        path = skills_root / folder
        path.mkdir()
        if raw is not None:
            (path / "skill.json").write_text(raw)
            return path
        document: dict[str, Any] = {"name": name or folder, "description": description}
        if webhook is not None:
            document["webhook"] = webhook
        (path / "skill.json").write_text(json.dumps(document))
        return path

    return _make


@pytest.fixture
def registry(skills_root: Path) -> SkillRegistry:
    return SkillRegistry(SkillsConfig(root=str(skills_root)))
