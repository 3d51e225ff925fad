"""Platform detection and path utilities."""

from __future__ import annotations

import os
import re
import shlex
import sys
from pathlib import Path

# Directory the skillhook checkout itself lives in. When installed as a skill
# next to its siblings, this folder is excluded from discovery.
PROJECT_DIR = Path(__file__).resolve().parents[2]

_SAFE_POWERSHELL_ARG = re.compile(r"[\w.:/+=-]+")
_POWERSHELL_QUOTES = re.compile("(['\u2018\u2019\u201a\u201b])")


def get_platform() -> str:
    if sys.platform == "win32":
        return "windows"
    if sys.platform == "darwin":
        return "macos"
    return "linux"


def get_config_dir() -> Path:
    env = os.environ.get("SKILLHOOK_CONFIG_DIR")
    if env:
        return Path(env)

    platform = get_platform()
    if platform == "windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "skillhook"
    if platform == "macos":
        return Path.home() / "Library" / "Application Support" / "skillhook"
    # Linux / XDG
    xdg = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg) / "skillhook"


def get_default_skills_root() -> Path:
    return PROJECT_DIR.parent


def running_from_checkout(project_dir: Path = PROJECT_DIR) -> bool:
    """True when skillhook runs from a skill folder rather than an installed package."""
    return (project_dir / "pyproject.toml").is_file()


def get_default_shell() -> str:
    if get_platform() == "windows":
        return "powershell"
    return "/bin/sh"


def shell_args(command: str) -> list[str]:
    """Argument vector that runs ``command`` through the platform shell."""
    shell = get_default_shell()
    if get_platform() == "windows":
        return [shell, "-NoProfile", "-Command", command]
    return [shell, "-c", command]


def quote_arg(value: str) -> str:
    """Quote ``value`` as a single literal argument for the platform shell."""
    if get_platform() != "windows":
        return shlex.quote(value)
    if _SAFE_POWERSHELL_ARG.fullmatch(value):
        return value
    # Single-quoted PowerShell strings are literal; quote characters, including
    # the typographic ones PowerShell also accepts, are escaped by doubling.
    return "'" + _POWERSHELL_QUOTES.sub(r"\1\1", value) + "'"
