"""Dot-separated field paths into nested payloads."""

from __future__ import annotations

from typing import Any, Mapping, Sequence


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def resolve_field_path(data: Any, path: str) -> Any:
    """Walk ``data`` along ``path`` (``"payload.object.id"``).

    Mapping keys are looked up by name and list elements by integer index.
    Returns ``MISSING`` instead of raising when any step is absent or the
    value found is ``None``.
    """
    if not path:
        return MISSING
    current = data
    for part in path.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return MISSING
            current = current[part]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                current = current[int(part)]
            except (ValueError, IndexError):
                return MISSING
        else:
            return MISSING
    if current is None:
        return MISSING
    return current
