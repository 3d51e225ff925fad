"""Abstract notifier base class."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Notifier(ABC):
    """Delivers a human-readable message to an operator."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    async def send(self, channel: str, target: str, text: str) -> bool:
        """Return True when the message was accepted for delivery."""
        ...

    async def close(self) -> None:
        return None
