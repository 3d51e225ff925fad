"""Notifications through an external messaging CLI."""

from __future__ import annotations

import asyncio

from skillhook.config import NotifyConfig
from skillhook.notify.base import Notifier
from skillhook.utils.logging import get_logger

log = get_logger(__name__)


class CliNotifier(Notifier):
    """Runs ``binary_path`` with ``args`` formatted from channel, target and text."""

    def __init__(self, config: NotifyConfig) -> None:
        self._config = config

    @property
    def name(self) -> str:
        return "cli"

    def build_args(self, channel: str, target: str, text: str) -> list[str]:
        values = {"channel": channel, "target": target, "text": text}
        return [self._config.binary_path] + [
            arg.format_map(values) for arg in self._config.args
        ]

    async def send(self, channel: str, target: str, text: str) -> bool:
        args = self.build_args(channel, target, text)
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            log.error("notifier_binary_not_found", path=self._config.binary_path)
            return False

        try:
            _, stderr = await proc.communicate()
        finally:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()

        if proc.returncode != 0:
            log.error(
                "notifier_send_error",
                exit_code=proc.returncode,
                stderr=stderr.decode("utf-8", errors="replace")[:200],
            )
            return False
        return True
