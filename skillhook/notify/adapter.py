"""Best-effort operator notifications."""

from __future__ import annotations

import asyncio

from skillhook.config import NotifyConfig
from skillhook.errors import NotificationError
from skillhook.notify.base import Notifier
from skillhook.notify.cli_notifier import CliNotifier
from skillhook.notify.http_notifier import HttpNotifier
from skillhook.utils.logging import get_logger

log = get_logger(__name__)


def create_notifier(config: NotifyConfig) -> Notifier:
    if config.url:
        return HttpNotifier(config)
    return CliNotifier(config)


class NotifierAdapter:
    """Wraps a ``Notifier`` with a timeout; failures are logged, never raised."""

    def __init__(self, config: NotifyConfig, notifier: Notifier | None = None) -> None:
        self._config = config
        self._notifier = notifier or create_notifier(config)

    @property
    def enabled(self) -> bool:
        return bool(self._config.target)

    async def notify(self, text: str) -> None:
        if not self.enabled:
            log.debug("notify_skipped_no_target")
            return

        try:
            await self._deliver(text)
        except NotificationError as e:
            log.warning("notify_failed", notifier=self._notifier.name, error=str(e))
        except Exception:
            log.exception("notify_error", notifier=self._notifier.name)
        else:
            log.info("notify_sent", notifier=self._notifier.name, chars=len(text))

    async def _deliver(self, text: str) -> None:
        try:
            ok = await asyncio.wait_for(
                self._notifier.send(self._config.channel, self._config.target, text),
                timeout=self._config.timeout,
            )
        except asyncio.TimeoutError:
            raise NotificationError(f"timed out after {self._config.timeout:g}s") from None
        if not ok:
            raise NotificationError("notifier reported failure")

    async def close(self) -> None:
        await self._notifier.close()
