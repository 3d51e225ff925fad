"""skillhook entry point: wires everything together and runs the listener."""

from __future__ import annotations

import asyncio
import signal
import sys

import click

from skillhook import __version__
from skillhook.config import Settings, load_settings
from skillhook.core.bus import EventBus, EventType
from skillhook.core.pipeline import EventPipeline
from skillhook.forward.dispatcher import ForwardDispatcher
from skillhook.notify.adapter import NotifierAdapter
from skillhook.skills.registry import SkillRegistry
from skillhook.utils.logging import get_logger, setup_logging
from skillhook.webhooks.event_log import EventLog
from skillhook.webhooks.server import WebhookServer

log = get_logger(__name__)


class SkillhookApp:
    """Main application orchestrator."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

        self.bus = EventBus(max_queue_size=settings.dispatch.queue_size)
        self.event_log = EventLog.open(settings.event_log_path)
        self.registry = SkillRegistry(settings.skills)
        self.dispatcher = ForwardDispatcher(self.registry, settings.forward)
        self.notifier = NotifierAdapter(settings.notify)
        self.pipeline = EventPipeline(
            webhook_path=settings.server.webhook_path,
            registry=self.registry,
            dispatcher=self.dispatcher,
            notifier=self.notifier,
            event_log=self.event_log,
        )
        self.server = WebhookServer(settings.server, self.bus, self.pipeline)

    async def start(self) -> None:
        log.info(
            "skillhook_starting",
            version=__version__,
            skills_root=str(self.registry.root),
        )
        if not self.notifier.enabled:
            log.warning("notify_target_missing", msg="Operator notifications are disabled.")

        self.bus.subscribe(
            EventType.WEBHOOK_RECEIVED,
            self.pipeline.on_webhook,
            workers=self.settings.dispatch.max_concurrent,
        )
        await self.bus.start()
        await self.server.start()
        log.info("skillhook_ready")

    async def stop(self) -> None:
        log.info("skillhook_stopping")
        await self.server.stop()
        await self.bus.stop()
        await self.dispatcher.close()
        await self.notifier.close()
        self.event_log.close()
        log.info("skillhook_stopped")


async def run(settings: Settings) -> None:
    app = SkillhookApp(settings)

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        log.info("shutdown_signal")
        stop_event.set()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler)

    await app.start()

    try:
        if sys.platform == "win32":
            while not stop_event.is_set():
                await asyncio.sleep(1)
        else:
            await stop_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        await app.stop()


def _apply_overrides(
    settings: Settings,
    log_level: str | None = None,
    port: int | None = None,
    skills_root: str | None = None,
) -> Settings:
    if log_level:
        settings.log_level = log_level
    if port is not None:
        settings.server.port = port
    if skills_root:
        settings.skills.root = skills_root
    return settings


@click.command()
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--port", type=int, default=None, help="Port for the webhook listener")
@click.option("--skills-root", default=None, help="Directory containing installed skills")
def cli(
    config_path: str | None,
    log_level: str | None,
    port: int | None,
    skills_root: str | None,
) -> None:
    """Receive webhooks and route them to installed skills."""
    settings = _apply_overrides(load_settings(config_path), log_level, port, skills_root)
    setup_logging(level=settings.log_level, json_output=settings.log_json)
    asyncio.run(run(settings))


@click.command("list-skills")
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--skills-root", default=None, help="Directory containing installed skills")
def list_skills(config_path: str | None, skills_root: str | None) -> None:
    """Show webhook-capable skills and why other folders were skipped."""
    settings = _apply_overrides(load_settings(config_path), skills_root=skills_root)
    setup_logging(level="WARNING", json_output=settings.log_json)
    scan = SkillRegistry(settings.skills).scan()

    if not scan.skills:
        click.echo("No webhook-capable skills found.")
    for skill in scan.skills:
        transports = []
        if skill.forward_port is not None:
            transports.append(f"http :{skill.forward_port}{skill.forward_path}")
        if skill.webhook_commands:
            transports.append("commands: " + ", ".join(skill.webhook_commands))
        suffix = f" [{'; '.join(transports)}]" if transports else ""
        click.echo(f"{skill.emoji} {skill.name} ({skill.folder}): {', '.join(skill.events)}{suffix}")
    for skipped in scan.skipped:
        click.echo(f"skipped {skipped.folder}: {skipped.reason}")


if __name__ == "__main__":
    cli()
