"""Templated shell-command execution for skills."""

from __future__ import annotations

import asyncio
import os
import re
import signal
from dataclasses import dataclass
from pathlib import Path

from skillhook.errors import ProcessError
from skillhook.utils.logging import get_logger
from skillhook.utils.platform import get_platform, quote_arg, shell_args

log = get_logger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*[\w.-]*\s*\}\}")


def render_command(template: str, value: object) -> str:
    """Substitute ``value`` into every ``{{placeholder}}`` of ``template``.

    The value is quoted for the platform shell, so payload content can never
    add arguments or commands of its own.
    """
    quoted = quote_arg(str(value))
    return _PLACEHOLDER.sub(lambda _m: quoted, template)


def _kill_process_tree(proc: asyncio.subprocess.Process) -> None:
    """Kill ``proc`` and everything it spawned.

    On POSIX the command runs in its own session, so its process group holds
    the shell and all of its children.
    """
    if proc.returncode is not None:
        return
    if get_platform() == "windows":
        proc.kill()
        return
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + f"\n... (truncated, {len(text)} total chars)"


@dataclass
class CommandResult:
    exit_code: int
    stdout: str
    stderr: str


class CommandRunner:
    """Runs skill commands through the shell, at most ``max_concurrent`` at a time."""

    def __init__(self, timeout: float = 120.0, max_concurrent: int = 4) -> None:
        self._timeout = timeout
        self._semaphore = asyncio.Semaphore(max_concurrent)

    async def run(self, command: str, cwd: Path) -> CommandResult:
        """Run ``command`` in ``cwd``; raises ``ProcessError`` unless it exits 0."""
        async with self._semaphore:
            return await self._run(command, cwd)

    async def _run(self, command: str, cwd: Path) -> CommandResult:
        log.info("command_exec", command=command, cwd=str(cwd), timeout=self._timeout)

        try:
            proc = await asyncio.create_subprocess_exec(
                *shell_args(command),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd),
                start_new_session=get_platform() != "windows",
            )
        except OSError as e:
            raise ProcessError(f"Failed to spawn command: {e}", command=command) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            log.warning("command_timeout", command=command, timeout=self._timeout)
            _kill_process_tree(proc)
            await proc.wait()
            raise ProcessError(
                f"Command timed out after {self._timeout:g}s", command=command
            ) from None
        except asyncio.CancelledError:
            _kill_process_tree(proc)
            await proc.wait()
            raise

        result = CommandResult(
            exit_code=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace").strip(),
            stderr=stderr.decode("utf-8", errors="replace").strip(),
        )
        if result.exit_code != 0:
            raise ProcessError(
                f"Command exited with code {result.exit_code}",
                command=command,
                exit_code=result.exit_code,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result
