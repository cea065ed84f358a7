"""Subprocess-backed shell session."""

from __future__ import annotations

import logging as py_logging
import os
import subprocess
from collections.abc import Callable
from contextlib import suppress

from runentry.errors import ExitCode, RunEntryError

logger = py_logging.getLogger(__name__)

Popen = Callable[..., subprocess.Popen]


def default_shell_command(environ: dict[str, str] | None = None) -> list[str]:
    env = os.environ if environ is None else environ
    if os.name == "nt":
        return [env.get("COMSPEC", "cmd.exe")]
    return [env.get("SHELL", "/bin/sh")]


def _clear_command() -> str:
    return "cls" if os.name == "nt" else "clear"


class ShellTerminal:
    """Interactive shell fed line by line through its stdin.

    Output goes straight to the parent's stdout/stderr.
    """

    def __init__(
        self,
        name: str,
        *,
        command: list[str] | None = None,
        cwd: str | None = None,
        popen: Popen = subprocess.Popen,
    ) -> None:
        self.name = name
        resolved_command = list(command) if command else default_shell_command()
        try:
            self._process = popen(
                resolved_command,
                stdin=subprocess.PIPE,
                cwd=cwd,
                text=True,
            )
        except OSError as exc:
            raise RunEntryError(
                f"Failed to start terminal shell {resolved_command[0]}.",
                code=ExitCode.TERMINAL_ERROR,
                hint=str(exc) or "Check the SHELL environment variable.",
            ) from exc
        logger.debug("Started shell name=%s command=%s", name, resolved_command)

    @property
    def exit_status(self) -> int | None:
        return self._process.poll()

    def show(self) -> None:
        # Output is already attached to the parent process.
        logger.debug("Shell name=%s pid=%s in foreground", self.name, self._process.pid)

    def send_text(self, text: str) -> None:
        stdin = self._process.stdin
        if stdin is None:
            raise RunEntryError(
                f"Terminal {self.name} has no input stream.",
                code=ExitCode.TERMINAL_ERROR,
            )
        try:
            stdin.write(text + "\n")
            stdin.flush()
        except (BrokenPipeError, ValueError) as exc:
            raise RunEntryError(
                f"Failed to write to terminal {self.name}.",
                code=ExitCode.TERMINAL_ERROR,
                hint="The shell exited; run again to open a new one.",
            ) from exc

    def clear(self) -> bool:
        self.send_text(_clear_command())
        return False

    def close(self, *, wait: bool = True, timeout: float | None = None) -> int | None:
        """Close stdin so the shell exits after its pending lines."""
        if self._process.stdin is not None:
            with suppress(BrokenPipeError, ValueError, OSError):
                self._process.stdin.close()
        if not wait:
            return self._process.poll()
        try:
            return self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("Shell name=%s still running after %ss", self.name, timeout)
            return None
