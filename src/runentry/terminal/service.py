"""Ownership of the single shared terminal session."""

from __future__ import annotations

import logging as py_logging
import time
from collections.abc import Callable

from runentry.terminal.models import Terminal, TerminalEvent, TerminalFactory

logger = py_logging.getLogger(__name__)

DEFAULT_TERMINAL_NAME = "Run Entry"


def _default_factory(name: str) -> Terminal:
    from runentry.terminal.shell import ShellTerminal

    return ShellTerminal(name)


class TerminalService:
    def __init__(
        self,
        factory: TerminalFactory | None = None,
        *,
        name: str = DEFAULT_TERMINAL_NAME,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.name = name
        self._factory = factory or _default_factory
        self._sleep = sleep
        self._terminal: Terminal | None = None
        self._events: list[TerminalEvent] = []

    @property
    def terminal(self) -> Terminal | None:
        return self._terminal

    def list_events(self) -> list[TerminalEvent]:
        return list(self._events)

    def acquire(self) -> Terminal:
        current = self._terminal
        if current is not None and current.exit_status is None:
            self._record("reuse", f"Reusing terminal '{self.name}'.")
            return current
        if current is not None:
            self._record("replace", f"Terminal exited with status {current.exit_status}.")
        self._terminal = self._factory(self.name)
        self._record("create", f"Created terminal '{self.name}'.")
        return self._terminal

    def send(self, command: str, *, clear: bool = False, settle_seconds: float = 0.2) -> Terminal:
        terminal = self.acquire()
        terminal.show()
        if clear:
            self._clear(terminal, settle_seconds)
        terminal.send_text(command)
        self._record("send", command)
        return terminal

    def close(self) -> int | None:
        """Close the live session, waiting for it when the terminal supports it."""
        terminal = self._terminal
        if terminal is None:
            return None
        self._terminal = None
        closer = getattr(terminal, "close", None)
        status = closer() if callable(closer) else terminal.exit_status
        self._record("close", f"Terminal closed with status {status}.")
        return status

    def _clear(self, terminal: Terminal, settle_seconds: float) -> None:
        try:
            completed = terminal.clear()
        except Exception as exc:
            self._record("clear-failed", str(exc) or type(exc).__name__)
            return
        if completed:
            self._record("clear", "Terminal cleared.")
            return
        self._record("clear", f"Waiting {settle_seconds}s for terminal clear to settle.")
        if settle_seconds > 0:
            self._sleep(settle_seconds)

    def _record(self, step: str, message: str) -> None:
        self._events.append(TerminalEvent(step=step, message=message))
        logger.info("terminal-event terminal=%s step=%s message=%s", self.name, step, message)
