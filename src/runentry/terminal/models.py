"""Terminal collaborator contracts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class Terminal(Protocol):
    name: str

    @property
    def exit_status(self) -> int | None: ...

    def show(self) -> None: ...

    def send_text(self, text: str) -> None:
        """Send one line; the trailing newline is added by the terminal."""
        ...

    def clear(self) -> bool:
        """Request a clear; return True only if the clear is known to be complete."""
        ...


TerminalFactory = Callable[[str], Terminal]


@dataclass(frozen=True)
class TerminalEvent:
    step: str
    message: str
