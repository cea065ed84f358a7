"""Shared terminal session used for run dispatch."""

from .models import Terminal, TerminalEvent, TerminalFactory
from .service import DEFAULT_TERMINAL_NAME, TerminalService
from .shell import ShellTerminal, default_shell_command

__all__ = [
    "DEFAULT_TERMINAL_NAME",
    "default_shell_command",
    "ShellTerminal",
    "Terminal",
    "TerminalEvent",
    "TerminalFactory",
    "TerminalService",
]
