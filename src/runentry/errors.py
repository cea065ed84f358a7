"""Deterministic error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    NO_FILE_OPEN = 5
    NO_EXECUTOR = 6
    UNSUPPORTED_DEBUG_TARGET = 7
    TERMINAL_ERROR = 8


@dataclass
class RunEntryError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


def no_file_open() -> RunEntryError:
    return RunEntryError(
        "No file open.",
        code=ExitCode.NO_FILE_OPEN,
        hint="Pass --file or select a named configuration.",
    )


def no_executor(extension: str) -> RunEntryError:
    return RunEntryError(
        f"No executor found for file extension '{extension}'.",
        code=ExitCode.NO_EXECUTOR,
        hint="Configure it in the [executor_map] settings table.",
    )


def unsupported_debug_target(extension: str) -> RunEntryError:
    return RunEntryError(
        f"Auto-debug does not support '{extension or '<none>'}' files.",
        code=ExitCode.UNSUPPORTED_DEBUG_TARGET,
        hint="Only Python and Node.js are supported. Configure launch.json manually.",
    )


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
