"""Shell command synthesis for a resolved executor and target file."""

from __future__ import annotations

import logging as py_logging
from pathlib import Path

from runentry.fallback import Recovered
from runentry.interpreter import InterpreterLookup, lookup_interpreter
from runentry.placeholders import is_template, substitute_command

logger = py_logging.getLogger(__name__)

PYTHON_EXECUTORS = frozenset({"python", "python3"})


def quote(value: str) -> str:
    if " " in value:
        return f'"{value}"'
    return value


def is_python_executor(executor: str) -> bool:
    return executor.strip() in PYTHON_EXECUTORS


def resolve_executor(
    executor: str,
    lookup: InterpreterLookup | None,
    scope: Path | None = None,
) -> Recovered[str]:
    """Swap a bare ``python``/``python3`` executor for the looked-up interpreter."""
    if not is_python_executor(executor):
        return Recovered(value=executor)
    return lookup_interpreter(lookup, scope)


def synthesize_command(
    executor: str,
    target_file: str,
    args: str | None = "",
    workspace_path: str = "",
) -> str:
    if is_template(executor):
        command = substitute_command(executor, target_file, workspace_path)
        logger.debug("Template command executor=%s command=%s", executor, command)
        return command
    return f"{quote(executor)} {quote(target_file)} {args or ''}"
