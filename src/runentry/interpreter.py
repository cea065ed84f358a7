"""Best-effort discovery of the Python interpreter for a workspace."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Protocol

from runentry.fallback import Recovered, run_with_fallback

FALLBACK_INTERPRETER = "python"
_VENV_DIR_NAMES = (".venv", "venv", "env")


class InterpreterLookup(Protocol):
    def __call__(self, scope: Path | None) -> str | None: ...


def _venv_python(venv_root: Path) -> Path:
    if os.name == "nt":
        return venv_root / "Scripts" / "python.exe"
    return venv_root / "bin" / "python"


def discover_interpreter(
    scope: Path | None,
    *,
    environ: Mapping[str, str] | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> str | None:
    env = os.environ if environ is None else environ

    active_venv = env.get("VIRTUAL_ENV", "").strip()
    if active_venv:
        candidate = _venv_python(Path(active_venv))
        if candidate.is_file():
            return str(candidate)

    if scope is not None:
        for name in _VENV_DIR_NAMES:
            candidate = _venv_python(scope / name)
            if candidate.is_file():
                return str(candidate)

    for name in ("python3", "python"):
        found = which(name)
        if found:
            return found
    return None


def lookup_interpreter(lookup: InterpreterLookup | None, scope: Path | None) -> Recovered[str]:
    if lookup is None:
        return Recovered(value=FALLBACK_INTERPRETER, recovered=True)
    return run_with_fallback(
        lambda: lookup(scope),
        default=FALLBACK_INTERPRETER,
        label="Interpreter lookup",
    )
