"""Extension to executor resolution."""

from __future__ import annotations

import json
import logging as py_logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

logger = py_logging.getLogger(__name__)

DEFAULT_EXECUTORS: Mapping[str, str] = {
    ".py": "python",
    ".js": "node",
    ".ts": "ts-node",
    ".go": "go run",
    ".java": "java",
    ".c": "gcc",
    ".cpp": "g++",
    ".sh": "bash",
    ".rb": "ruby",
}
VSCODE_EXECUTOR_MAP_KEY = "code-runner.executorMap"


class ExecutorOverrides(Protocol):
    def lookup(self, extension: str) -> str | None: ...


class MappingOverrides:
    """Overrides backed by a loosely typed mapping; non-string values are ignored."""

    def __init__(self, mapping: Mapping[object, object] | None = None) -> None:
        self._mapping: dict[str, str] = {}
        for key, value in (mapping or {}).items():
            if isinstance(key, str) and isinstance(value, str):
                self._mapping[key] = value

    def lookup(self, extension: str) -> str | None:
        return self._mapping.get(extension)

    def as_dict(self) -> dict[str, str]:
        return dict(self._mapping)


class ChainedOverrides:
    def __init__(self, *sources: ExecutorOverrides) -> None:
        self._sources = sources

    def lookup(self, extension: str) -> str | None:
        for source in self._sources:
            value = source.lookup(extension)
            if isinstance(value, str):
                return value
        return None


def load_vscode_executor_map(workspace: str | Path) -> MappingOverrides:
    path = Path(workspace) / ".vscode" / "settings.json"
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return MappingOverrides()
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable editor settings path=%s error=%s", path, exc)
        return MappingOverrides()
    if not isinstance(raw, dict):
        return MappingOverrides()
    executor_map = raw.get(VSCODE_EXECUTOR_MAP_KEY)
    if not isinstance(executor_map, dict):
        return MappingOverrides()
    return MappingOverrides(executor_map)


class ExecutorTable:
    def __init__(
        self,
        overrides: ExecutorOverrides | None = None,
        *,
        defaults: Mapping[str, str] = DEFAULT_EXECUTORS,
    ) -> None:
        self._overrides = overrides
        self._defaults = dict(defaults)

    def resolve(self, extension: str) -> str | None:
        if self._overrides is not None:
            override = self._overrides.lookup(extension)
            if isinstance(override, str):
                logger.debug("Executor override ext=%s executor=%s", extension, override)
                return override
        return self._defaults.get(extension)

    def resolve_for(self, path: str | Path) -> str | None:
        return self.resolve(Path(path).suffix)
