"""Workspace settings loading/saving and the run configuration store."""

from __future__ import annotations

import logging as py_logging
import sys
from collections.abc import Callable
from contextlib import suppress
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from runentry.errors import ExitCode, RunEntryError
from runentry.executors import MappingOverrides
from runentry.models import ConfigKind, RunConfig

logger = py_logging.getLogger(__name__)

SETTINGS_FILE_NAME = ".runentry.toml"
DEFAULT_CLEAR_SETTLE_SECONDS = 0.2
MAX_CLEAR_SETTLE_SECONDS = 5.0
_TOML_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}

StoreListener = Callable[[list[RunConfig]], None]


class AppSettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    clear_previous_output: bool = False
    clear_settle_seconds: float = Field(
        default=DEFAULT_CLEAR_SETTLE_SECONDS,
        ge=0.0,
        le=MAX_CLEAR_SETTLE_SECONDS,
    )
    active_configuration: str = ""
    configurations: list[RunConfig] = Field(default_factory=list)
    executor_map: dict[str, str] = Field(default_factory=dict)

    @field_validator("configurations")
    @classmethod
    def _validate_configurations(cls, value: list[RunConfig]) -> list[RunConfig]:
        for item in value:
            if item.kind == ConfigKind.CURRENT_FILE:
                raise ValueError("The current-file configuration is never stored")
        return value

    def find(self, name: str) -> RunConfig | None:
        for item in self.configurations:
            if item.name == name:
                return item
        return None

    def executor_overrides(self) -> MappingOverrides:
        return MappingOverrides(self.executor_map)


class ConfigStore(Protocol):
    def settings(self) -> AppSettings: ...

    def configurations(self) -> list[RunConfig]: ...

    def append(self, config: RunConfig) -> None: ...

    def subscribe(self, listener: StoreListener) -> None: ...


class InMemoryConfigStore:
    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()
        self._listeners: list[StoreListener] = []
        self.writes = 0

    def settings(self) -> AppSettings:
        return self._settings

    def configurations(self) -> list[RunConfig]:
        return list(self._settings.configurations)

    def append(self, config: RunConfig) -> None:
        self._settings.configurations = [*self._settings.configurations, config]
        self.writes += 1
        self._notify()

    def replace(self, configs: list[RunConfig]) -> None:
        """Simulate an out-of-band edit of the stored configurations."""
        self._settings.configurations = list(configs)
        self._notify()

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        snapshot = self.configurations()
        for listener in list(self._listeners):
            listener(snapshot)


class FileConfigStore(InMemoryConfigStore):
    """Settings file backed store.

    An unreadable file is served as defaults but never overwritten; writes
    raise until the file parses again.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        settings, self.load_error = read_settings(self.path)
        super().__init__(settings)

    @classmethod
    def for_workspace(cls, workspace: str | Path) -> FileConfigStore:
        return cls(get_settings_path(workspace))

    def _ensure_writable(self) -> None:
        if self.load_error is None:
            return
        raise RunEntryError(
            f"Settings file {self.path} could not be parsed; refusing to overwrite it.",
            code=ExitCode.CONFIG_ERROR,
            hint=f"Fix the settings file ({self.load_error}) and try again.",
        )

    def append(self, config: RunConfig) -> None:
        self._ensure_writable()
        if self._settings.find(config.name) is not None:
            logger.warning("Appending configuration with duplicate name=%s", config.name)
        updated = self._settings.model_copy(deep=True)
        updated.configurations = [*updated.configurations, config]
        save_settings(updated, self.path)
        self._settings = updated
        self.writes += 1
        self._notify()

    def set_active_name(self, name: str) -> None:
        self._ensure_writable()
        updated = self._settings.model_copy(deep=True)
        updated.active_configuration = name
        save_settings(updated, self.path)
        self._settings = updated

    def reload(self) -> bool:
        """Re-read the file and notify listeners if the configurations changed."""
        previous = self.configurations()
        self._settings, self.load_error = read_settings(self.path)
        changed = self.configurations() != previous
        if changed:
            logger.debug("Settings changed on disk path=%s", self.path)
            self._notify()
        return changed


def get_settings_path(workspace: str | Path | None = None) -> Path:
    root = Path.cwd() if workspace is None else Path(workspace).expanduser()
    return root / SETTINGS_FILE_NAME


def _escape(value: str) -> str:
    escaped: list[str] = []
    for char in value:
        if char in _TOML_ESCAPES:
            escaped.append(_TOML_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            escaped.append(f"\\u{ord(char):04x}")
        else:
            escaped.append(char)
    return "".join(escaped)


def _toml_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def _normalize_configurations(value: object) -> list[RunConfig]:
    if not isinstance(value, list):
        return []
    normalized: list[RunConfig] = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            continue
        try:
            config = RunConfig.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skipping invalid configuration at index=%s: %s", index, exc.errors()[0]["msg"])
            continue
        if config.kind == ConfigKind.CURRENT_FILE:
            continue
        normalized.append(config)
    return normalized


def _normalize_executor_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return MappingOverrides(value).as_dict()


def _sanitize(raw: dict[str, object]) -> AppSettings:
    settings = AppSettings()

    clear_previous_output = raw.get("clear_previous_output", settings.clear_previous_output)
    if isinstance(clear_previous_output, bool):
        settings.clear_previous_output = clear_previous_output

    settle = raw.get("clear_settle_seconds", settings.clear_settle_seconds)
    if (
        isinstance(settle, (int, float))
        and not isinstance(settle, bool)
        and 0 <= settle <= MAX_CLEAR_SETTLE_SECONDS
    ):
        settings.clear_settle_seconds = float(settle)

    active = raw.get("active_configuration", "")
    if isinstance(active, str):
        settings.active_configuration = active.strip()

    settings.configurations = _normalize_configurations(raw.get("configurations", []))
    settings.executor_map = _normalize_executor_map(raw.get("executor_map", {}))
    return settings


def read_settings(path: str | Path | None = None) -> tuple[AppSettings, str | None]:
    """Load settings, also returning the parse error when the file was unreadable."""
    resolved = Path(path).expanduser() if path is not None else get_settings_path()
    if not resolved.exists():
        return AppSettings(), None
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings path=%s error=%s", resolved, exc)
        return AppSettings(), str(exc) or type(exc).__name__
    if not isinstance(raw, dict):
        return AppSettings(), None
    return _sanitize(raw), None


def load_settings(path: str | Path | None = None) -> AppSettings:
    settings, _ = read_settings(path)
    return settings


def save_settings(settings: AppSettings, path: str | Path | None = None) -> Path:
    resolved = Path(path).expanduser() if path is not None else get_settings_path()
    lines = [
        f"clear_previous_output = {_toml_scalar(settings.clear_previous_output)}",
        f"clear_settle_seconds = {_toml_scalar(settings.clear_settle_seconds)}",
        f"active_configuration = {_toml_scalar(settings.active_configuration)}",
    ]

    for config in settings.configurations:
        lines.extend(["", "[[configurations]]"])
        for key, value in config.to_payload().items():
            lines.append(f"{key} = {_toml_scalar(value)}")

    if settings.executor_map:
        lines.extend(["", "[executor_map]"])
        for extension, executor in sorted(settings.executor_map.items()):
            lines.append(f'"{_escape(extension)}" = {_toml_scalar(executor)}')

    try:
        resolved.parent.mkdir(parents=True, exist_ok=True)
        resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as exc:
        raise RunEntryError(
            f"Failed to write settings file {resolved}.",
            code=ExitCode.CONFIG_ERROR,
            hint=str(exc) or "Check directory permissions.",
        ) from exc
    with suppress(OSError):
        resolved.chmod(0o600)
    return resolved
