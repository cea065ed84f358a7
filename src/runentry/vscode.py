"""VS Code launch.json writer used as the debugger hand-off."""

from __future__ import annotations

import json
import logging as py_logging
from pathlib import Path

from runentry.debug import DebugDescriptor

logger = py_logging.getLogger(__name__)

LAUNCH_SCHEMA_VERSION = "0.2.0"


def build_launch_model(descriptor: DebugDescriptor, existing: dict | None = None) -> dict:
    model = dict(existing) if isinstance(existing, dict) else {}
    model.setdefault("version", LAUNCH_SCHEMA_VERSION)
    raw_configurations = model.get("configurations")
    configurations = [
        item
        for item in (raw_configurations if isinstance(raw_configurations, list) else [])
        if not (isinstance(item, dict) and item.get("name") == descriptor.name)
    ]
    configurations.append(descriptor.to_launch_configuration())
    model["configurations"] = configurations
    return model


def _read_launch_file(path: Path) -> dict | None:
    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.warning("Replacing unreadable launch file path=%s error=%s", path, exc)
        return None
    return loaded if isinstance(loaded, dict) else None


def write_launch_file(workspace_folder: str | Path, descriptor: DebugDescriptor) -> Path:
    path = Path(workspace_folder) / ".vscode" / "launch.json"
    payload = build_launch_model(descriptor, _read_launch_file(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


class LaunchFileDebugger:
    """Hands a descriptor to the editor by merging it into ``.vscode/launch.json``."""

    def __init__(self, fallback_folder: Path | None = None) -> None:
        self.fallback_folder = fallback_folder
        self.written: list[Path] = []

    def start(self, workspace_folder: Path | None, descriptor: DebugDescriptor) -> None:
        folder = workspace_folder or self.fallback_folder or Path.cwd()
        path = write_launch_file(folder, descriptor)
        self.written.append(path)
        logger.info("Wrote debug configuration name=%s path=%s", descriptor.name, path)
