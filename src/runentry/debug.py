"""Debug launch descriptor synthesis."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Protocol

DEBUG_SESSION_NAME = "Run Entry Debug"
NODE_INTERNALS_GLOB = "<node_internals>/**"


@dataclass(frozen=True)
class DebugDescriptor:
    adapter: str
    program: str
    args: tuple[str, ...] = ()
    request: str = "launch"
    console_mode: str | None = None
    skip_internals: bool = False
    name: str = DEBUG_SESSION_NAME

    def to_launch_configuration(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "type": self.adapter,
            "name": self.name,
            "request": self.request,
            "program": self.program,
            "args": list(self.args),
        }
        if self.console_mode:
            payload["console"] = self.console_mode
        if self.skip_internals:
            payload["skipFiles"] = [NODE_INTERNALS_GLOB]
        return payload


class Debugger(Protocol):
    def start(self, workspace_folder: Path | None, descriptor: DebugDescriptor) -> None: ...


def split_args(args: str | None) -> tuple[str, ...]:
    if not args:
        return ()
    return tuple(args.split(" "))


def synthesize_debug(file_path: str, args: str | None = None) -> DebugDescriptor | None:
    extension = PurePath(file_path).suffix
    if extension == ".py":
        return DebugDescriptor(
            adapter="python",
            program=file_path,
            args=split_args(args),
            console_mode="integratedTerminal",
        )
    if extension in (".js", ".ts"):
        return DebugDescriptor(
            adapter="node",
            program=file_path,
            args=split_args(args),
            skip_internals=True,
        )
    return None
