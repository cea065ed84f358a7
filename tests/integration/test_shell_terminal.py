from __future__ import annotations

import os
from pathlib import Path

import pytest

from runentry.terminal import ShellTerminal, TerminalService

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX shell required")


def test_shell_terminal_runs_lines_and_reports_exit(tmp_path: Path) -> None:
    marker = tmp_path / "marker.txt"
    terminal = ShellTerminal("Run Entry", command=["/bin/sh"])

    assert terminal.exit_status is None
    terminal.send_text(f"echo ran > '{marker}'")
    status = terminal.close(timeout=10)

    assert status == 0
    assert marker.read_text(encoding="utf-8").strip() == "ran"
    assert terminal.exit_status == 0


def test_service_replaces_exited_shell(tmp_path: Path) -> None:
    service = TerminalService(lambda name: ShellTerminal(name, command=["/bin/sh"]), sleep=lambda _: None)
    first = service.send("exit 3")
    assert isinstance(first, ShellTerminal)
    first.close(timeout=10)

    second = service.send("true")

    assert second is not first
    assert service.close() == 0


def test_missing_shell_is_terminal_error() -> None:
    from runentry.errors import ExitCode, RunEntryError

    with pytest.raises(RunEntryError) as exc:
        ShellTerminal("Run Entry", command=["/nonexistent/shell-binary"])

    assert exc.value.code == ExitCode.TERMINAL_ERROR
