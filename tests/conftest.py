from __future__ import annotations

from pathlib import Path

import pytest

from runentry.terminal import TerminalService


class FakeTerminal:
    def __init__(self, name: str, log: list[str] | None = None, *, clear_result: bool = False) -> None:
        self.name = name
        self.log = log if log is not None else []
        self.clear_result = clear_result
        self.clear_error: Exception | None = None
        self.sent: list[str] = []
        self.status: int | None = None
        self.shown = 0

    @property
    def exit_status(self) -> int | None:
        return self.status

    def show(self) -> None:
        self.shown += 1
        self.log.append("show")

    def send_text(self, text: str) -> None:
        self.sent.append(text)
        self.log.append(f"send:{text}")

    def clear(self) -> bool:
        self.log.append("clear")
        if self.clear_error is not None:
            raise self.clear_error
        return self.clear_result


class FakeTerminalFactory:
    def __init__(self, log: list[str] | None = None) -> None:
        self.log = log if log is not None else []
        self.created: list[FakeTerminal] = []

    def __call__(self, name: str) -> FakeTerminal:
        terminal = FakeTerminal(name, self.log)
        self.created.append(terminal)
        self.log.append("create")
        return terminal


@pytest.fixture
def terminal_log() -> list[str]:
    return []


@pytest.fixture
def terminal_factory(terminal_log: list[str]) -> FakeTerminalFactory:
    return FakeTerminalFactory(terminal_log)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def terminal_service(
    terminal_factory: FakeTerminalFactory,
    terminal_log: list[str],
    sleeps: list[float],
) -> TerminalService:
    def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        terminal_log.append(f"sleep:{seconds}")

    return TerminalService(terminal_factory, sleep=fake_sleep)


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)
