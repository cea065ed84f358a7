from __future__ import annotations

from runentry.terminal import TerminalService


def test_first_send_creates_and_shows_terminal(terminal_service: TerminalService, terminal_factory, terminal_log) -> None:
    terminal_service.send("python a.py ")

    assert len(terminal_factory.created) == 1
    assert terminal_factory.created[0].name == "Run Entry"
    assert terminal_log == ["create", "show", "send:python a.py "]


def test_live_terminal_is_reused(terminal_service: TerminalService, terminal_factory) -> None:
    terminal_service.send("one")
    terminal_service.send("two")

    assert len(terminal_factory.created) == 1
    assert terminal_factory.created[0].sent == ["one", "two"]
    assert [event.step for event in terminal_service.list_events()] == ["create", "send", "reuse", "send"]


def test_exited_terminal_is_replaced(terminal_service: TerminalService, terminal_factory) -> None:
    terminal_service.send("one")
    terminal_factory.created[0].status = 0

    terminal_service.send("two")

    assert len(terminal_factory.created) == 2
    assert terminal_factory.created[1].sent == ["two"]
    assert terminal_service.terminal is terminal_factory.created[1]


def test_clear_waits_settle_interval_before_send(terminal_service: TerminalService, terminal_log, sleeps) -> None:
    terminal_service.send("cmd", clear=True, settle_seconds=0.2)

    assert terminal_log == ["create", "show", "clear", "sleep:0.2", "send:cmd"]
    assert sleeps == [0.2]


def test_clear_completion_signal_skips_settle(terminal_service: TerminalService, terminal_factory, terminal_log, sleeps) -> None:
    terminal = terminal_service.acquire()
    terminal.clear_result = True
    terminal_log.clear()

    terminal_service.send("cmd", clear=True)

    assert terminal_log == ["show", "clear", "send:cmd"]
    assert sleeps == []


def test_clear_failure_is_swallowed_and_command_still_sent(terminal_service: TerminalService, terminal_log, sleeps) -> None:
    terminal = terminal_service.acquire()
    terminal.clear_error = RuntimeError("clear unsupported")
    terminal_log.clear()

    terminal_service.send("cmd", clear=True)

    assert terminal_log == ["show", "clear", "send:cmd"]
    assert sleeps == []
    assert "clear-failed" in [event.step for event in terminal_service.list_events()]


def test_clear_disabled_never_clears(terminal_service: TerminalService, terminal_log) -> None:
    terminal_service.send("cmd", clear=False)

    assert "clear" not in terminal_log


def test_close_without_terminal_returns_none(terminal_service: TerminalService) -> None:
    assert terminal_service.close() is None


def test_close_uses_exit_status_for_terminals_without_close(terminal_service: TerminalService, terminal_factory) -> None:
    terminal_service.send("cmd")
    terminal_factory.created[0].status = 3

    assert terminal_service.close() == 3
    assert terminal_service.terminal is None
