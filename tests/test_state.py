from __future__ import annotations

from runentry.config import AppSettings, InMemoryConfigStore
from runentry.models import CURRENT_FILE_CONFIG, RunConfig
from runentry.state import ActiveConfiguration

_BUILD = RunConfig(name="Build", program="${workspaceFolder}/build.py")
_TEST = RunConfig(name="Test", program="${workspaceFolder}/test.py")


def test_initial_state_is_current_file() -> None:
    assert ActiveConfiguration().current == CURRENT_FILE_CONFIG


def test_select_is_idempotent_and_does_not_write_store() -> None:
    store = InMemoryConfigStore(AppSettings(configurations=[_BUILD]))
    active = ActiveConfiguration()
    active.bind(store)
    notified: list[RunConfig] = []
    active.subscribe(notified.append)

    active.select(_BUILD)
    active.select(_BUILD)

    assert active.current == _BUILD
    assert store.writes == 0
    assert store.configurations() == [_BUILD]
    assert notified == [_BUILD]


def test_add_appends_then_selects() -> None:
    store = InMemoryConfigStore()
    active = ActiveConfiguration()
    active.bind(store)

    active.add(_TEST, store)

    assert store.configurations() == [_TEST]
    assert store.writes == 1
    assert active.current == _TEST


def test_removed_named_configuration_resets_to_current_file() -> None:
    store = InMemoryConfigStore(AppSettings(configurations=[_BUILD, _TEST]))
    active = ActiveConfiguration()
    active.bind(store)
    active.select(_BUILD)

    store.replace([_TEST])

    assert active.current == CURRENT_FILE_CONFIG


def test_store_change_keeping_name_is_noop() -> None:
    active = ActiveConfiguration()
    active.select(_BUILD)
    renamed_program = RunConfig(name="Build", program="/elsewhere/build.py")

    active.on_store_changed([_TEST, renamed_program])

    assert active.current == _BUILD


def test_store_change_with_current_file_active_is_noop() -> None:
    active = ActiveConfiguration()
    notified: list[RunConfig] = []
    active.subscribe(notified.append)

    active.on_store_changed([])

    assert active.current == CURRENT_FILE_CONFIG
    assert notified == []


def test_duplicate_names_satisfy_existence_check() -> None:
    active = ActiveConfiguration()
    active.select(_BUILD)
    duplicate = RunConfig(name="Build", program="/other.py")

    active.on_store_changed([duplicate, duplicate])

    assert active.current == _BUILD
