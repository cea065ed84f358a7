from __future__ import annotations

import logging as py_logging
from pathlib import Path

import runentry.logging as re_logging


def test_default_log_path_is_expanded() -> None:
    path = re_logging.default_log_path()

    assert path.is_absolute()
    assert path.name == "runentry.log"


def test_warning_alias_maps_to_warning_level() -> None:
    logger = re_logging.configure_logging("warning")

    assert logger.level == re_logging.LOG_LEVELS["WARN"]


def test_unknown_log_level_falls_back_to_info() -> None:
    logger = re_logging.configure_logging("not-a-level")

    assert logger.level == py_logging.INFO


def test_configure_logging_resets_existing_handlers() -> None:
    logger = re_logging.configure_logging("INFO")
    assert len(logger.handlers) == 1

    logger = re_logging.configure_logging("INFO")

    assert len(logger.handlers) == 1


def test_configure_logging_adds_debug_file_handler(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "runentry.log"

    logger = re_logging.configure_logging("ERROR", log_file=log_file)
    file_handlers = [
        handler for handler in logger.handlers if isinstance(handler, py_logging.FileHandler)
    ]

    assert len(file_handlers) == 1
    assert file_handlers[0].level == py_logging.DEBUG
    assert logger.isEnabledFor(py_logging.DEBUG)
    assert log_file.exists()
    file_handlers[0].close()


def test_configure_logging_ignores_file_handler_oserror(monkeypatch, tmp_path: Path) -> None:
    def raise_os_error(*args: object, **kwargs: object) -> py_logging.Handler:
        raise OSError("disk full")

    monkeypatch.setattr(re_logging.py_logging, "FileHandler", raise_os_error)

    logger = re_logging.configure_logging("INFO", log_file=tmp_path / "nope" / "runentry.log")

    assert len(logger.handlers) == 1
    assert type(logger.handlers[0]) is py_logging.StreamHandler
    assert logger.level == py_logging.INFO


def _no_home(self: Path) -> Path:
    raise RuntimeError("Could not determine home directory.")


def test_default_log_path_without_home_uses_working_directory(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(re_logging.Path, "expanduser", _no_home)

    assert re_logging.default_log_path() == Path.cwd() / ".runentry" / "logs" / "runentry.log"


def test_home_relative_log_file_without_home_lands_beside_default_log(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(re_logging.Path, "expanduser", _no_home)

    logger = re_logging.configure_logging("INFO", log_file="~/custom.log")
    [file_handler] = [handler for handler in logger.handlers if isinstance(handler, py_logging.FileHandler)]
    file_handler.close()

    assert Path(file_handler.baseFilename) == Path.cwd() / ".runentry" / "logs" / "custom.log"
