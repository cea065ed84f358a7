"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import json
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .config import FileConfigStore, save_settings
from .dispatch import Dispatcher
from .errors import ExitCode, RunEntryError, user_facing_error
from .executors import load_vscode_executor_map
from .logging import configure_logging, default_log_path
from .models import CURRENT_FILE_CONFIG, ConfigKind, RunConfig, RunMode
from .placeholders import WORKSPACE_FOLDER_TOKEN
from .vscode import LaunchFileDebugger
from .workspace import EditorContext, build_editor_context

logger = py_logging.getLogger(__name__)

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

DispatcherFactory = Callable[[FileConfigStore, Path], Dispatcher]


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="runentry")
    parser.add_argument(
        "--workspace",
        type=Path,
        action="append",
        default=None,
        help="Workspace folder; repeat for multi-root workspaces (default: cwd)",
    )
    parser.add_argument("--file", type=Path, default=None, help="Active document to run")
    parser.add_argument("--log-level", type=_log_level_type, default="WARN")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write DEBUG logs to a file")

    commands = parser.add_subparsers(dest="action", required=True)
    commands.add_parser("run", help="Run the active configuration in the shared terminal")
    commands.add_parser("debug", help="Write a debug launch configuration for the target")
    commands.add_parser("list", help="List stored configurations")
    commands.add_parser("edit", help="Print the path of the settings file, creating it if missing")

    select = commands.add_parser("select", help="Select the active configuration")
    select.add_argument("name", nargs="?", default=None)
    select.add_argument("--current", action="store_true", help="Use whatever file is active")

    add = commands.add_parser("add", help="Store a new configuration and select it")
    add.add_argument("--program", type=Path, required=True)
    add.add_argument("--name", default="")
    add.add_argument("--command", default="")
    add.add_argument("--args", default="")
    add.add_argument("--cwd", default=None)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def default_dispatcher(store: FileConfigStore, workspace: Path) -> Dispatcher:
    return Dispatcher(
        store=store,
        debugger=LaunchFileDebugger(workspace),
        overrides=load_vscode_executor_map(workspace),
    )


def restore_active(dispatcher: Dispatcher, store: FileConfigStore) -> None:
    name = store.settings().active_configuration
    if not name:
        return
    config = store.settings().find(name)
    if config is None:
        logger.info("Persisted configuration %s no longer exists", name)
        store.set_active_name("")
        return
    dispatcher.select(config)


def _program_template(program: Path, workspace: Path) -> str:
    absolute = program.expanduser().absolute()
    try:
        relative = absolute.relative_to(workspace)
    except ValueError:
        return str(absolute)
    return f"{WORKSPACE_FOLDER_TOKEN}/{relative.as_posix()}"


def build_added_config(namespace: argparse.Namespace, dispatcher: Dispatcher, workspace: Path) -> RunConfig:
    program: Path = namespace.program
    command = namespace.command.strip() or dispatcher.executor_table().resolve_for(program) or "python"
    return RunConfig(
        name=namespace.name.strip() or f"Run {program.name}",
        kind=ConfigKind.NAMED_FILE,
        program=_program_template(program, workspace),
        command=command,
        args=namespace.args,
        cwd=namespace.cwd,
    )


def _describe(config: RunConfig, *, active: bool) -> str:
    marker = "*" if active else " "
    detail = config.program or "<active file>"
    if config.args:
        detail = f"{detail} (args: {config.args})"
    return f"{marker} {config.name}: {detail}"


def run_action(
    namespace: argparse.Namespace,
    dispatcher: Dispatcher,
    store: FileConfigStore,
    context: EditorContext,
    workspace: Path,
) -> int:
    action = namespace.action
    if action == "run":
        result = dispatcher.execute(RunMode.RUN, context)
        print(f"> {result.command}", file=sys.stderr)
        returncode = dispatcher.terminals.close()
        return int(returncode) if returncode else int(ExitCode.SUCCESS)

    if action == "debug":
        result = dispatcher.execute(RunMode.DEBUG, context)
        if result.descriptor is not None:
            print(json.dumps(result.descriptor.to_launch_configuration(), indent=2))
        return int(ExitCode.SUCCESS)

    if action == "list":
        active = dispatcher.active.current
        print(_describe(CURRENT_FILE_CONFIG, active=active.is_current_file))
        for config in store.configurations():
            print(_describe(config, active=not active.is_current_file and config.name == active.name))
        return int(ExitCode.SUCCESS)

    if action == "select":
        if namespace.current == bool(namespace.name):
            raise RunEntryError(
                "Select needs exactly one of NAME or --current.",
                code=ExitCode.INVALID_ARGS,
                hint="Run 'runentry select --current' or 'runentry select NAME'.",
            )
        if namespace.current:
            dispatcher.select(CURRENT_FILE_CONFIG)
        else:
            config = store.settings().find(namespace.name)
            if config is None:
                raise RunEntryError(
                    f"Configuration not found: {namespace.name}",
                    code=ExitCode.CONFIG_ERROR,
                    hint="Run 'runentry list' to see stored configurations.",
                )
            dispatcher.select(config)
        print(f"Active configuration: {dispatcher.active.current.name}")
        return int(ExitCode.SUCCESS)

    if action == "edit":
        if not store.path.exists():
            save_settings(store.settings(), store.path)
        elif store.load_error is not None:
            logger.warning("Settings file %s does not parse: %s", store.path, store.load_error)
        print(store.path)
        return int(ExitCode.SUCCESS)

    if action == "add":
        config = build_added_config(namespace, dispatcher, workspace)
        dispatcher.add(config)
        print(f"Added configuration: {config.name}")
        return int(ExitCode.SUCCESS)

    raise RunEntryError(f"Unknown action: {action}", code=ExitCode.INVALID_ARGS)


def main(
    argv: Sequence[str] | None = None,
    *,
    dispatcher_factory: DispatcherFactory | None = None,
) -> int:
    log_path: Path | None = None
    logger = configure_logging(level="WARN")
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
        logger = configure_logging(level=namespace.log_level, log_file=log_path)
    else:
        logger = configure_logging(level=namespace.log_level)

    try:
        folders = [item.expanduser().absolute() for item in (namespace.workspace or [Path.cwd()])]
        workspace = folders[0]
        context = build_editor_context(namespace.file, folders)
        store = FileConfigStore.for_workspace(workspace)
        dispatcher = (dispatcher_factory or default_dispatcher)(store, workspace)
        restore_active(dispatcher, store)
        dispatcher.active.subscribe(
            lambda config: store.set_active_name("" if config.is_current_file else config.name)
        )
        logger.debug("Starting action=%s workspace=%s", namespace.action, workspace)
        return run_action(namespace, dispatcher, store, context, workspace)
    except RunEntryError as exc:
        logger.error(
            "Handled RunEntryError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message.rstrip("."), hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}" if log_path else f"Re-run with --log-file {default_log_path()}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
