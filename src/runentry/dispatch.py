"""Resolve the active configuration and dispatch one run or debug session."""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass
from pathlib import Path, PurePath

from runentry.command import resolve_executor, synthesize_command
from runentry.config import ConfigStore, InMemoryConfigStore
from runentry.debug import DebugDescriptor, Debugger, synthesize_debug
from runentry.errors import (
    ExitCode,
    RunEntryError,
    no_executor,
    no_file_open,
    unsupported_debug_target,
)
from runentry.executors import ChainedOverrides, ExecutorOverrides, ExecutorTable
from runentry.interpreter import InterpreterLookup, discover_interpreter
from runentry.models import RunConfig, RunMode
from runentry.placeholders import substitute_program
from runentry.state import ActiveConfiguration
from runentry.terminal import TerminalService
from runentry.workspace import EditorContext

logger = py_logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    mode: RunMode
    config_name: str
    target_file: str
    command: str = ""
    descriptor: DebugDescriptor | None = None
    interpreter_recovered: bool = False


class Dispatcher:
    """Long-lived context owning the active configuration and the shared terminal."""

    def __init__(
        self,
        *,
        store: ConfigStore | None = None,
        terminals: TerminalService | None = None,
        debugger: Debugger | None = None,
        interpreter_lookup: InterpreterLookup | None = discover_interpreter,
        overrides: ExecutorOverrides | None = None,
        active: ActiveConfiguration | None = None,
    ) -> None:
        self.store = store or InMemoryConfigStore()
        self.active = active or ActiveConfiguration()
        self.active.bind(self.store)
        self.terminals = terminals or TerminalService()
        self.debugger = debugger
        self.interpreter_lookup = interpreter_lookup
        self._overrides = overrides

    def executor_table(self) -> ExecutorTable:
        settings_overrides = self.store.settings().executor_overrides()
        if self._overrides is None:
            return ExecutorTable(settings_overrides)
        return ExecutorTable(ChainedOverrides(settings_overrides, self._overrides))

    def select(self, config: RunConfig) -> None:
        self.active.select(config)

    def add(self, config: RunConfig) -> None:
        self.active.add(config, self.store)

    def execute(self, mode: RunMode, context: EditorContext) -> DispatchResult:
        config = self.active.snapshot()
        workspace_folder = context.resolve_workspace_folder()
        workspace_path = str(workspace_folder) if workspace_folder is not None else ""
        target_file = self._resolve_target(config, context, workspace_path)
        logger.debug(
            "Dispatch mode=%s config=%s target=%s workspace=%s",
            mode.value,
            config.name,
            target_file,
            workspace_path,
        )

        if mode == RunMode.DEBUG:
            return self._debug(config, target_file, workspace_folder)

        executor = self._resolve_executor(config, target_file)
        resolved = resolve_executor(executor, self.interpreter_lookup, workspace_folder)
        command = synthesize_command(resolved.value, target_file, config.args or "", workspace_path)

        settings = self.store.settings()
        self.terminals.send(
            command,
            clear=settings.clear_previous_output,
            settle_seconds=settings.clear_settle_seconds,
        )
        return DispatchResult(
            mode=mode,
            config_name=config.name,
            target_file=target_file,
            command=command,
            interpreter_recovered=resolved.recovered,
        )

    def _resolve_target(self, config: RunConfig, context: EditorContext, workspace_path: str) -> str:
        if config.is_current_file:
            if context.active_document is None:
                raise no_file_open()
            return str(context.active_document)
        if not config.program:
            raise RunEntryError(
                f"Configuration '{config.name}' has no program.",
                code=ExitCode.CONFIG_ERROR,
                hint="Set a program path for the configuration.",
            )
        return substitute_program(config.program, workspace_path)

    def _resolve_executor(self, config: RunConfig, target_file: str) -> str:
        if config.command:
            return config.command
        extension = PurePath(target_file).suffix
        executor = self.executor_table().resolve(extension)
        if executor is None and config.is_current_file:
            raise no_executor(extension)
        if executor is None:
            raise RunEntryError(
                f"Configuration '{config.name}' has no command and no executor for '{extension}'.",
                code=ExitCode.CONFIG_ERROR,
                hint="Set a command for the configuration.",
            )
        if not config.is_current_file:
            logger.warning(
                "Configuration %s has no command; using executor %s for %s",
                config.name,
                executor,
                extension,
            )
        return executor

    def _debug(self, config: RunConfig, target_file: str, workspace_folder: Path | None) -> DispatchResult:
        descriptor = synthesize_debug(target_file, config.args)
        if descriptor is None:
            raise unsupported_debug_target(PurePath(target_file).suffix)
        if self.debugger is None:
            raise RunEntryError(
                "No debugger is available.",
                code=ExitCode.RUNTIME_ERROR,
                hint="Configure a debugger hand-off for this host.",
            )
        self.debugger.start(workspace_folder, descriptor)
        return DispatchResult(
            mode=RunMode.DEBUG,
            config_name=config.name,
            target_file=target_file,
            descriptor=descriptor,
        )
