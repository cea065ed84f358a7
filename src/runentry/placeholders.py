"""Workspace and target-file placeholder substitution."""

from __future__ import annotations

import ntpath
import posixpath

WORKSPACE_FOLDER_TOKEN = "${workspaceFolder}"
TEMPLATE_SIGIL = "$"


def substitute_program(program: str, workspace_path: str) -> str:
    return program.replace(WORKSPACE_FOLDER_TOKEN, workspace_path)


def is_template(executor: str) -> bool:
    return TEMPLATE_SIGIL in executor


def _path_module(target_file: str):
    # Keep Windows paths intact when the target was produced on a Windows host.
    if "\\" in target_file and "/" not in target_file:
        return ntpath
    return posixpath


def substitute_command(executor: str, target_file: str, workspace_path: str) -> str:
    paths = _path_module(target_file)
    directory = paths.dirname(target_file)
    file_name = paths.basename(target_file)
    stem, _ = paths.splitext(file_name)
    # $fileNameWithoutExt before $fileName, otherwise the prefix match wins.
    return (
        executor.replace("$workspaceRoot", workspace_path)
        .replace("$dir", directory)
        .replace("$fileNameWithoutExt", stem)
        .replace("$fileName", file_name)
    )
