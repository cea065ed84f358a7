"""Editor and workspace context supplied by the host."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


@dataclass(frozen=True)
class EditorContext:
    active_document: Path | None = None
    workspace_folders: tuple[Path, ...] = field(default_factory=tuple)

    def folder_for(self, document: Path) -> Path | None:
        containing = [folder for folder in self.workspace_folders if _is_within(document, folder)]
        if not containing:
            return None
        return max(containing, key=lambda folder: len(folder.parts))

    def resolve_workspace_folder(self) -> Path | None:
        if self.active_document is not None:
            return self.folder_for(self.active_document)
        if self.workspace_folders:
            return self.workspace_folders[0]
        return None


def build_editor_context(
    active_document: str | Path | None,
    workspace_folders: list[str | Path] | tuple[str | Path, ...] = (),
) -> EditorContext:
    document = Path(active_document).expanduser().absolute() if active_document else None
    folders = tuple(Path(item).expanduser().absolute() for item in workspace_folders)
    return EditorContext(active_document=document, workspace_folders=folders)
