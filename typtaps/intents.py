"""Intents consumed by the dispatcher and the tasks that produce them.

User actions and async completions are both plain frozen records. Completion
intents carry everything the main thread needs to apply them, including the
generation they were scheduled for.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .file_tree_model import FileTreeNode
from .preview import PageLoadResult


@dataclass(frozen=True)
class Edit:
    text: str


@dataclass(frozen=True)
class OpenFile:
    pass


@dataclass(frozen=True)
class FileOpened:
    path: Path | None = None
    error: str | None = None


@dataclass(frozen=True)
class DocumentRead:
    path: Path
    text: str | None = None
    error: str | None = None
    generation: int = 0


@dataclass(frozen=True)
class OpenDirectory:
    pass


@dataclass(frozen=True)
class DirectoryOpened:
    path: Path | None = None
    error: str | None = None


@dataclass(frozen=True)
class SaveFile:
    pass


@dataclass(frozen=True)
class ToggleDirectory:
    path: Path


@dataclass(frozen=True)
class RefreshDirectory:
    path: Path


@dataclass(frozen=True)
class DirectoryLoaded:
    path: Path
    entries: tuple[FileTreeNode, ...]
    generation: int


@dataclass(frozen=True)
class Tick:
    now: float


@dataclass(frozen=True)
class PagesRendered:
    result: PageLoadResult


@dataclass(frozen=True)
class ZoomIn:
    pass


@dataclass(frozen=True)
class ZoomOut:
    pass


@dataclass(frozen=True)
class ResetZoom:
    pass


Intent = (
    Edit
    | OpenFile
    | FileOpened
    | DocumentRead
    | OpenDirectory
    | DirectoryOpened
    | SaveFile
    | ToggleDirectory
    | RefreshDirectory
    | DirectoryLoaded
    | Tick
    | PagesRendered
    | ZoomIn
    | ZoomOut
    | ResetZoom
)


@dataclass(frozen=True)
class Task:
    """Blocking work to run off the main thread; ``run`` returns one intent."""

    name: str
    run: Callable[[], Intent | None]


__all__ = [
    "Edit",
    "OpenFile",
    "FileOpened",
    "DocumentRead",
    "OpenDirectory",
    "DirectoryOpened",
    "SaveFile",
    "ToggleDirectory",
    "RefreshDirectory",
    "DirectoryLoaded",
    "Tick",
    "PagesRendered",
    "ZoomIn",
    "ZoomOut",
    "ResetZoom",
    "Intent",
    "Task",
]
