"""One-level directory scanning for the lazily loaded file tree."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .types import DirectoryNode, FileNode, FileTreeNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryChild:
    """One visible directory child row."""

    name: str
    path: Path
    is_dir: bool


def safe_mtime_ns(path: Path) -> int | None:
    """Return ``st_mtime_ns`` for ``path`` or ``None`` on stat failure."""
    try:
        return int(path.stat().st_mtime_ns)
    except OSError:
        return None


def list_directory_children(
    directory: Path,
    show_hidden: bool = True,
) -> tuple[list[DirectoryChild], OSError | None]:
    """List immediate children of ``directory`` in display order.

    Directories sort before files; each group is ordered case-insensitively by
    name. Returns ``(children, scan_error)``; ``scan_error`` is set (and the
    list empty) when the directory cannot be scanned.
    """
    children: list[DirectoryChild] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                name = child.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    is_dir = child.is_dir()
                except OSError:
                    is_dir = False
                children.append(DirectoryChild(name=name, path=Path(directory) / name, is_dir=is_dir))
    except OSError as exc:
        return [], exc

    children.sort(key=lambda item: (not item.is_dir, item.name.lower()))
    return children, None


def load_directory(directory: Path, show_hidden: bool = True) -> list[FileTreeNode]:
    """Build unexpanded tree nodes for the immediate children of ``directory``.

    Unreadable directories produce an empty list; the error is only logged.
    """
    children, scan_error = list_directory_children(directory, show_hidden)
    if scan_error is not None:
        logger.debug("cannot list %s: %s", directory, scan_error)
        return []

    nodes: list[FileTreeNode] = []
    for child in children:
        if child.is_dir:
            nodes.append(DirectoryNode(path=child.path, name=child.name))
        else:
            nodes.append(FileNode(path=child.path, name=child.name))
    return nodes


__all__ = [
    "DirectoryChild",
    "safe_mtime_ns",
    "list_directory_children",
    "load_directory",
]
