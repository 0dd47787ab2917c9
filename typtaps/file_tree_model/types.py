"""Domain datatypes for lazily loaded file tree nodes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileNode:
    """Leaf node for one regular file (or anything that is not a directory)."""

    path: Path
    name: str


@dataclass(frozen=True)
class DirectoryNode:
    """Directory node; ``children`` stays empty until the first expansion load."""

    path: Path
    name: str
    expanded: bool = False
    children: tuple["FileTreeNode", ...] = ()


FileTreeNode = DirectoryNode | FileNode


__all__ = [
    "FileNode",
    "DirectoryNode",
    "FileTreeNode",
]
