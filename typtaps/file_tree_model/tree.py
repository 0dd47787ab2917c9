"""Mutable file tree stored as a path-addressed arena.

Nodes live in a flat ``path -> node`` map. Directory membership is kept in
ordered child-path lists plus a parent map, so toggling and subtree
replacement never rebuild the whole tree and never recurse through nested
ownership. A node's path is its identity for every lookup.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from pathlib import Path

from .types import DirectoryNode, FileNode, FileTreeNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeRow:
    """One visible tree row in depth-first display order."""

    node: FileTreeNode
    depth: int


class FileTree:
    """Root-level ordered sequence of tree nodes with lazy directory children."""

    def __init__(self, roots: Iterable[FileTreeNode] = ()) -> None:
        self._nodes: dict[Path, FileTreeNode] = {}
        self._children: dict[Path, list[Path]] = {}
        self._parent: dict[Path, Path | None] = {}
        self._roots: list[Path] = []
        self.generation = 0
        self._roots = self._insert_all(None, roots)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileTree):
            return NotImplemented
        return self.to_nodes() == other.to_nodes()

    def is_empty(self) -> bool:
        return not self._roots

    @property
    def roots(self) -> tuple[FileTreeNode, ...]:
        return tuple(self._nodes[path] for path in self._roots)

    def find(self, path: Path) -> FileTreeNode | None:
        """Return the node stored under ``path`` without its nested children."""
        return self._nodes.get(path)

    def parent_of(self, path: Path) -> Path | None:
        return self._parent.get(path)

    def children_of(self, path: Path) -> tuple[FileTreeNode, ...]:
        return tuple(self._nodes[child] for child in self._children.get(path, ()))

    def expanded_paths(self) -> set[Path]:
        return {
            path
            for path, node in self._nodes.items()
            if isinstance(node, DirectoryNode) and node.expanded
        }

    def clear(self) -> None:
        """Drop every node and invalidate work scheduled against the old tree."""
        self._nodes.clear()
        self._children.clear()
        self._parent.clear()
        self._roots = []
        self.generation += 1

    def toggle(self, target_path: Path) -> bool:
        """Flip ``expanded`` on the directory at ``target_path``.

        Returns ``True`` when the directory just became expanded and has no
        loaded children yet, meaning the caller should schedule a load.
        Unknown paths and file paths leave the tree unchanged.
        """
        node = self._nodes.get(target_path)
        if not isinstance(node, DirectoryNode):
            return False

        expanded = not node.expanded
        self._nodes[target_path] = replace(node, expanded=expanded)
        return expanded and not self._children.get(target_path)

    def replace_children(self, target_path: Path, new_children: Iterable[FileTreeNode]) -> bool:
        """Overwrite the children of ``target_path`` wholesale.

        An empty tree takes ``new_children`` as its root level regardless of
        ``target_path`` (first load of a freshly opened directory). Returns
        ``False`` when the target is not a known directory.
        """
        if not self._roots:
            self._roots = self._insert_all(None, new_children)
            return True

        node = self._nodes.get(target_path)
        if not isinstance(node, DirectoryNode):
            return False

        for child_path in self._children.get(target_path, ()):
            self._prune(child_path)
        self._children[target_path] = self._insert_all(target_path, new_children)
        return True

    def _insert_all(self, parent: Path | None, nodes: Iterable[FileTreeNode]) -> list[Path]:
        paths: list[Path] = []
        for node in nodes:
            if node.path in self._nodes:
                logger.debug("duplicate tree path ignored: %s", node.path)
                continue
            self._insert(parent, node)
            paths.append(node.path)
        return paths

    def _insert(self, parent: Path | None, node: FileTreeNode) -> None:
        self._parent[node.path] = parent
        if isinstance(node, FileNode):
            self._nodes[node.path] = node
            return
        self._nodes[node.path] = replace(node, children=())
        self._children[node.path] = self._insert_all(node.path, node.children)

    def _prune(self, path: Path) -> None:
        for child_path in self._children.pop(path, ()):
            self._prune(child_path)
        self._nodes.pop(path, None)
        self._parent.pop(path, None)

    def to_nodes(self) -> tuple[FileTreeNode, ...]:
        """Materialize the arena as nested, immutable nodes."""

        def build(path: Path) -> FileTreeNode:
            node = self._nodes[path]
            if isinstance(node, FileNode):
                return node
            return replace(node, children=tuple(build(child) for child in self._children.get(path, ())))

        return tuple(build(path) for path in self._roots)

    def iter_rows(self) -> Iterator[TreeRow]:
        """Yield rows for roots plus the contents of expanded directories."""

        def walk(paths: list[Path], depth: int) -> Iterator[TreeRow]:
            for path in paths:
                node = self._nodes[path]
                yield TreeRow(node=node, depth=depth)
                if isinstance(node, DirectoryNode) and node.expanded:
                    yield from walk(self._children.get(path, []), depth + 1)

        yield from walk(self._roots, 0)

    def visible_rows(self) -> list[TreeRow]:
        return list(self.iter_rows())


__all__ = [
    "TreeRow",
    "FileTree",
]
