"""Domain model for the lazily loaded file tree.

This package contains non-UI tree primitives:
- file/directory node datatypes
- one-level directory scanning
- the path-addressed tree arena with toggle and subtree replacement
"""

from __future__ import annotations

from .types import DirectoryNode, FileNode, FileTreeNode
from .fs import DirectoryChild, list_directory_children, load_directory, safe_mtime_ns
from .tree import FileTree, TreeRow

__all__ = [
    "DirectoryNode",
    "FileNode",
    "FileTreeNode",
    "DirectoryChild",
    "list_directory_children",
    "load_directory",
    "safe_mtime_ns",
    "FileTree",
    "TreeRow",
]
