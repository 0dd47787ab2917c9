from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .file_tree_model import FileTree
from .preview import RenderPoller
from .session import EditorSession

DEFAULT_ZOOM = 1.0
ZOOM_STEP = 0.2
MIN_ZOOM = 0.1
MAX_ZOOM = 10.0


@dataclass
class AppState:
    poller: RenderPoller
    session: EditorSession = field(default_factory=EditorSession)
    tree: FileTree = field(default_factory=FileTree)
    tree_root: Path | None = None
    document_generation: int = 0
    show_hidden: bool = True
    zoom: float = DEFAULT_ZOOM
