"""Intent dispatch: maps ``(state, intent)`` to a state change plus tasks.

Dispatch runs on the main thread and never blocks on disk reads; those are
returned as ``Task`` objects whose completion intents come back through
``dispatch``. Every intent type has a handler. Failures carried by intents are
logged and leave state unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .file_tree_model import load_directory
from .intents import (
    DirectoryLoaded,
    DirectoryOpened,
    DocumentRead,
    Edit,
    FileOpened,
    Intent,
    OpenDirectory,
    OpenFile,
    PagesRendered,
    RefreshDirectory,
    ResetZoom,
    SaveFile,
    Task,
    Tick,
    ToggleDirectory,
    ZoomIn,
    ZoomOut,
)
from .preview import PageLoadRequest, load_pages
from .session import read_text
from .state import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, ZOOM_STEP, AppState

logger = logging.getLogger(__name__)

CANCELLED = "cancelled"


def _no_picker() -> Path | None:
    return None


@dataclass(frozen=True)
class Services:
    """Blocking collaborators supplied by the UI layer (file dialogs)."""

    pick_file: Callable[[], Path | None] = _no_picker
    pick_directory: Callable[[], Path | None] = _no_picker


def load_directory_task(path: Path, generation: int, show_hidden: bool) -> Task:
    def run() -> DirectoryLoaded:
        return DirectoryLoaded(path=path, entries=tuple(load_directory(path, show_hidden)), generation=generation)

    return Task(name="load-directory", run=run)


def read_document_task(path: Path, generation: int = 0) -> Task:
    def run() -> DocumentRead:
        try:
            return DocumentRead(path=path, text=read_text(path), generation=generation)
        except OSError as exc:
            return DocumentRead(path=path, error=str(exc), generation=generation)

    return Task(name="read-document", run=run)


def load_pages_task(request: PageLoadRequest) -> Task:
    def run() -> PagesRendered:
        return PagesRendered(result=load_pages(request))

    return Task(name="load-pages", run=run)


def _picker_task(name: str, picker: Callable[[], Path | None], wrap: Callable[..., Intent]) -> Task:
    def run() -> Intent:
        try:
            path = picker()
        except OSError as exc:
            return wrap(error=str(exc))
        if path is None:
            return wrap(error=CANCELLED)
        return wrap(path=path)

    return Task(name=name, run=run)


def _on_edit(state: AppState, intent: Edit, services: Services) -> list[Task]:
    state.session.set_text(intent.text)
    return []


def _on_open_file(state: AppState, intent: OpenFile, services: Services) -> list[Task]:
    return [_picker_task("pick-file", services.pick_file, FileOpened)]


def _on_file_opened(state: AppState, intent: FileOpened, services: Services) -> list[Task]:
    if intent.path is None:
        if intent.error == CANCELLED:
            logger.debug("open file cancelled")
        else:
            logger.warning("open file failed: %s", intent.error)
        return []
    state.document_generation += 1
    return [read_document_task(intent.path, state.document_generation)]


def _on_document_read(state: AppState, intent: DocumentRead, services: Services) -> list[Task]:
    if intent.generation != state.document_generation:
        logger.debug("dropping stale read of %s", intent.path)
        return []
    if intent.text is None:
        logger.warning("cannot read %s: %s", intent.path, intent.error)
        return []
    state.session.open_document(intent.path, intent.text)
    state.poller.open(intent.path)
    logger.info("opened %s", intent.path)
    return []


def _on_open_directory(state: AppState, intent: OpenDirectory, services: Services) -> list[Task]:
    return [_picker_task("pick-directory", services.pick_directory, DirectoryOpened)]


def _on_directory_opened(state: AppState, intent: DirectoryOpened, services: Services) -> list[Task]:
    if intent.path is None:
        if intent.error == CANCELLED:
            logger.debug("open directory cancelled")
        else:
            logger.warning("open directory failed: %s", intent.error)
        return []
    state.tree.clear()
    state.tree_root = intent.path
    return [load_directory_task(intent.path, state.tree.generation, state.show_hidden)]


def _on_save_file(state: AppState, intent: SaveFile, services: Services) -> list[Task]:
    state.session.save()
    return []


def _on_toggle_directory(state: AppState, intent: ToggleDirectory, services: Services) -> list[Task]:
    if not state.tree.toggle(intent.path):
        return []
    return [load_directory_task(intent.path, state.tree.generation, state.show_hidden)]


def _on_refresh_directory(state: AppState, intent: RefreshDirectory, services: Services) -> list[Task]:
    if intent.path != state.tree_root and intent.path not in state.tree:
        logger.debug("refresh ignored for unknown directory %s", intent.path)
        return []
    if intent.path == state.tree_root:
        state.tree.clear()
    return [load_directory_task(intent.path, state.tree.generation, state.show_hidden)]


def _on_directory_loaded(state: AppState, intent: DirectoryLoaded, services: Services) -> list[Task]:
    if intent.generation != state.tree.generation:
        logger.debug("dropping stale listing for %s", intent.path)
        return []
    state.tree.replace_children(intent.path, intent.entries)
    return []


def _on_tick(state: AppState, intent: Tick, services: Services) -> list[Task]:
    state.session.maybe_autosave(intent.now)
    request = state.poller.poll()
    if request is None:
        return []
    return [load_pages_task(request)]


def _on_pages_rendered(state: AppState, intent: PagesRendered, services: Services) -> list[Task]:
    state.poller.apply_pages(intent.result)
    return []


def _on_zoom_in(state: AppState, intent: ZoomIn, services: Services) -> list[Task]:
    state.zoom = min(MAX_ZOOM, state.zoom + ZOOM_STEP)
    return []


def _on_zoom_out(state: AppState, intent: ZoomOut, services: Services) -> list[Task]:
    state.zoom = max(MIN_ZOOM, state.zoom - ZOOM_STEP)
    return []


def _on_reset_zoom(state: AppState, intent: ResetZoom, services: Services) -> list[Task]:
    state.zoom = DEFAULT_ZOOM
    return []


_HANDLERS: dict[type, Callable[[AppState, object, Services], list[Task]]] = {
    Edit: _on_edit,
    OpenFile: _on_open_file,
    FileOpened: _on_file_opened,
    DocumentRead: _on_document_read,
    OpenDirectory: _on_open_directory,
    DirectoryOpened: _on_directory_opened,
    SaveFile: _on_save_file,
    ToggleDirectory: _on_toggle_directory,
    RefreshDirectory: _on_refresh_directory,
    DirectoryLoaded: _on_directory_loaded,
    Tick: _on_tick,
    PagesRendered: _on_pages_rendered,
    ZoomIn: _on_zoom_in,
    ZoomOut: _on_zoom_out,
    ResetZoom: _on_reset_zoom,
}


def dispatch(state: AppState, intent: Intent, services: Services | None = None) -> list[Task]:
    """Apply ``intent`` to ``state`` and return follow-up tasks."""
    handler = _HANDLERS.get(type(intent))
    if handler is None:
        logger.warning("unhandled intent %r", intent)
        return []
    return handler(state, intent, services if services is not None else Services())


__all__ = [
    "CANCELLED",
    "Services",
    "load_directory_task",
    "read_document_task",
    "load_pages_task",
    "dispatch",
]
