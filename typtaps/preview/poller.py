"""Polling state machine that reconciles compiler output into preview pages.

States move ``idle -> watching -> ready`` and back to ``watching`` whenever a
different document is opened. ``poll`` runs on the main thread every tick and
only stats files; reading page data happens in a ``PageLoadRequest`` executed
elsewhere, whose result comes back through ``apply_pages``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .artifacts import PREVIEW_MODE_SVG, artifact_paths, newest_mtime_ns, output_template
from .pages import DEFAULT_PDF_TARGET_WIDTH, PageLoadRequest, PageLoadResult, RenderedPage
from .watcher import WatchProcess

logger = logging.getLogger(__name__)

RENDER_IDLE = "idle"
RENDER_WATCHING = "watching"
RENDER_READY = "ready"


@dataclass
class RenderState:
    document: Path | None = None
    watcher: WatchProcess | None = None
    pages: tuple[RenderedPage, ...] = ()
    last_rendered_mtime_ns: int | None = None
    last_failed_mtime_ns: int | None = None
    loading: bool = False
    generation: int = 0

    @property
    def status(self) -> str:
        if self.watcher is None:
            return RENDER_IDLE
        if self.pages:
            return RENDER_READY
        return RENDER_WATCHING


class RenderPoller:
    """Owns the watch process and the page sequence for the open document."""

    def __init__(
        self,
        cache_dir: Path,
        *,
        mode: str = PREVIEW_MODE_SVG,
        typst_command: str = "typst",
        pdf_target_width: int = DEFAULT_PDF_TARGET_WIDTH,
        spawn_watcher: Callable[[str, Path, Path], WatchProcess] = WatchProcess.spawn,
    ) -> None:
        self.cache_dir = cache_dir
        self.mode = mode
        self.typst_command = typst_command
        self.pdf_target_width = pdf_target_width
        self._spawn_watcher = spawn_watcher
        self.state = RenderState()

    @property
    def status(self) -> str:
        return self.state.status

    @property
    def pages(self) -> tuple[RenderedPage, ...]:
        return self.state.pages

    def open(self, document: Path) -> None:
        """Reset preview state for ``document`` and start a fresh watcher."""
        self.shutdown()
        self.state = RenderState(document=document, generation=self.state.generation + 1)

        output = output_template(document, self.cache_dir, self.mode)
        try:
            self.state.watcher = self._spawn_watcher(self.typst_command, document, output)
        except OSError as exc:
            logger.error("failed to start typst watch for %s: %s", document, exc)

    def shutdown(self) -> None:
        """Stop the current watcher, if any."""
        watcher = self.state.watcher
        if watcher is None:
            return
        self.state.watcher = None
        try:
            watcher.stop()
        except OSError as exc:
            logger.warning("failed to stop watcher for %s: %s", watcher.source, exc)

    def poll(self) -> PageLoadRequest | None:
        """Return a page-load request when newer artifacts are available."""
        state = self.state
        if state.watcher is None or state.document is None or state.loading:
            return None

        artifacts = artifact_paths(state.document, self.cache_dir, self.mode)
        mtime_ns = newest_mtime_ns(artifacts)
        if mtime_ns is None:
            return None
        if state.last_rendered_mtime_ns is not None and mtime_ns <= state.last_rendered_mtime_ns:
            return None

        state.loading = True
        return PageLoadRequest(
            document=state.document,
            generation=state.generation,
            mode=self.mode,
            artifacts=tuple(artifacts),
            mtime_ns=mtime_ns,
            pdf_target_width=self.pdf_target_width,
        )

    def apply_pages(self, result: PageLoadResult) -> bool:
        """Install loaded pages; returns ``True`` when the page set changed.

        Results for an older document are dropped. A failed or empty result
        keeps the previous pages and timestamp so the next poll retries; the
        first failure per artifact mtime is logged as a warning, repeats at
        debug level.
        """
        state = self.state
        request = result.request
        if request.generation != state.generation:
            logger.debug("dropping stale pages for %s", request.document)
            return False

        state.loading = False
        if result.error is not None or not result.pages:
            reason = result.error or "no pages"
            if state.last_failed_mtime_ns != request.mtime_ns:
                state.last_failed_mtime_ns = request.mtime_ns
                logger.warning("cannot load preview for %s: %s", request.document.name, reason)
            else:
                logger.debug("preview for %s still unreadable: %s", request.document.name, reason)
            return False

        state.pages = tuple(result.pages)
        state.last_rendered_mtime_ns = request.mtime_ns
        state.last_failed_mtime_ns = None
        logger.info("preview updated: %d page(s) for %s", len(result.pages), request.document.name)
        return True


__all__ = [
    "RENDER_IDLE",
    "RENDER_WATCHING",
    "RENDER_READY",
    "RenderState",
    "RenderPoller",
]
