"""Live preview pipeline: artifact discovery, watch process, page loading, polling."""

from __future__ import annotations

from .artifacts import (
    PREVIEW_MODE_PDF,
    PREVIEW_MODE_SVG,
    PREVIEW_MODES,
    artifact_paths,
    enumerate_svg_pages,
    newest_mtime_ns,
    output_template,
)
from .pages import (
    DEFAULT_PDF_TARGET_WIDTH,
    PageLoadRequest,
    PageLoadResult,
    RenderedPage,
    load_pages,
    read_svg_pages,
    render_pdf_pages,
)
from .poller import RENDER_IDLE, RENDER_READY, RENDER_WATCHING, RenderPoller, RenderState
from .watcher import WatchProcess, build_watch_command

__all__ = [
    "PREVIEW_MODE_PDF",
    "PREVIEW_MODE_SVG",
    "PREVIEW_MODES",
    "artifact_paths",
    "enumerate_svg_pages",
    "newest_mtime_ns",
    "output_template",
    "DEFAULT_PDF_TARGET_WIDTH",
    "PageLoadRequest",
    "PageLoadResult",
    "RenderedPage",
    "load_pages",
    "read_svg_pages",
    "render_pdf_pages",
    "RENDER_IDLE",
    "RENDER_READY",
    "RENDER_WATCHING",
    "RenderPoller",
    "RenderState",
    "WatchProcess",
    "build_watch_command",
]
