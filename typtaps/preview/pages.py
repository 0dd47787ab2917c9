"""Loading rendered preview pages into memory.

Runs on worker threads. Page loads never touch shared state; they return a
``PageLoadResult`` that the main thread applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF

from .artifacts import PREVIEW_MODE_PDF

DEFAULT_PDF_TARGET_WIDTH = 1200


@dataclass(frozen=True)
class RenderedPage:
    """In-memory image for one document page."""

    index: int
    source: Path
    data: bytes
    image_format: str


@dataclass(frozen=True)
class PageLoadRequest:
    """One page-load job captured by the poller on the main thread."""

    document: Path
    generation: int
    mode: str
    artifacts: tuple[Path, ...]
    mtime_ns: int
    pdf_target_width: int = DEFAULT_PDF_TARGET_WIDTH


@dataclass(frozen=True)
class PageLoadResult:
    """Completed page load returned to the main thread."""

    request: PageLoadRequest
    pages: tuple[RenderedPage, ...]
    error: str | None = None


def read_svg_pages(paths: tuple[Path, ...] | list[Path]) -> tuple[list[RenderedPage], OSError | None]:
    """Read SVG artifacts fully, in order.

    One unreadable page fails the whole set: the result is then empty so a
    truncated page sequence is never shown.
    """
    pages: list[RenderedPage] = []
    for index, path in enumerate(paths, start=1):
        try:
            data = path.read_bytes()
        except OSError as exc:
            return [], exc
        pages.append(RenderedPage(index=index, source=path, data=data, image_format="svg"))
    return pages, None


def render_pdf_pages(pdf_path: Path, target_width: int = DEFAULT_PDF_TARGET_WIDTH) -> list[RenderedPage]:
    """Rasterize every page of ``pdf_path`` to PNG at ``target_width`` pixels."""
    pages: list[RenderedPage] = []
    with fitz.open(pdf_path) as document:
        for index, page in enumerate(document, start=1):
            page_width = page.rect.width
            zoom = target_width / page_width if page_width > 0 else 1.0
            pixmap = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
            pages.append(
                RenderedPage(index=index, source=pdf_path, data=pixmap.tobytes("png"), image_format="png")
            )
    return pages


def load_pages(request: PageLoadRequest) -> PageLoadResult:
    """Load every page named by ``request``."""
    if request.mode == PREVIEW_MODE_PDF:
        pdf_path = request.artifacts[0]
        try:
            pages = render_pdf_pages(pdf_path, request.pdf_target_width)
        except Exception as exc:
            # PyMuPDF raises its own error types for truncated files mid-write.
            return PageLoadResult(request=request, pages=(), error=f"{pdf_path}: {exc}")
        return PageLoadResult(request=request, pages=tuple(pages))

    pages, read_error = read_svg_pages(request.artifacts)
    return PageLoadResult(
        request=request,
        pages=tuple(pages),
        error=str(read_error) if read_error is not None else None,
    )


__all__ = [
    "DEFAULT_PDF_TARGET_WIDTH",
    "RenderedPage",
    "PageLoadRequest",
    "PageLoadResult",
    "read_svg_pages",
    "render_pdf_pages",
    "load_pages",
]
