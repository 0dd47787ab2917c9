"""Naming and discovery of compiler output artifacts in the cache directory.

SVG previews are written one file per page as ``{stem}-{n}.svg`` (n from 1).
A lone ``{stem}.svg`` is accepted when no numbered page exists. PDF previews
are written as a single ``{stem}.pdf`` and rasterized in-process.
"""

from __future__ import annotations

from pathlib import Path

from ..file_tree_model.fs import safe_mtime_ns

PREVIEW_MODE_SVG = "svg"
PREVIEW_MODE_PDF = "pdf"
PREVIEW_MODES = (PREVIEW_MODE_SVG, PREVIEW_MODE_PDF)

# ``{p}`` is expanded by ``typst watch`` to the 1-based page number.
TYPST_PAGE_PLACEHOLDER = "{p}"


def output_template(source: Path, cache_dir: Path, mode: str) -> Path:
    """Return the output path handed to ``typst watch`` for ``source``."""
    stem = source.stem
    if mode == PREVIEW_MODE_PDF:
        return cache_dir / f"{stem}.pdf"
    return cache_dir / f"{stem}-{TYPST_PAGE_PLACEHOLDER}.svg"


def svg_page_path(cache_dir: Path, stem: str, page: int) -> Path:
    return cache_dir / f"{stem}-{page}.svg"


def enumerate_svg_pages(cache_dir: Path, stem: str) -> list[Path]:
    """List page artifacts in page order, stopping at the first missing index."""
    pages: list[Path] = []
    page = 1
    while True:
        candidate = svg_page_path(cache_dir, stem, page)
        if not candidate.is_file():
            break
        pages.append(candidate)
        page += 1

    if not pages:
        single = cache_dir / f"{stem}.svg"
        if single.is_file():
            pages.append(single)
    return pages


def artifact_paths(source: Path, cache_dir: Path, mode: str) -> list[Path]:
    """Return existing artifacts for ``source`` in page order."""
    if mode == PREVIEW_MODE_PDF:
        pdf_path = output_template(source, cache_dir, mode)
        return [pdf_path] if pdf_path.is_file() else []
    return enumerate_svg_pages(cache_dir, source.stem)


def newest_mtime_ns(paths: list[Path]) -> int | None:
    """Return the newest modification time among ``paths``."""
    newest: int | None = None
    for path in paths:
        mtime_ns = safe_mtime_ns(path)
        if mtime_ns is None:
            continue
        if newest is None or mtime_ns > newest:
            newest = mtime_ns
    return newest


__all__ = [
    "PREVIEW_MODE_SVG",
    "PREVIEW_MODE_PDF",
    "PREVIEW_MODES",
    "TYPST_PAGE_PLACEHOLDER",
    "output_template",
    "svg_page_path",
    "enumerate_svg_pages",
    "artifact_paths",
    "newest_mtime_ns",
]
