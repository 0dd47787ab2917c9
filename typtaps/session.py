"""Editor buffer, cursor, and save state for the open document."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from .highlight import HighlightSpan, highlight_spans

logger = logging.getLogger(__name__)

DEFAULT_AUTOSAVE_SECONDS = 2.0


def read_text(path: Path) -> str:
    """Read a document, trying common encodings before lossy decoding."""
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def cursor_for_text(text: str) -> tuple[int, int]:
    """Return ``(line, column)`` for a cursor sitting at the end of ``text``."""
    line = text.count("\n") + 1
    last_line = text.rsplit("\n", 1)[-1]
    return max(1, line), max(1, len(last_line) + 1)


@dataclass
class EditorSession:
    text: str = ""
    path: Path | None = None
    cursor_line: int = 1
    cursor_column: int = 1
    dirty: bool = False
    last_save: float = field(default_factory=time.monotonic)
    autosave_seconds: float = DEFAULT_AUTOSAVE_SECONDS

    def _update_cursor(self) -> None:
        self.cursor_line, self.cursor_column = cursor_for_text(self.text)

    def set_text(self, text: str) -> None:
        """Replace the buffer with the editor widget's current text."""
        if text != self.text:
            self.text = text
            self.dirty = True
        self._update_cursor()

    def insert(self, text: str) -> None:
        """Append ``text`` at the end of the buffer."""
        self.set_text(self.text + text)

    def open_document(self, path: Path, text: str, now: float | None = None) -> None:
        self.path = path
        self.text = text
        self.dirty = False
        self.last_save = time.monotonic() if now is None else now
        self._update_cursor()

    def save(self, now: float | None = None) -> bool:
        """Write the buffer to the associated path.

        Returns ``False`` without a path or when the write fails; a failed
        write keeps the buffer dirty.
        """
        if self.path is None:
            return False
        try:
            self.path.write_text(self.text, encoding="utf-8")
        except OSError as exc:
            logger.warning("failed to save %s: %s", self.path, exc)
            return False
        self.dirty = False
        self.last_save = time.monotonic() if now is None else now
        logger.debug("saved %s", self.path)
        return True

    def autosave_due(self, now: float) -> bool:
        if self.path is None or not self.dirty:
            return False
        return now - self.last_save > self.autosave_seconds

    def maybe_autosave(self, now: float) -> bool:
        """Save when dirty and the debounce interval has elapsed."""
        if not self.autosave_due(now):
            return False
        return self.save(now)

    def highlight_spans(self) -> list[HighlightSpan]:
        return highlight_spans(self.text, self.path)


__all__ = [
    "DEFAULT_AUTOSAVE_SECONDS",
    "read_text",
    "cursor_for_text",
    "EditorSession",
]
