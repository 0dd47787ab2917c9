"""Pygments-backed syntax highlighting for the editor buffer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.token import Token
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_FORMATTERS: dict[str, TerminalFormatter] = {}


@dataclass(frozen=True)
class HighlightSpan:
    """Styled token range on one line (1-based line, 0-based columns)."""

    line: int
    start_column: int
    end_column: int
    token_type: str


def lexer_for_path(path: Path | None) -> Lexer:
    """Pick a lexer from the file name, falling back to plain text."""
    options = {"stripnl": False, "ensurenl": False}
    if path is None:
        return TextLexer(**options)
    try:
        return get_lexer_for_filename(path.name, **options)
    except ClassNotFound:
        return TextLexer(**options)


def highlight_spans(source: str, path: Path | None) -> list[HighlightSpan]:
    """Split ``source`` into styled spans, skipping plain text and whitespace."""
    spans: list[HighlightSpan] = []
    line = 1
    column = 0
    for token_type, value in lexer_for_path(path).get_tokens(source):
        pieces = value.split("\n")
        for piece_idx, piece in enumerate(pieces):
            if piece_idx > 0:
                line += 1
                column = 0
            if not piece:
                continue
            if token_type not in Token.Text and piece.strip():
                spans.append(
                    HighlightSpan(
                        line=line,
                        start_column=column,
                        end_column=column + len(piece),
                        token_type=str(token_type),
                    )
                )
            column += len(piece)
    return spans


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = DEFAULT_STYLE
    formatter = TerminalFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def colorize_source(source: str, path: Path | None, style: str = DEFAULT_STYLE) -> str:
    """Return ``source`` with ANSI color escapes for terminal output."""
    return pygments_highlight(source, lexer_for_path(path), _formatter_for_style(style))


__all__ = [
    "DEFAULT_STYLE",
    "HighlightSpan",
    "lexer_for_path",
    "highlight_spans",
    "colorize_source",
]
