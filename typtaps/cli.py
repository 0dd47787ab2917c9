"""Command-line front door for typtaps.

Parses CLI options, resolves settings, and runs the editor core headless:
directories print their top-level tree, documents start the live preview
loop until interrupted.
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from collections.abc import Callable
from pathlib import Path

from .file_tree_model import DirectoryNode
from .highlight import DEFAULT_STYLE, colorize_source
from .preview import PREVIEW_MODES
from .runtime import Application, RuntimeLoopTiming, build_application, load_settings, run_main_loop
from .session import read_text
from .state import AppState

DIRECTORY_LOAD_TIMEOUT_SECONDS = 5.0


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def format_tree(state: AppState) -> str:
    """Render visible tree rows as indented text."""
    lines: list[str] = []
    for row in state.tree.iter_rows():
        suffix = "/" if isinstance(row.node, DirectoryNode) else ""
        lines.append(f"{'  ' * row.depth}{row.node.name}{suffix}")
    return "\n".join(lines)


def _status_reporter() -> Callable[[AppState], None]:
    """Return an ``on_change`` hook printing preview status transitions."""
    last: dict[str, tuple[str, int]] = {}

    def report(state: AppState) -> None:
        status = (state.poller.status, len(state.poller.pages))
        if last.get("status") == status:
            return
        last["status"] = status
        sys.stdout.write(f"preview {status[0]} ({status[1]} page(s))\n")
        sys.stdout.flush()

    return report


def print_directory(app: Application, path: Path) -> None:
    app.open_path(path)
    app.runner.wait_idle(DIRECTORY_LOAD_TIMEOUT_SECONDS)
    app.process_pending()
    sys.stdout.write(format_tree(app.state) + "\n")


def watch_document(app: Application, path: Path) -> None:
    app.open_path(path)
    stop = threading.Event()
    try:
        run_main_loop(app, RuntimeLoopTiming(poll_interval_seconds=app.settings.poll_interval_seconds), stop)
    except KeyboardInterrupt:
        stop.set()
    finally:
        if app.state.session.dirty:
            app.state.session.save()


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and run typtaps on a file or directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    parser = argparse.ArgumentParser(description="Minimal Typst editor core with live preview.")
    parser.add_argument("path", nargs="?", default=None, help="Typst file or directory. Defaults to current directory.")
    parser.add_argument("--mode", choices=PREVIEW_MODES, default=None, help="Preview artifact format.")
    parser.add_argument("--typst", default=None, help="Typst compiler command (default: typst).")
    parser.add_argument("--cache-dir", type=Path, default=None, help="Directory for preview artifacts.")
    parser.add_argument("--poll-ms", type=_positive_int, default=None, help="Preview poll interval in milliseconds.")
    parser.add_argument("--print", action="store_true", dest="print_source", help="Print the file highlighted and exit.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for --print.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity.")
    args = parser.parse_args()

    _configure_logging(args.verbose)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")

    if args.print_source:
        if path.is_dir():
            raise SystemExit("--print needs a file path.")
        sys.stdout.write(colorize_source(read_text(path), path, args.style))
        return

    settings = load_settings(
        {
            "preview_mode": args.mode,
            "typst_command": args.typst,
            "cache_dir": args.cache_dir,
            "poll_interval_ms": args.poll_ms,
        }
    )
    app = build_application(settings, on_change=None if path.is_dir() else _status_reporter())
    try:
        if path.is_dir():
            print_directory(app, path)
        else:
            watch_document(app, path)
    finally:
        app.shutdown()


if __name__ == "__main__":
    main()
