"""External ``typst watch`` process handle.

The process writes preview artifacts into the cache directory on its own
schedule; nothing is read from its pipes.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

STOP_TIMEOUT_SECONDS = 1.0


def build_watch_command(typst_command: str, source: Path, output: Path) -> list[str]:
    """Split ``typst_command`` shell-style and append the watch arguments."""
    cmd = shlex.split(typst_command)
    if not cmd:
        raise ValueError("typst command is empty")
    return [*cmd, "watch", str(source), str(output)]


class WatchProcess:
    """Running compiler process for one source document."""

    def __init__(self, process: subprocess.Popen, source: Path, output: Path) -> None:
        self._process = process
        self.source = source
        self.output = output

    @classmethod
    def spawn(cls, typst_command: str, source: Path, output: Path) -> WatchProcess:
        """Start ``typst watch``; raises ``OSError`` when it cannot be spawned."""
        try:
            cmd = build_watch_command(typst_command, source, output)
        except ValueError as exc:
            raise OSError(str(exc)) from exc
        process = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        logger.info("started %s (pid %s)", shlex.join(cmd), process.pid)
        return cls(process, source, output)

    @property
    def pid(self) -> int:
        return self._process.pid

    def is_running(self) -> bool:
        return self._process.poll() is None

    def stop(self, timeout_seconds: float = STOP_TIMEOUT_SECONDS) -> None:
        """Terminate the process, killing it when it does not exit in time."""
        if not self.is_running():
            return
        self._process.terminate()
        try:
            self._process.wait(timeout=timeout_seconds)
        except subprocess.TimeoutExpired:
            self._process.kill()
            self._process.wait()
        logger.info("stopped watcher for %s", self.source)


__all__ = [
    "STOP_TIMEOUT_SECONDS",
    "build_watch_command",
    "WatchProcess",
]
