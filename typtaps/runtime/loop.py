"""Fixed-interval tick loop for running the core without a GUI toolkit.

A GUI front end drives ``Application.tick`` from its own timer instead.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from .app import Application


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling the headless loop."""

    poll_interval_seconds: float


def run_main_loop(
    app: Application,
    timing: RuntimeLoopTiming,
    stop: threading.Event,
    *,
    max_ticks: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """Tick ``app`` until ``stop`` is set or ``max_ticks`` ticks ran.

    Returns the number of ticks performed.
    """
    ticks = 0
    while not stop.is_set():
        if max_ticks is not None and ticks >= max_ticks:
            break
        app.tick(clock())
        ticks += 1
        sleep(timing.poll_interval_seconds)
    return ticks


__all__ = [
    "RuntimeLoopTiming",
    "run_main_loop",
]
