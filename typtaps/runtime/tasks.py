"""Background task runner feeding completion intents back to the main thread."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from queue import Empty, Queue

from ..intents import Intent, Task

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class TaskRunner:
    """Runs tasks on worker threads and queues their completion intents.

    Results are only ever consumed through ``drain_results`` on the thread that
    owns application state.
    """

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="typtaps-task")
        self._results: Queue[Intent] = Queue()
        self._lock = threading.Lock()
        self._in_flight = 0
        self._idle = threading.Event()
        self._idle.set()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def submit(self, task: Task) -> None:
        with self._lock:
            self._in_flight += 1
            self._idle.clear()
        future = self._executor.submit(task.run)
        future.add_done_callback(lambda done: self._on_done(task, done))

    def _on_done(self, task: Task, future: Future) -> None:
        intent = None
        if future.cancelled():
            logger.debug("task %s cancelled", task.name)
        else:
            try:
                intent = future.result()
            except Exception:
                logger.exception("task %s failed", task.name)
        if intent is not None:
            self._results.put(intent)
        with self._lock:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()

    def drain_results(self) -> list[Intent]:
        """Drain all completed task intents."""
        out: list[Intent] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def wait_idle(self, timeout_seconds: float | None = None) -> bool:
        """Block until no task is running; returns ``False`` on timeout."""
        return self._idle.wait(timeout_seconds)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "TaskRunner",
]
