"""Application wiring: state, dispatcher, task runner, and UI notification.

``Application`` is the object a GUI front end drives. It accepts intents from
the UI thread, applies them through ``dispatch``, hands returned tasks to the
runner, and feeds completion intents back in when ``process_pending`` runs.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from ..dispatcher import Services, dispatch
from ..intents import DirectoryOpened, FileOpened, Intent, Tick
from ..keys import KeyComboRegistry, build_shortcut_registry
from ..preview import PREVIEW_MODE_PDF, RenderPoller
from ..session import EditorSession
from ..state import AppState
from .config import Settings, ensure_cache_dir
from .tasks import TaskRunner


class Application:
    def __init__(
        self,
        settings: Settings,
        state: AppState,
        runner: TaskRunner,
        services: Services,
        shortcuts: KeyComboRegistry,
        on_change: Callable[[AppState], None] | None = None,
    ) -> None:
        self.settings = settings
        self.state = state
        self.runner = runner
        self.services = services
        self.shortcuts = shortcuts
        self.on_change = on_change

    def post(self, intent: Intent) -> None:
        """Dispatch one intent on the calling (main) thread."""
        for task in dispatch(self.state, intent, self.services):
            self.runner.submit(task)
        if self.on_change is not None:
            self.on_change(self.state)

    def process_pending(self) -> int:
        """Dispatch every completion intent produced since the last call."""
        results = self.runner.drain_results()
        for intent in results:
            self.post(intent)
        return len(results)

    def tick(self, now: float | None = None) -> None:
        self.post(Tick(now=time.monotonic() if now is None else now))
        self.process_pending()

    def press_key(self, combo: str) -> bool:
        """Dispatch the shortcut bound to ``combo``; returns whether one was bound."""
        intent = self.shortcuts.intent_for(combo)
        if intent is None:
            return False
        self.post(intent)
        return True

    def open_path(self, path: Path) -> None:
        """Open ``path`` directly, bypassing the file dialogs."""
        if path.is_dir():
            self.post(DirectoryOpened(path=path))
        else:
            self.post(FileOpened(path=path))

    def shutdown(self) -> None:
        self.state.poller.shutdown()
        self.runner.shutdown()


def build_application(
    settings: Settings,
    *,
    services: Services | None = None,
    on_change: Callable[[AppState], None] | None = None,
    runner: TaskRunner | None = None,
    poller: RenderPoller | None = None,
) -> Application:
    """Create the cache directory and assemble an ``Application`` from settings."""
    cache_dir = ensure_cache_dir(settings)
    if poller is None:
        poller = RenderPoller(
            cache_dir,
            mode=settings.preview_mode,
            typst_command=settings.typst_command,
            pdf_target_width=settings.pdf_target_width,
        )
    state = AppState(
        poller=poller,
        session=EditorSession(autosave_seconds=settings.autosave_seconds),
        show_hidden=settings.show_hidden,
    )
    return Application(
        settings=settings,
        state=state,
        runner=runner if runner is not None else TaskRunner(),
        services=services if services is not None else Services(),
        shortcuts=build_shortcut_registry(zoom_enabled=settings.preview_mode == PREVIEW_MODE_PDF),
        on_change=on_change,
    )


__all__ = [
    "Application",
    "build_application",
]
