"""Runtime package: settings, background tasks, application wiring, tick loop."""

from .app import Application, build_application
from .config import Settings, load_settings
from .loop import RuntimeLoopTiming, run_main_loop
from .tasks import TaskRunner

__all__ = [
    "Application",
    "build_application",
    "Settings",
    "load_settings",
    "RuntimeLoopTiming",
    "run_main_loop",
    "TaskRunner",
]
