from .countdown import KeyboardListener, SkipSignal, run_countdown
from .notifier import Notifier
from .reflections import ReflectionCatalog
from .timer_service import SessionSummary, TimerService, TimerState

__all__ = [
    "KeyboardListener", "SkipSignal", "run_countdown", "Notifier",
    "ReflectionCatalog", "SessionSummary", "TimerService", "TimerState",
]
