"""Runtime layer - default collaborators for timers and fan-out."""

from requestors.runtime.engine import DEFAULT_ENGINE, CallbackEngine
from requestors.runtime.timers import LoopTimers

__all__ = [
    "CallbackEngine",
    "DEFAULT_ENGINE",
    "LoopTimers",
]
