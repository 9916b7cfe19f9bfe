"""Kernel layer - the task contract and its bookkeeping."""

from requestors.kernel.activation import STOP, Activation
from requestors.kernel.errors import ConfigurationError
from requestors.kernel.outcome import MISSING, Outcome
from requestors.kernel.ports import CompositionEngine, Timers
from requestors.kernel.task import Callback, Cancel, Task, from_legacy, legacy_callback, noop

__all__ = [
    "Task",
    "Outcome",
    "MISSING",
    "Callback",
    "Cancel",
    "noop",
    # Legacy two-channel bridge
    "from_legacy",
    "legacy_callback",
    # Bookkeeping
    "Activation",
    "STOP",
    "ConfigurationError",
    # Ports
    "CompositionEngine",
    "Timers",
]
