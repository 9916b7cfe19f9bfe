"""Polling combinator - a task that settles once a predicate turns true."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from requestors.combinators.types import WaitConfig
from requestors.kernel.activation import Activation
from requestors.kernel.outcome import Outcome
from requestors.kernel.ports import Timers
from requestors.kernel.task import Callback, Cancel, Task
from requestors.runtime.timers import LoopTimers

logger = logging.getLogger(__name__)

TIMEOUT_REASON = "Timeout exceeded"


def _payload(configured: Any, given: Any) -> Any:
    """Pick the success value: configured, else the task input, else a timestamp."""
    source = configured if configured is not None else given
    if source is None:
        source = time.time
    return source() if callable(source) else source


def wait(
    config: WaitConfig | Mapping[str, Any] | None = None,
    /,
    *,
    timers: Timers | None = None,
    **fields: Any,
) -> Task:
    """Poll a predicate on an interval timer until it returns True.

    Usage:
        wait(predicate=is_ready, interval=0.5, timeout=10)
        wait({"predicate": is_ready, "args": [job], "interval": 0.5})

    Semantics:
        - A repeating timer calls the predicate every `interval` seconds
        - On True: both timers stop, the task succeeds with the payload
        - When `timeout` elapses first: fails with "Timeout exceeded"
        - A timer that cannot start, or a predicate that raises, fails the task
        - Without a timeout the task polls until cancelled

    Raises:
        ConfigurationError: predicate not callable or interval missing
    """
    settings = WaitConfig.coerce(config, **fields)

    def _run(callback: Callback, value: Any) -> Cancel | None:
        source = timers if timers is not None else LoopTimers()
        activation = Activation(callback, name="wait")
        live: list[Cancel] = []

        def stop_timers() -> None:
            while live:
                live.pop()()

        def tick() -> None:
            if activation.done:
                return
            try:
                ready = settings.call_predicate() is True
                if ready:
                    stop_timers()
                    outcome = Outcome.Success(_payload(settings.value, value))
            except Exception as exc:
                stop_timers()
                activation.settle(Outcome.Failure(exc))
                return
            if ready:
                activation.settle(outcome)

        def expire() -> None:
            if activation.done:
                return
            stop_timers()
            logger.debug("wait gave up after %ss", settings.timeout)
            activation.settle(Outcome.Failure(TIMEOUT_REASON))

        activation.hold(stop_timers)
        try:
            live.append(source.set_interval(settings.interval, tick))
            if settings.timeout is not None:
                live.append(source.set_timeout(settings.timeout, expire))
        except Exception as exc:
            stop_timers()
            activation.settle(Outcome.Failure(exc))
            return None

        return activation.cancel

    return Task(_run)
