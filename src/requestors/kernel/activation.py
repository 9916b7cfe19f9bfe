"""Per-activation bookkeeping shared by combinators that spawn child tasks."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from requestors.kernel.outcome import Outcome
from requestors.kernel.task import Callback, Cancel, Task, noop

logger = logging.getLogger(__name__)

# Returned by an `advance` function once it has settled the activation.
STOP: Any = object()

Advance = Callable[[Outcome], "tuple[Task, Any] | Any"]


class Activation:
    """State of one activation of a combinator.

    Holds the cancel handle of whichever child is currently live and
    guarantees the outer callback fires at most once. Cancelling is
    idempotent and does nothing once the activation has settled.

    Attributes:
        settled: The outer callback has been called.
        cancelled: The activation was cancelled before settling.
        rounds: Number of child rounds started so far.
    """

    def __init__(self, callback: Callback, name: str = "task") -> None:
        self._callback = callback
        self._current: Cancel = noop
        self.name = name
        self.settled = False
        self.cancelled = False
        self.rounds = 0

    @property
    def done(self) -> bool:
        return self.settled or self.cancelled

    def hold(self, cancel: Cancel) -> None:
        """Replace the live handle forwarded by `cancel()`."""
        self._current = cancel

    def settle(self, outcome: Outcome) -> None:
        """Report the outer outcome, unless already settled or cancelled."""
        if self.done:
            return
        self.settled = True
        self._current = noop
        self._callback(outcome)

    def cancel(self) -> None:
        if self.done:
            return
        self.cancelled = True
        current, self._current = self._current, noop
        logger.debug("%s cancelled after %d round(s)", self.name, self.rounds)
        current()

    def spawn(self, task: Task, value: Any, resume: Callback) -> Outcome | None:
        """Start one child round and track its cancel handle.

        Returns the child's Outcome when it settled while starting. Otherwise
        returns None and `resume` receives the Outcome later, unless this
        activation is done by then.
        """
        self.rounds += 1
        starting = True
        fired = False
        early: list[Outcome] = []

        def on_outcome(outcome: Outcome) -> None:
            nonlocal fired
            if fired or self.done:
                return
            fired = True
            if starting:
                early.append(outcome)
                return
            self._current = noop
            resume(outcome)

        cancel = task.run(on_outcome, value)
        starting = False
        if early:
            return early[0]
        if self.cancelled:
            cancel()
            return None
        self._current = cancel
        return None

    def iterate(self, task: Task, value: Any, advance: Advance) -> None:
        """Run child rounds one after another without growing the stack.

        `advance` receives each round's Outcome and returns the next
        `(task, value)` round, or STOP once it has settled the activation.
        Rounds that settle synchronously are looped over; a round that
        settles later resumes the loop from its own callback.
        """

        def resume(outcome: Outcome) -> None:
            step = advance(outcome)
            if step is not STOP:
                self.iterate(*step, advance)

        while not self.done:
            outcome = self.spawn(task, value, resume)
            if outcome is None:
                return
            step = advance(outcome)
            if step is STOP:
                return
            task, value = step
