"""Task - the continuation-passing unit of work every combinator produces."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

from requestors.kernel.outcome import MISSING, Outcome

Callback = Callable[[Outcome], None]
Cancel = Callable[[], None]
Start = Callable[[Callback, Any], "Cancel | None"]


def noop() -> None:
    """Cancel handle of a task with nothing left to stop."""


@dataclass(frozen=True)
class Task:
    """A capability that, given a callback and an input value, starts work.

    The callback receives exactly one Outcome per activation, unless the
    activation is cancelled first. Starting a task always yields a Cancel
    handle; synchronous tasks hand back `noop`.
    """

    _run: Start

    def run(self, callback: Callback, value: Any = None) -> Cancel:
        """Start one activation of the task.

        Args:
            callback: Receives the Outcome of this activation
            value: Input value for the activation

        Returns:
            Cancel handle for this activation
        """
        cancel = self._run(callback, value)
        if cancel is None:
            return noop
        return cancel

    def __call__(self, callback: Callback) -> Callable[[Any], Cancel]:
        """Curried form: `task(callback)(value)`."""
        return partial(self.run, callback)

    async def outcome(self, value: Any = None) -> Outcome:
        """Run the task on the current event loop and await its Outcome.

        Cancelling the awaiting coroutine cancels the activation.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Outcome] = loop.create_future()

        def settle(outcome: Outcome) -> None:
            if not future.done():
                future.set_result(outcome)

        cancel = self.run(settle, value)
        try:
            return await future
        except asyncio.CancelledError:
            cancel()
            raise


def legacy_callback(fn: Callable[[Any, str | None], None]) -> Callback:
    """Adapt a two-channel `fn(value, reason)` into an outcome callback."""

    def callback(outcome: Outcome) -> None:
        fn(*outcome.channels())

    return callback


def from_legacy(start: Callable[[Callable[..., None]], Callable[[Any], Any]]) -> Task:
    """Wrap a curried `start(callback)(value)` written for the two-channel shape.

    The legacy callback is called as `callback(value)` on success and
    `callback(MISSING, reason)` on failure.
    """

    def _run(callback: Callback, value: Any) -> Cancel | None:
        def two_channel(result: Any = MISSING, reason: Any = None) -> None:
            callback(Outcome.from_channels(result, reason))

        cancel = start(two_channel)(value)
        return cancel if callable(cancel) else None

    return Task(_run)
