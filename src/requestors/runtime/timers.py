"""Timers backed by the running asyncio event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from requestors.kernel.task import Cancel


class LoopTimers:
    """Default timer collaborator, scheduling on an asyncio loop.

    Without an explicit loop, the running loop is looked up when a timer
    starts; starting one outside a running loop raises RuntimeError.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def set_interval(self, period: float, tick: Callable[[], None]) -> Cancel:
        loop = self._resolve_loop()
        stopped = False

        def fire() -> None:
            nonlocal handle
            if stopped:
                return
            # Re-arm first so a slow tick does not drift the cadence
            handle = loop.call_later(period, fire)
            tick()

        handle = loop.call_later(period, fire)

        def cancel() -> None:
            nonlocal stopped
            stopped = True
            handle.cancel()

        return cancel

    def set_timeout(self, delay: float, fn: Callable[[], None]) -> Cancel:
        handle = self._resolve_loop().call_later(delay, fn)
        return handle.cancel
