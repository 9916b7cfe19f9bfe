"""Leaf adapters - lift values, functions and awaitables into tasks."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from requestors.kernel.activation import Activation
from requestors.kernel.outcome import MISSING, Outcome
from requestors.kernel.task import Callback, Cancel, Task

NO_VALUE = "promise: awaitable produced no value"


def constant(value: Any) -> Task:
    """Task that ignores its input and succeeds with `value` synchronously."""

    def _run(callback: Callback, _: Any) -> None:
        callback(Outcome.Success(value))

    return Task(_run)


def unary(fn: Callable[[Any], Any]) -> Task:
    """Task that applies a synchronous, non-blocking function to its input.

    A raised exception becomes a failed outcome carrying its message.
    """

    def _run(callback: Callback, value: Any) -> None:
        try:
            result = fn(value)
        except Exception as exc:
            callback(Outcome.Failure(exc))
            return
        callback(Outcome.Success(result))

    return Task(_run)


def promise(source: Callable[[], Awaitable[Any]] | Awaitable[Any]) -> Task:
    """Task that awaits a coroutine on the running event loop.

    Args:
        source: A zero-argument callable returning an awaitable (reusable),
            or an awaitable itself (can only be awaited once)

    Returns:
        Task whose Cancel handle cancels the scheduled asyncio task
    """

    def _run(callback: Callback, _: Any) -> Cancel | None:
        try:
            awaitable = source() if callable(source) else source
        except Exception as exc:
            callback(Outcome.Failure(exc))
            return None

        try:
            loop = asyncio.get_running_loop()
            future = asyncio.ensure_future(awaitable, loop=loop)
        except Exception as exc:
            # never scheduled; close it so it is not reported as un-awaited
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            callback(Outcome.Failure(exc))
            return None

        activation = Activation(callback, name="promise")
        activation.hold(future.cancel)

        def on_done(done: asyncio.Future[Any]) -> None:
            # the future may complete before a cancel lands; done callbacks run later
            if activation.done or done.cancelled():
                return
            exc = done.exception()
            if exc is not None:
                activation.settle(Outcome.Failure(exc))
                return
            result = done.result()
            if result is MISSING:
                activation.settle(Outcome.Failure(NO_VALUE))
                return
            activation.settle(Outcome.Success(result))

        future.add_done_callback(on_done)
        return activation.cancel

    return Task(_run)


def conditional(predicate: Callable[[Any], Any], message: str | None = None) -> Task:
    """Task that passes its input through when `predicate` holds.

    Fails with `message`, or a default diagnostic naming the value.
    """

    def _run(callback: Callback, value: Any) -> None:
        try:
            passed = predicate(value)
        except Exception as exc:
            callback(Outcome.Failure(exc))
            return

        if passed:
            callback(Outcome.Success(value))
        else:
            callback(
                Outcome.Failure(
                    message if message is not None
                    else f"conditional: value failed predicate\n{value!r}"
                )
            )

    return Task(_run)


def preloaded(task: Task) -> Callable[[Any], Task]:
    """Bind an input to `task`; the resulting task ignores its own input."""

    def bind(value: Any) -> Task:
        def _run(callback: Callback, _: Any) -> Cancel:
            return task.run(callback, value)

        return Task(_run)

    return bind
