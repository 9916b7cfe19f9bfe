"""Built-in composition engine - plain callback fan-out without timing.

Time limits and throttling belong to a full engine; this one refuses
options that ask for them. Pass another CompositionEngine via `engine=`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Mapping, Sequence
from typing import Any

from requestors.combinators.types import Options
from requestors.kernel.activation import STOP, Activation
from requestors.kernel.errors import ConfigurationError
from requestors.kernel.outcome import Outcome
from requestors.kernel.task import Callback, Cancel, Task

logger = logging.getLogger(__name__)


def _gather(
    entries: list[tuple[Hashable, Task]],
    shape: Callable[[dict[Hashable, Any]], Any],
    name: str,
) -> Task:
    """Start every entry with the same input; fail on the first failure."""

    def _run(callback: Callback, value: Any) -> Cancel:
        activation = Activation(callback, name=name)
        results: dict[Hashable, Any] = {}
        live: dict[Hashable, Cancel] = {}

        def cancel_live() -> None:
            handles = list(live.values())
            live.clear()
            for handle in handles:
                handle()

        activation.hold(cancel_live)
        if not entries:
            activation.settle(Outcome.Success(shape(results)))
            return activation.cancel

        for key, task in entries:
            if activation.done:
                break

            def on_outcome(outcome: Outcome, key: Hashable = key) -> None:
                if activation.done or key in results:
                    return
                live.pop(key, None)
                if outcome.failed:
                    logger.debug("%s: %r failed, cancelling %d live task(s)", name, key, len(live))
                    cancel_live()
                    activation.settle(outcome)
                    return
                results[key] = outcome.value
                if len(results) == len(entries):
                    activation.settle(Outcome.Success(shape(results)))

            handle = task.run(on_outcome, value)
            if key not in results and not activation.done:
                live[key] = handle

        return activation.cancel

    return Task(_run)


def _race(entries: list[Task]) -> Task:
    def _run(callback: Callback, value: Any) -> Cancel:
        activation = Activation(callback, name="race")
        finished: set[int] = set()
        live: dict[int, Cancel] = {}

        def cancel_live() -> None:
            handles = list(live.values())
            live.clear()
            for handle in handles:
                handle()

        activation.hold(cancel_live)
        if not entries:
            activation.settle(Outcome.Failure("race: no tasks"))
            return activation.cancel

        for index, task in enumerate(entries):
            if activation.done:
                break

            def on_outcome(outcome: Outcome, index: int = index) -> None:
                if activation.done or index in finished:
                    return
                finished.add(index)
                live.pop(index, None)
                if outcome.succeeded:
                    cancel_live()
                    activation.settle(outcome)
                elif len(finished) == len(entries):
                    activation.settle(outcome)

            handle = task.run(on_outcome, value)
            if index not in finished and not activation.done:
                live[index] = handle

        return activation.cancel

    return Task(_run)


def _in_order(entries: list[Task], name: str, thread: bool) -> Task:
    """Run entries one at a time.

    With `thread`, each success feeds the next task (sequence); otherwise
    each failure moves on to the next task (fallback).
    """

    def _run(callback: Callback, value: Any) -> Cancel:
        activation = Activation(callback, name=name)
        if not entries:
            if thread:
                activation.settle(Outcome.Success(value))
            else:
                activation.settle(Outcome.Failure(f"{name}: no tasks"))
            return activation.cancel

        remaining = iter(entries[1:])

        def advance(outcome: Outcome) -> Any:
            if outcome.failed == thread:
                activation.settle(outcome)
                return STOP
            following = next(remaining, None)
            if following is None:
                activation.settle(outcome)
                return STOP
            return following, (outcome.value if thread else value)

        activation.iterate(entries[0], value, advance)
        return activation.cancel

    return Task(_run)


class CallbackEngine:
    """Default CompositionEngine.

    - parallel / parallel_object: all start at once, results keep their
      positions or keys, the first failure cancels the rest
    - race: the first success wins and cancels the rest
    - fallback: one at a time until one succeeds
    - sequence: one at a time, each result is the next input
    """

    def check_options(self, options: Options | Mapping[str, Any] | None, strategy: str) -> Options:
        """Refuse timing options; called by the factories at construction."""
        settings = Options.coerce(options)
        if settings.time_limit is not None or settings.throttle:
            raise ConfigurationError(
                f"{strategy}: time_limit and throttle need an engine that implements them"
            )
        return settings

    def race(self, tasks: Sequence[Task], options: Options | None = None) -> Task:
        self.check_options(options, "race")
        return _race(list(tasks))

    def parallel(self, tasks: Sequence[Task], options: Options | None = None) -> Task:
        self.check_options(options, "parallel")
        entries = list(enumerate(tasks))
        return _gather(entries, lambda results: [results[i] for i, _ in entries], "parallel")

    def fallback(self, tasks: Sequence[Task], options: Options | None = None) -> Task:
        self.check_options(options, "fallback")
        return _in_order(list(tasks), "fallback", thread=False)

    def sequence(self, tasks: Sequence[Task], options: Options | None = None) -> Task:
        self.check_options(options, "sequence")
        return _in_order(list(tasks), "sequence", thread=True)

    def parallel_object(self, tasks: Mapping[Any, Task], options: Options | None = None) -> Task:
        self.check_options(options, "parallel_object")
        entries = list(tasks.items())
        return _gather(entries, lambda results: {k: results[k] for k, _ in entries}, "parallel_object")


DEFAULT_ENGINE = CallbackEngine()
