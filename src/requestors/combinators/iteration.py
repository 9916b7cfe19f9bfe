"""Iteration combinators - re-run a task while a condition holds."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from requestors.kernel.activation import STOP, Activation
from requestors.kernel.errors import ConfigurationError
from requestors.kernel.outcome import Outcome
from requestors.kernel.task import Callback, Cancel, Task

logger = logging.getLogger(__name__)


def repeat(predicate: Callable[[Any], Any]) -> Callable[[Task], Task]:
    """Re-run a task for as long as its latest value passes `predicate`.

    Usage:
        repeat(predicate)(task)

    Semantics:
        - The input is tested first; if it fails, the task is never run
          and the input is the result; only `True` passes
        - Each success is tested again: passing values are fed back into
          the task, the first failing value is the result
        - A failed round is reported at once, unchanged
        - Cancelling reaches the round currently in flight
    """

    def wrap(task: Task) -> Task:
        def _run(callback: Callback, value: Any) -> Cancel:
            activation = Activation(callback, name="repeat")

            def check(current: Any) -> Any:
                try:
                    again = predicate(current)
                except Exception as exc:
                    activation.settle(Outcome.Failure(exc))
                    return STOP
                if again is not True:
                    activation.settle(Outcome.Success(current))
                    return STOP
                return task, current

            def advance(outcome: Outcome) -> Any:
                if outcome.failed:
                    logger.debug("repeat round %d failed: %s", activation.rounds, outcome.reason)
                    activation.settle(outcome)
                    return STOP
                return check(outcome.value)

            step = check(value)
            if step is not STOP:
                activation.iterate(*step, advance)
            return activation.cancel

        return Task(_run)

    return wrap


def chained(
    config: Mapping[str, Any] | None = None,
    /,
    *,
    continuer: Callable[[Any], Any] | None = None,
    aggregator: Callable[[Any], Callable[[Any], Any]] | None = None,
) -> Callable[[Task], Task]:
    """Re-run a task, folding its results into an accumulated value.

    Usage:
        chained(continuer=lambda acc: acc < 10, aggregator=lambda a: lambda b: a + b)(task)

    Semantics:
        - The task always runs once with the input
        - Each success is folded: `acc = aggregator(acc)(value)`
        - While `continuer(acc)` holds, the task runs again with `acc`
        - Otherwise `acc` is the result
        - A failed round is reported at once, unchanged

    Raises:
        ConfigurationError: continuer or aggregator missing
    """
    if config is not None:
        continuer = continuer if continuer is not None else config.get("continuer")
        aggregator = aggregator if aggregator is not None else config.get("aggregator")

    if continuer is None:
        raise ConfigurationError("Continuer function missing")
    if aggregator is None:
        raise ConfigurationError("Aggregator function missing")

    def wrap(task: Task) -> Task:
        def _run(callback: Callback, value: Any) -> Cancel:
            activation = Activation(callback, name="chained")
            accumulated = value

            def advance(outcome: Outcome) -> Any:
                nonlocal accumulated
                if outcome.failed:
                    logger.debug("chained round %d failed: %s", activation.rounds, outcome.reason)
                    activation.settle(outcome)
                    return STOP
                try:
                    accumulated = aggregator(accumulated)(outcome.value)
                    again = continuer(accumulated)
                except Exception as exc:
                    activation.settle(Outcome.Failure(exc))
                    return STOP
                if not again:
                    activation.settle(Outcome.Success(accumulated))
                    return STOP
                return task, accumulated

            activation.iterate(task, value, advance)
            return activation.cancel

        return Task(_run)

    return wrap
