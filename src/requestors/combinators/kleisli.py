"""Kleisli sequencer - run log-producing tasks in order, folding their logs."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from requestors.combinators.fanout import engine_for, is_sequence
from requestors.combinators.types import Logged, Monoid, Options
from requestors.kernel.errors import ConfigurationError
from requestors.kernel.outcome import Outcome
from requestors.kernel.ports import CompositionEngine
from requestors.kernel.task import Callback, Cancel, Task

NOT_A_PAIR = "Expected a log/value pair"


def _logging_step(monoid: Monoid, task: Task) -> Task:
    """Feed `pair.value` to `task` and append its log to `pair.log`."""

    def _run(callback: Callback, pair: Logged) -> Cancel:
        def on_outcome(outcome: Outcome) -> None:
            if outcome.failed:
                callback(outcome)
                return
            produced = Logged.coerce(outcome.value)
            if produced is None:
                callback(Outcome.Failure(NOT_A_PAIR))
                return
            try:
                log = monoid.concat(pair.log, produced.log)
            except Exception as exc:
                callback(Outcome.Failure(exc))
                return
            callback(Outcome.Success(Logged(log=log, value=produced.value)))

        return task.run(on_outcome, pair.value)

    return Task(_run)


def kleisli_sequence(
    monoid: Monoid,
) -> Callable[..., Callable[[Sequence[Task]], Task]]:
    """Sequence tasks that each report a `Logged(log, value)`.

    Usage:
        kleisli_sequence(TUPLE_LOG)(options)([parse, validate, store])

    The input is lifted to `Logged(monoid.empty, input)`. Each task receives
    the previous value; its log is appended with `monoid.concat`. The
    result is the final value with the whole log.
    """

    def with_options(
        options: Options | Mapping[str, Any] | None = None,
        *,
        engine: CompositionEngine | None = None,
    ) -> Callable[[Sequence[Task]], Task]:
        settings = Options.coerce(options)
        runner = engine_for(engine, "sequence", settings)

        def wrap(tasks: Sequence[Task]) -> Task:
            if not is_sequence(tasks) or not all(isinstance(t, Task) for t in tasks):
                raise ConfigurationError("Invalid requestors array")
            aggregate = runner.sequence([_logging_step(monoid, t) for t in tasks], settings)

            def _run(callback: Callback, value: Any) -> Cancel:
                return aggregate.run(callback, Logged(log=monoid.empty, value=value))

            return Task(_run)

        return wrap

    return with_options
