"""Fan-out adapters - reshape collections into one task for the engine.

Two shapes are supported:
- applied_*: one task, many inputs (each input runs through the task)
- indexed / record: many tasks, one structured input (each task gets
  the part of the input at its own position or key)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Mapping, Sequence
from typing import Any

from requestors.combinators.leaf import preloaded
from requestors.combinators.types import Options
from requestors.kernel.errors import ConfigurationError
from requestors.kernel.outcome import Outcome
from requestors.kernel.ports import CompositionEngine
from requestors.kernel.task import Callback, Cancel, Task
from requestors.runtime.engine import DEFAULT_ENGINE

logger = logging.getLogger(__name__)

NOT_AN_ARRAY = "Input is not an array"
NOT_AN_OBJECT = "Invalid input object"

OptionsLike = Options | Mapping[str, Any] | None


def is_sequence(value: Any) -> bool:
    """A positional collection; strings and bytes do not count."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def engine_for(engine: CompositionEngine | None, strategy: str, settings: Options) -> CompositionEngine:
    """Pick the engine and let it vet `settings` before anything is built."""
    runner = engine if engine is not None else DEFAULT_ENGINE
    check = getattr(runner, "check_options", None)
    if check is not None:
        check(settings, strategy)
    return runner


def _reject(callback: Callback, reason: str) -> None:
    logger.debug("fan-out input rejected: %s", reason)
    callback(Outcome.Failure(reason))


def _applied(strategy: str) -> Callable[..., Callable[[Task], Task]]:
    """Turn an engine strategy over many tasks into one over many inputs."""

    def factory(options: OptionsLike = None, *, engine: CompositionEngine | None = None) -> Callable[[Task], Task]:
        settings = Options.coerce(options)
        build = getattr(engine_for(engine, strategy, settings), strategy)

        def wrap(task: Task) -> Task:
            bind = preloaded(task)

            def _run(callback: Callback, inputs: Any) -> Cancel | None:
                if not is_sequence(inputs):
                    _reject(callback, NOT_AN_ARRAY)
                    return None
                aggregate = build([bind(item) for item in inputs], settings)
                return aggregate.run(callback, None)

            return Task(_run)

        return wrap

    factory.__name__ = f"applied_{strategy}"
    factory.__doc__ = (
        f"Run one task over every input of a sequence with the engine's `{strategy}`.\n\n"
        f"Usage:\n    applied_{strategy}(options)(task)\n\n"
        f'A non-sequence input fails with "{NOT_AN_ARRAY}" and nothing runs.'
    )
    return factory


applied_race = _applied("race")
applied_parallel = _applied("parallel")
applied_fallback = _applied("fallback")


def applied_parallel_object(
    options: OptionsLike = None,
    *,
    engine: CompositionEngine | None = None,
) -> Callable[[Task], Task]:
    """Run one task over every value of a mapping, keeping the keys.

    Usage:
        applied_parallel_object(options)(task)

    A non-mapping input fails with "Invalid input object" and nothing runs.
    """
    settings = Options.coerce(options)
    runner = engine_for(engine, "parallel_object", settings)

    def wrap(task: Task) -> Task:
        bind = preloaded(task)

        def _run(callback: Callback, inputs: Any) -> Cancel | None:
            if not isinstance(inputs, Mapping):
                _reject(callback, NOT_AN_OBJECT)
                return None
            aggregate = runner.parallel_object(
                {key: bind(item) for key, item in inputs.items()},
                settings,
            )
            return aggregate.run(callback, None)

        return Task(_run)

    return wrap


def _part(key: Hashable, task: Task) -> Task:
    """Run `task` on `inputs[key]`; an absent part yields an empty record."""

    def _run(callback: Callback, inputs: Any) -> Cancel | None:
        if isinstance(inputs, Mapping):
            present = key in inputs
        else:
            present = key < len(inputs)
        if not present:
            callback(Outcome.Success({}))
            return None
        return task.run(callback, inputs[key])

    return Task(_run)


def indexed(
    options: OptionsLike = None,
    *,
    engine: CompositionEngine | None = None,
) -> Callable[[Sequence[Task]], Task]:
    """Give each task of a list the input value at its own index.

    Usage:
        indexed(options)(tasks)

    All tasks run through the engine's `parallel`. An index missing from
    the input yields `{}` for that slot without running its task.

    Raises:
        ConfigurationError: `tasks` is not a sequence of tasks
    """
    settings = Options.coerce(options)
    runner = engine_for(engine, "parallel", settings)

    def wrap(tasks: Sequence[Task]) -> Task:
        if not is_sequence(tasks) or not all(isinstance(t, Task) for t in tasks):
            raise ConfigurationError("Invalid requestors array")
        aggregate = runner.parallel([_part(i, t) for i, t in enumerate(tasks)], settings)

        def _run(callback: Callback, inputs: Any) -> Cancel | None:
            if not is_sequence(inputs):
                _reject(callback, NOT_AN_ARRAY)
                return None
            return aggregate.run(callback, inputs)

        return Task(_run)

    return wrap


def record(
    options: OptionsLike = None,
    *,
    engine: CompositionEngine | None = None,
) -> Callable[[Mapping[Any, Task]], Task]:
    """Give each task of a mapping the input value under its own key.

    Usage:
        record(options)({"a": task_a, "b": task_b})

    All tasks run through the engine's `parallel_object`. A key missing
    from the input yields `{}` for that key without running its task.

    Raises:
        ConfigurationError: `tasks` is not a mapping of tasks
    """
    settings = Options.coerce(options)
    runner = engine_for(engine, "parallel_object", settings)

    def wrap(tasks: Mapping[Any, Task]) -> Task:
        if not isinstance(tasks, Mapping) or not all(isinstance(t, Task) for t in tasks.values()):
            raise ConfigurationError("Invalid requestors object")
        aggregate = runner.parallel_object(
            {key: _part(key, task) for key, task in tasks.items()},
            settings,
        )

        def _run(callback: Callback, inputs: Any) -> Cancel | None:
            if not isinstance(inputs, Mapping):
                _reject(callback, NOT_AN_OBJECT)
                return None
            return aggregate.run(callback, inputs)

        return Task(_run)

    return wrap
