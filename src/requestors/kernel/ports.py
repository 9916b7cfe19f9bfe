"""Port protocols for requestors - pure abstractions."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from requestors.kernel.task import Cancel, Task

if TYPE_CHECKING:
    from requestors.combinators.types import Options


class Timers(Protocol):
    """Timer collaborator used by the polling combinator.

    Times are in seconds. Starting a timer may raise; the caller reports
    that as a failed outcome.
    """

    def set_interval(self, period: float, tick: Callable[[], None]) -> Cancel:
        """Call `tick` every `period` seconds until cancelled."""
        ...

    def set_timeout(self, delay: float, fn: Callable[[], None]) -> Cancel:
        """Call `fn` once after `delay` seconds unless cancelled."""
        ...


class CompositionEngine(Protocol):
    """Executes collections of tasks as one aggregate task.

    An engine may also define `check_options(options, strategy)`. Factories
    call it once at construction, so unsupported options fail early without
    building an aggregate.
    """

    def race(self, tasks: Sequence[Task], options: Options) -> Task:
        """First success wins."""
        ...

    def parallel(self, tasks: Sequence[Task], options: Options) -> Task:
        """Run all with the same input and collect results in order."""
        ...

    def fallback(self, tasks: Sequence[Task], options: Options) -> Task:
        """Try in order until one succeeds."""
        ...

    def sequence(self, tasks: Sequence[Task], options: Options) -> Task:
        """Run in order, each result feeding the next task."""
        ...

    def parallel_object(self, tasks: Mapping[Any, Task], options: Options) -> Task:
        """Keyed variant of `parallel`."""
        ...
