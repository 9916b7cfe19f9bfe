"""Combinator configuration types and data classes."""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from requestors.kernel.errors import ConfigurationError

L = TypeVar("L")
V = TypeVar("V")


class Options(BaseModel):
    """Options handed through to the composition engine.

    Attributes:
        time_limit: Seconds the aggregate task may run.
        time_option: How the time limit treats optional tasks.
        throttle: Maximum number of tasks in flight at once (0 = no limit).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    time_limit: float | None = Field(default=None, ge=0)
    time_option: bool | None = None
    throttle: int | None = Field(default=None, ge=0)

    @classmethod
    def coerce(cls, options: Options | Mapping[str, Any] | None) -> Options:
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        try:
            return cls.model_validate(dict(options))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid options: {exc}") from exc


class WaitConfig(BaseModel):
    """Configuration of the polling combinator.

    Attributes:
        predicate: Polled on every tick; success when it returns True.
        args: A list/tuple spread as positional arguments, None for no
            arguments, anything else passed as the single argument.
        interval: Poll period in seconds.
        timeout: Seconds after which the task fails, if given.
        value: Success payload, or a nullary producer called at success.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    predicate: Callable[..., Any]
    args: Any = None
    interval: float = Field(gt=0)
    timeout: float | None = Field(default=None, ge=0)
    value: Any = None

    @classmethod
    def coerce(
        cls,
        config: WaitConfig | Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> WaitConfig:
        if isinstance(config, cls) and not fields:
            return config
        data = {**(dict(config) if config is not None else {}), **fields}

        if not callable(data.get("predicate")):
            raise ConfigurationError("Invalid predicate function")
        if data.get("interval") is None:
            raise ConfigurationError("No interval value specified")

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid wait configuration: {exc}") from exc

    def call_predicate(self) -> Any:
        if isinstance(self.args, (list, tuple)):
            return self.predicate(*self.args)
        if self.args is None:
            return self.predicate()
        return self.predicate(self.args)


@dataclass(frozen=True)
class Logged(Generic[L, V]):
    """A value paired with the log produced while computing it."""

    log: L
    value: V

    @staticmethod
    def coerce(result: Any) -> Logged | None:
        """Accept a Logged or a mapping with `log` and `value` keys."""
        if isinstance(result, Logged):
            return result
        if isinstance(result, Mapping) and "log" in result and "value" in result:
            return Logged(log=result["log"], value=result["value"])
        return None


@dataclass(frozen=True)
class Monoid(Generic[L]):
    """An associative `concat` with its identity `empty`."""

    empty: L
    concat: Callable[[L, L], L]


TUPLE_LOG: Monoid[tuple[Any, ...]] = Monoid(empty=(), concat=operator.add)
TEXT_LOG: Monoid[str] = Monoid(empty="", concat=operator.add)
