"""Outcome of a task activation - pure and dependency-free."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal


class _Missing:
    """Sentinel type for the absent value of the two-channel callback shape."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Outcome:
    """
    The result reported by a task, exactly once per activation.

    Kinds:
    - success: the task produced `value`
    - failure: the task failed, `reason` carries the message

    The legacy two-channel shape `(value, reason)` encodes failure as
    `value is MISSING`; use `from_channels` / `channels` to bridge.
    """

    kind: Literal["success", "failure"]
    value: Any = MISSING
    reason: str | None = None

    @staticmethod
    def Success(value: Any) -> Outcome:
        if value is MISSING:
            raise ValueError("A successful outcome cannot carry the MISSING sentinel.")
        return Outcome(kind="success", value=value)

    @staticmethod
    def Failure(reason: Any) -> Outcome:
        return Outcome(kind="failure", reason=None if reason is None else str(reason))

    @property
    def succeeded(self) -> bool:
        return self.kind == "success"

    @property
    def failed(self) -> bool:
        return self.kind == "failure"

    @staticmethod
    def from_channels(value: Any = MISSING, reason: Any = None) -> Outcome:
        """Read a legacy `(value, reason)` pair."""
        if value is MISSING:
            return Outcome.Failure(reason)
        return Outcome.Success(value)

    def channels(self) -> tuple[Any, str | None]:
        """Write this outcome as a legacy `(value, reason)` pair."""
        if self.failed:
            return MISSING, self.reason
        return self.value, None

    def unwrap(self) -> Any:
        if self.failed:
            raise ValueError(f"Outcome is a failure: {self.reason}")
        return self.value
