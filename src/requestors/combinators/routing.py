"""Callback routing - split one outcome into success and failure handlers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from requestors.kernel.outcome import MISSING, Outcome


def functional_callback(
    on_fail: Callable[[str | None], Any],
) -> Callable[[Callable[[Any], Any]], Callable[..., None]]:
    """Build an outcome callback from a failure handler and a success handler.

    Usage:
        functional_callback(on_fail)(on_success)

    The returned callback takes an Outcome, or the legacy `(value, reason)`
    pair where `value is MISSING` signals failure. Exactly one handler runs
    per call: `on_fail(reason)` or `on_success(value)`.
    """

    def with_success(on_success: Callable[[Any], Any]) -> Callable[..., None]:
        def callback(outcome: Any = MISSING, reason: Any = None) -> None:
            if not isinstance(outcome, Outcome) or reason is not None:
                outcome = Outcome.from_channels(outcome, reason)

            if outcome.failed:
                on_fail(outcome.reason)
            else:
                on_success(outcome.value)

        return callback

    return with_success
