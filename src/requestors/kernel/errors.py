"""Error types raised while building combinators."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A combinator factory was given missing or invalid configuration.

    Raised synchronously at construction time. Failures while a task runs
    are never raised; they are reported as failed outcomes.
    """
