"""Combinators - task factories built on the composition engine."""

from .fanout import (
    applied_fallback,
    applied_parallel,
    applied_parallel_object,
    applied_race,
    indexed,
    record,
)
from .iteration import chained, repeat
from .kleisli import kleisli_sequence
from .leaf import conditional, constant, preloaded, promise, unary
from .routing import functional_callback
from .types import TEXT_LOG, TUPLE_LOG, Logged, Monoid, Options, WaitConfig
from .wait import wait

__all__ = [
    # Leaf adapters
    "constant",
    "unary",
    "promise",
    "conditional",
    "preloaded",
    # Routing
    "functional_callback",
    # Polling
    "wait",
    # Iteration
    "repeat",
    "chained",
    # Fan-out
    "applied_race",
    "applied_parallel",
    "applied_fallback",
    "applied_parallel_object",
    "indexed",
    "record",
    # Kleisli
    "kleisli_sequence",
    # Configuration
    "Options",
    "WaitConfig",
    "Logged",
    "Monoid",
    "TUPLE_LOG",
    "TEXT_LOG",
]
