from .combinators import (
    TEXT_LOG,
    TUPLE_LOG,
    Logged,
    Monoid,
    Options,
    WaitConfig,
    applied_fallback,
    applied_parallel,
    applied_parallel_object,
    applied_race,
    chained,
    conditional,
    constant,
    functional_callback,
    indexed,
    kleisli_sequence,
    preloaded,
    promise,
    record,
    repeat,
    unary,
    wait,
)
from .kernel import (
    MISSING,
    CompositionEngine,
    ConfigurationError,
    Outcome,
    Task,
    Timers,
    from_legacy,
    legacy_callback,
)
from .runtime import DEFAULT_ENGINE, CallbackEngine, LoopTimers

__all__ = [
    # Core
    "Task",
    "Outcome",
    "MISSING",
    "ConfigurationError",
    "from_legacy",
    "legacy_callback",
    # Leaf adapters
    "constant",
    "unary",
    "promise",
    "conditional",
    "preloaded",
    "functional_callback",
    # Combinators
    "wait",
    "repeat",
    "chained",
    "applied_race",
    "applied_parallel",
    "applied_fallback",
    "applied_parallel_object",
    "indexed",
    "record",
    "kleisli_sequence",
    # Configuration
    "Options",
    "WaitConfig",
    "Logged",
    "Monoid",
    "TUPLE_LOG",
    "TEXT_LOG",
    # Collaborators
    "CompositionEngine",
    "Timers",
    "CallbackEngine",
    "DEFAULT_ENGINE",
    "LoopTimers",
]
