"""Utilities for tracing the time spent in apply rounds."""

import contextvars
from contextlib import contextmanager
import logging
from time import perf_counter
from typing import Generator


_LOGGER = logging.getLogger(__name__)

# No public API
__all__: list[str] = []


trace: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "trace", default=()
)


def trace_label() -> str:
    """Return the label of the current trace e.g. `ensure > round 2`."""
    return " > ".join(trace.get())


@contextmanager
def trace_context(name: str) -> Generator[None, None, None]:
    """Log the elapsed time of the enclosed block at debug level."""
    token = trace.set(trace.get() + (name,))
    label = trace_label()
    t1 = perf_counter()
    _LOGGER.debug("[Trace] > %s", label)
    try:
        yield
    finally:
        t2 = perf_counter()
        trace.reset(token)
        _LOGGER.debug("[Trace] < %s (%0.2fs)", label, (t2 - t1))
