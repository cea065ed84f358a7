"""Best-effort operations that recover to a default instead of raising."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

logger = py_logging.getLogger(__name__)


@dataclass(frozen=True)
class Recovered(Generic[T]):
    """Outcome of a best-effort call.

    ``recovered`` is true when ``value`` is the fallback rather than the
    operation's own result; ``error`` holds the swallowed exception, if any.
    """

    value: T
    recovered: bool = False
    error: Exception | None = None


def run_with_fallback(
    operation: Callable[[], T | None],
    *,
    default: T,
    label: str,
) -> Recovered[T]:
    try:
        result = operation()
    except Exception as exc:
        logger.warning("%s failed; falling back to %r: %s", label, default, exc)
        return Recovered(value=default, recovered=True, error=exc)
    if result is None or (isinstance(result, str) and not result.strip()):
        logger.debug("%s returned no value; falling back to %r", label, default)
        return Recovered(value=default, recovered=True)
    return Recovered(value=result)
