"""Failure policy per model-backed operation.

analyze_resume  fail-closed  nothing useful to show without it; errors reach the user
match_jobs      fail-open    degrades to fewer (or no) matches, never blocks the score
skill_gaps      fail-open    degrades to "no identified gaps"
"""
from __future__ import annotations

import functools
from enum import Enum
from typing import Any, Callable

from resumatch.core.logging import get_logger

log = get_logger(__name__)


class FailurePolicy(str, Enum):
    FAIL_CLOSED = "fail-closed"
    FAIL_OPEN = "fail-open"


FAILURE_POLICY: dict[str, FailurePolicy] = {
    "analyze_resume": FailurePolicy.FAIL_CLOSED,
    "match_jobs": FailurePolicy.FAIL_OPEN,
    "skill_gaps": FailurePolicy.FAIL_OPEN,
}


def fail_open(operation: str, default: Callable[[], Any]) -> Callable:
    """Decorator: an async operation that logs any failure and returns ``default()``."""
    if FAILURE_POLICY.get(operation) is not FailurePolicy.FAIL_OPEN:
        raise ValueError(f"{operation} is not registered as fail-open")

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await fn(*args, **kwargs)
            except Exception as exc:
                log.error("%s failed (%s: %s); returning empty result", operation, type(exc).__name__, exc)
                return default()

        return wrapper

    return decorator
