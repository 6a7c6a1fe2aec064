"""Retry policy for outbound delivery.

Only ``TransientError`` is retried. Between attempts the wait is exponential
backoff, stretched to the ``retry_after`` hint carried by the error when the
remote side asked for a longer pause (a Matrix ``M_LIMIT_EXCEEDED`` with
``retry_after_ms``, for instance).
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Coroutine, ParamSpec, TypeVar

from tenacity import (
    RetryCallState,
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import TransientError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

WaitPolicy = Callable[[RetryCallState], float]


def requested_delay(retry_state: RetryCallState) -> float:
    """Seconds the failed attempt's error asked us to wait, or ``0.0``."""
    outcome = retry_state.outcome
    if outcome is None or not outcome.failed:
        return 0.0
    delay = getattr(outcome.exception(), "retry_after", None)
    if isinstance(delay, bool) or not isinstance(delay, (int, float)):
        return 0.0
    return max(float(delay), 0.0)


def wait_transient(*, base_wait: float = 1.0, max_wait: float = 60.0) -> WaitPolicy:
    """Exponential backoff that never undercuts a server-requested delay.

    ``max_wait`` caps the backoff only; a longer ``retry_after`` is honoured.
    """
    backoff = wait_exponential(multiplier=base_wait, max=max_wait, exp_base=2)

    def _wait(retry_state: RetryCallState) -> float:
        return max(backoff(retry_state), requested_delay(retry_state))

    return _wait


def retry_transient(
    max_attempts: int = 5,
    base_wait: float = 1.0,
    max_wait: float = 60.0,
) -> Callable[[Callable[P, Coroutine[Any, Any, T]]], Callable[P, Coroutine[Any, Any, T]]]:
    """Retry an async callable on ``TransientError``.

    Attempts are capped at ``max_attempts`` (the first call included); the last
    error is re-raised once they run out. Other exceptions propagate at once.
    """

    def decorator(
        func: Callable[P, Coroutine[Any, Any, T]],
    ) -> Callable[P, Coroutine[Any, Any, T]]:
        @wraps(func)
        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_transient(base_wait=base_wait, max_wait=max_wait),
            retry=retry_if_exception_type(TransientError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            after=after_log(logger, logging.INFO),
            reraise=True,
        )
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await func(*args, **kwargs)

        return wrapper

    return decorator
