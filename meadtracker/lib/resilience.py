"""Retry helper for transient failures.

Retry is opt-in. It is used when opening the database file, which can be
briefly locked by another process; individual CRUD calls are never retried.

Implementation: Uses tenacity internally.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

import tenacity
from tenacity.wait import wait_base

logger = logging.getLogger(__name__)

__all__ = ["with_retry"]

F = TypeVar("F", bound=Callable[..., Any])


def with_retry(
    max_attempts: int = 3,
    backoff_seconds: float = 0.25,
    exponential: bool = True,
    jitter: bool = False,
    retry_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
) -> Callable[[F], F]:
    """Opt-in retry decorator for flaky operations.

    Args:
        max_attempts: Maximum number of attempts (default 3)
        backoff_seconds: Base delay between attempts (default 0.25)
        exponential: Use exponential backoff (default True)
        jitter: Add random jitter to backoff (default False)
        retry_exceptions: Only retry on these exceptions (default: all)

    Example:
        @with_retry(max_attempts=3, retry_exceptions=(sqlite3.OperationalError,))
        def connect(path):
            return sqlite3.connect(path)
    """
    wait_strategy: wait_base
    if exponential:
        wait_strategy = tenacity.wait_exponential(multiplier=backoff_seconds, min=backoff_seconds)
    else:
        wait_strategy = tenacity.wait_fixed(backoff_seconds)

    if jitter:
        wait_strategy = wait_strategy + tenacity.wait_random(0, backoff_seconds * 0.5)

    if retry_exceptions:
        retry_condition = tenacity.retry_if_exception_type(retry_exceptions)
    else:
        retry_condition = tenacity.retry_if_exception_type(Exception)

    def decorator(fn: F) -> F:
        fn_logger = logging.getLogger(fn.__module__)

        def before_sleep_handler(retry_state: tenacity.RetryCallState) -> None:
            exception = retry_state.outcome.exception() if retry_state.outcome else None
            fn_logger.warning(
                "Attempt %d/%d failed: %s. Retrying in %.2fs...",
                retry_state.attempt_number,
                max_attempts,
                exception,
                retry_state.next_action.sleep if retry_state.next_action else 0,
            )

        tenacity_decorator = tenacity.retry(
            stop=tenacity.stop_after_attempt(max_attempts),
            wait=wait_strategy,
            retry=retry_condition,
            before_sleep=before_sleep_handler,
            reraise=True,
        )
        retrying_fn = tenacity_decorator(fn)

        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return retrying_fn(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator
