"""
Retry with exponential backoff for transient storage failures.

The pipeline engine itself never retries. Record stores may opt in, e.g.
the SQLite store retrying a commit that hit "database is locked".
"""

import time
from typing import Any, Callable, Optional, Tuple, Type


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""
    pass


def call_with_backoff(
    func: Callable[[], Any],
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 5.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
) -> Any:
    """
    Call ``func`` until it succeeds or ``max_retries`` retries are used up.

    Args:
        func: Zero-argument callable
        max_retries: Maximum number of retry attempts (0 = no retries)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay between retries in seconds
        exponential_base: Base for exponential calculation (delay *= base)
        exceptions: Exceptions that trigger a retry; anything else propagates
        on_retry: Optional callback(attempt, exception, delay)

    Raises:
        RetryError: chained to the last exception, once retries are exhausted
    """
    delay = base_delay
    for attempt in range(max_retries + 1):
        try:
            return func()
        except exceptions as e:
            if attempt >= max_retries:
                raise RetryError(
                    f"Failed after {max_retries + 1} attempts: {e}"
                ) from e
            current_delay = min(delay, max_delay)
            if on_retry:
                on_retry(attempt + 1, e, current_delay)
            time.sleep(current_delay)
            delay *= exponential_base
