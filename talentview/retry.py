"""
Retry with exponential backoff for the bulk loader's HTTP calls.

Only the loader retries. Everything downstream of it receives either a
collection or an empty one and never retries on its own.
"""

import time
import functools
from typing import Callable, Iterator, Optional, Tuple, Type


class RetryError(Exception):
    """Raised when every attempt of a retried call has failed."""
    pass


RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def backoff_delays(
    max_retries: int,
    base_delay: float,
    max_delay: float,
    exponential_base: float = 2.0,
) -> Iterator[float]:
    """Yield the sleep before each retry, capped at max_delay."""
    delay = base_delay
    for _ in range(max_retries):
        yield min(delay, max_delay)
        delay *= exponential_base


def exponential_backoff(
    max_retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 8.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable] = None,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Decorator retrying the wrapped call on the given exception types.

    Args:
        max_retries: Retries after the first attempt (0 = single attempt)
        base_delay: Sleep before the first retry, in seconds
        max_delay: Upper bound for any single sleep
        exponential_base: Multiplier applied to the delay after each retry
        exceptions: Exception types that trigger a retry; others propagate
        on_retry: Optional callback(attempt, exception, delay)
        sleep: Sleep function, swappable in tests

    Raises:
        RetryError: chained from the last exception once attempts run out
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            delays = backoff_delays(max_retries, base_delay, max_delay, exponential_base)
            attempt = 0
            while True:
                attempt += 1
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    delay = next(delays, None)
                    if delay is None:
                        raise RetryError(f"Failed after {attempt} attempts: {e}") from e
                    if on_retry:
                        on_retry(attempt, e, delay)
                    sleep(delay)

        return wrapper
    return decorator


def should_retry_http_status(status_code: int) -> bool:
    """True for timeouts, rate limiting and gateway/server errors."""
    return status_code in RETRYABLE_STATUS_CODES
