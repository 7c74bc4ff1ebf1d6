"""Retry logic for flaky upstream calls.

Used by the fetch job around the provider request and by storage while
waiting for PostgreSQL to accept connections. The wait before retry ``n``
(counting from 1) is ``initial_delay * backoff_factor ** (n - 1)``; a factor
of 1.0 gives a fixed delay between attempts.
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (ConnectionError, TimeoutError),
    sleep: Callable[[float], None] = time.sleep,
    operation: Optional[str] = None,
) -> Callable[[F], F]:
    """Decorator to retry a call on the given exception types.

    Args:
        max_retries: Retries after the first attempt (total calls = max_retries + 1)
        initial_delay: Seconds to wait before the first retry
        backoff_factor: Multiplier applied to the delay after each retry
        exceptions: Exception types that trigger a retry; anything else
                    propagates immediately
        sleep: Callable used to wait between attempts (injectable for tests)
        operation: Name used in log messages (defaults to the function name)

    Returns:
        Decorated function that re-raises the last exception once every
        attempt has failed

    Example:
        @retry_with_backoff(max_retries=2, initial_delay=5.0, backoff_factor=1.0,
                            exceptions=(ProviderError,), operation="WB tariffs request")
        def fetch_snapshot():
            return adapter.fetch()
    """
    total_attempts = max_retries + 1

    def decorator(func: F) -> F:
        label = operation or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            attempt = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= total_attempts:
                        logger.error(
                            "%s gave up after %d attempts: %s",
                            label,
                            total_attempts,
                            e,
                            extra={"operation": label, "total_attempts": total_attempts,
                                   "error_type": type(e).__name__},
                        )
                        raise

                    logger.warning(
                        "%s failed (attempt %d/%d): %s - next try in %.1fs",
                        label,
                        attempt,
                        total_attempts,
                        e,
                        delay,
                        extra={"operation": label, "attempt": attempt, "delay_seconds": delay,
                               "error_type": type(e).__name__},
                    )
                    sleep(delay)
                    delay *= backoff_factor
                    attempt += 1

        return wrapper  # type: ignore

    return decorator
