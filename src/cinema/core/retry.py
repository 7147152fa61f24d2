"""Retry utilities with exponential backoff.

Reservation transactions that lose an optimistic-lock race are rolled back and
re-run from their first read. The helpers here bound how often that happens
and space the attempts out so that competing writers do not collide again on
the very next tick.
"""
import logging
import random
import time
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds (doubles each retry)
        max_delay: Maximum delay between retries in seconds
        exponential_base: Base for exponential backoff (default: 2)
        jitter: Add randomness so concurrent losers spread out (default: True)
    """

    def __init__(
        self,
        max_retries: int = 3,
        initial_delay: float = 0.01,
        max_delay: float = 1.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
    ):
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for a given retry attempt.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds before next retry

        Example:
            With initial_delay=0.01, exponential_base=2.0:
            - attempt 0: 0.01s
            - attempt 1: 0.02s
            - attempt 2: 0.04s
        """
        delay = min(self.initial_delay * (self.exponential_base ** attempt), self.max_delay)

        if self.jitter:
            delay += random.uniform(0, 0.3 * delay)

        return delay


def retry_sync(
    func: Callable[..., T],
    *args: Any,
    config: Optional[RetryConfig] = None,
    retry_on_exceptions: tuple = (Exception,),
    on_retry: Optional[Callable[[Exception], None]] = None,
    **kwargs: Any,
) -> T:
    """Retry a synchronous function with exponential backoff.

    Args:
        func: Function to retry
        *args: Positional arguments for func
        config: Retry configuration (uses defaults if None)
        retry_on_exceptions: Tuple of exception types to retry on
        on_retry: Called with the exception before each retry
        **kwargs: Keyword arguments for func

    Returns:
        Result from successful function call

    Raises:
        The last exception if all retries fail
    """
    if config is None:
        config = RetryConfig()

    for attempt in range(config.max_retries + 1):
        try:
            result = func(*args, **kwargs)

            if attempt > 0:
                logger.info(f"Retry succeeded: {func.__name__} on attempt {attempt}")

            return result

        except retry_on_exceptions as e:
            if attempt >= config.max_retries:
                logger.error(
                    f"All retries exhausted: {func.__name__} after {attempt + 1} attempts: {e}"
                )
                raise

            if on_retry is not None:
                on_retry(e)

            delay = config.get_delay(attempt)
            logger.warning(
                f"Operation failed, retrying: {func.__name__} "
                f"(attempt {attempt + 1}/{config.max_retries}, delay {delay:.3f}s): {e}"
            )
            time.sleep(delay)

    raise RuntimeError("Retry logic error")
