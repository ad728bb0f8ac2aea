"""
Retry policy for device bridge operations.

Callers wrap a whole reconciliation attempt with ``retry_with_backoff``;
the reconciler itself never retries.
"""

import logging
import random
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryConfig:
    """Configuration for retry logic."""

    def __init__(
        self,
        max_attempts: int = 1,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_backoff: bool = True,
        jitter: bool = False,
    ):
        """Initialize retry configuration."""
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_backoff = exponential_backoff
        self.jitter = jitter

    def delay_for(self, attempt: int) -> float:
        """Delay before the retry that follows the zero-based ``attempt``."""
        delay = self.base_delay
        if self.exponential_backoff:
            delay = delay * (2**attempt)
        delay = min(delay, self.max_delay)

        if self.jitter:
            delay *= 0.5 + random.random() * 0.5

        return delay


def retry_with_backoff(
    func: Callable[[], T],
    config: RetryConfig,
    expected_exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """Execute function with retry logic and exponential backoff."""
    sleeper = sleep or time.sleep

    for attempt in range(config.max_attempts):
        try:
            return func()

        except expected_exceptions as e:
            if attempt == config.max_attempts - 1:
                if config.max_attempts > 1:
                    logger.error(f"All {config.max_attempts} attempts failed")
                raise

            delay = config.delay_for(attempt)
            logger.warning(
                f"Attempt {attempt + 1} failed, retrying in {delay:.2f}s: {e}"
            )
            sleeper(delay)

    # max_attempts >= 1 guarantees the loop returns or raises
    raise AssertionError("unreachable")
