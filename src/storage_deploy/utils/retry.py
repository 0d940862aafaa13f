"""Fixed-attempt retry strategy for object store calls."""

import time
import threading
from typing import Callable, Tuple, Type, TypeVar
from storage_deploy.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


class RetryStrategy:
    """Retries a call a fixed number of times and surfaces the last error.

    Retries are immediate by default. A positive ``base_delay`` turns on
    exponential backoff between attempts.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 0.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    ):
        """Initialize retry strategy.

        Args:
            max_attempts: Total number of attempts, including the first call
            base_delay: Delay in seconds before the first retry (0 retries immediately)
            max_delay: Maximum delay in seconds between retries
            exponential_base: Base for exponential backoff calculation
            retry_on: Exception types that trigger another attempt
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retry_on = retry_on

        self._failed_attempts = 0
        self._lock = threading.Lock()

    @property
    def failed_attempts(self) -> int:
        """Number of failed attempts observed across all calls."""
        with self._lock:
            return self._failed_attempts

    def get_delay(self, attempt: int) -> float:
        """Calculate delay before next retry.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds before next retry
        """
        if self.base_delay <= 0:
            return 0.0

        return min(
            self.base_delay * (self.exponential_base ** attempt),
            self.max_delay
        )

    def execute_with_retry(
        self,
        func: Callable[..., T],
        *args,
        **kwargs
    ) -> T:
        """Execute a function with retry logic.

        Args:
            func: Function to execute
            *args: Positional arguments for the function
            **kwargs: Keyword arguments for the function

        Returns:
            Result of the function call

        Raises:
            The exception raised by the final attempt
        """
        name = getattr(func, '__name__', repr(func))

        for attempt in range(self.max_attempts):
            try:
                result = func(*args, **kwargs)

                if attempt > 0:
                    logger.info(f"Call to {name} succeeded on attempt {attempt + 1}")

                return result

            except self.retry_on as e:
                with self._lock:
                    self._failed_attempts += 1

                logger.warning(
                    f"Error calling {name}. Attempt {attempt + 1} of {self.max_attempts}: "
                    f"{type(e).__name__}: {e}",
                    extra={'operation': name, 'attempt': attempt + 1}
                )

                if attempt + 1 >= self.max_attempts:
                    logger.error(f"All {self.max_attempts} attempts calling {name} exhausted")
                    raise

                delay = self.get_delay(attempt)
                if delay > 0:
                    time.sleep(delay)

        # Unreachable: the loop either returns or re-raises
        raise AssertionError("retry loop exited without a result")
