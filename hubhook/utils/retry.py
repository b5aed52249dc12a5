"""Retry with exponential backoff for outbound API calls."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from hubhook.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger("utils.retry")

T = TypeVar("T")


class RetryError(Exception):
    """Raised when all retry attempts have been exhausted."""

    def __init__(self, message: str, attempts: int, last_exception: BaseException) -> None:
        """Initialize the RetryError.

        Args:
            message: Error message.
            attempts: Number of attempts made.
            last_exception: The last exception that caused the retry.
        """
        super().__init__(message)
        self.attempts = attempts
        self.last_exception = last_exception
        self.__cause__ = last_exception


@dataclass(frozen=True)
class RetryConfig:
    """Backoff settings for a retried call."""

    max_retries: int = 3
    """Retries after the initial attempt."""

    base_delay: float = 0.5
    max_delay: float = 10.0
    exponential_base: float = 2.0

    jitter: bool = True
    """Spread delays by up to 25% either way."""

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {self.max_retries}")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be non-negative")

    def calculate_delay(self, attempt: int) -> float:
        """Calculate the delay before retry number ``attempt`` (0-indexed)."""
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)

        if self.jitter:
            jitter_range = delay * 0.25
            delay = max(0.0, delay + random.uniform(-jitter_range, jitter_range))

        return delay


def retry_with_backoff(
    func: Callable[[], T],
    config: RetryConfig | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Execute a function with retry and exponential backoff.

    Args:
        func: The function to execute.
        config: Retry configuration. Uses defaults if not provided.
        retry_on: Tuple of exception types to retry on.

    Returns:
        The return value of the function.

    Raises:
        RetryError: If all retry attempts are exhausted.
        Exception: If an exception not in retry_on is raised.
    """
    if config is None:
        config = RetryConfig()

    last_exception: BaseException | None = None
    attempts = 0

    for attempt in range(config.max_retries + 1):
        try:
            return func()
        except retry_on as e:
            last_exception = e
            attempts = attempt + 1

            if attempt < config.max_retries:
                delay = config.calculate_delay(attempt)
                logger.debug(
                    "Retrying after failure",
                    extra={"attempt": attempts, "delay": delay, "error": str(e)},
                )
                time.sleep(delay)

    assert last_exception is not None
    raise RetryError(
        f"All {attempts} attempts failed",
        attempts=attempts,
        last_exception=last_exception,
    )
