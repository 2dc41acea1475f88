"""Retry logic for adapter fetches with backoff.

This module provides a decorator that retries a failing call, sleeping
between attempts. Two delay strategies are supported:
- linear: initial_delay * attempt number (1x, 2x, 3x, ...)
- exponential: initial_delay * backoff_factor ** (attempt number - 1)

Sleeps can be interrupted through a `threading.Event`, which lets the
orchestrator abandon a task that has run past its timeout without waiting
for the backoff to finish.
"""

import logging
import threading
import time
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)

LINEAR = "linear"
EXPONENTIAL = "exponential"


class RetryCancelled(Exception):
    """Raised when a retry loop is stopped by its cancel event."""

    pass


def compute_delay(
    attempt: int,
    initial_delay: float,
    backoff_factor: float = 2.0,
    strategy: str = LINEAR,
) -> float:
    """Return the sleep before retry number `attempt` (1-based).

    Examples:
        >>> compute_delay(3, 1.0, strategy="linear")
        3.0
        >>> compute_delay(3, 1.0, backoff_factor=2.0, strategy="exponential")
        4.0
    """
    if attempt < 1:
        raise ValueError("attempt must be >= 1")
    if strategy == LINEAR:
        return initial_delay * attempt
    if strategy == EXPONENTIAL:
        return initial_delay * (backoff_factor ** (attempt - 1))
    raise ValueError(f"Unknown backoff strategy: {strategy}")


def retry_with_backoff(
    max_retries: int = 2,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (ConnectionError, TimeoutError),
    strategy: str = LINEAR,
    cancel_event: Optional[threading.Event] = None,
    on_retry: Optional[Callable[[int, Exception], None]] = None,
) -> Callable[[F], F]:
    """Decorator to retry a function with backoff.

    Args:
        max_retries: Maximum number of retry attempts after the first call (default: 2)
        initial_delay: Base delay in seconds (default: 1.0)
        backoff_factor: Multiplier for the exponential strategy (default: 2.0)
        exceptions: Exception types that trigger a retry
        strategy: "linear" (default) or "exponential"
        cancel_event: When set, pending sleeps end early and no further
                      attempt is made (RetryCancelled is raised)
        on_retry: Optional callback(attempt, exception) invoked before each sleep

    Returns:
        Decorated function that will retry on failure

    Example:
        @retry_with_backoff(max_retries=2, initial_delay=1.0)
        def fetch_board():
            return adapter.fetch()

        # Attempt 1: immediate
        # Attempt 2: wait 1 second  (logs warning)
        # Attempt 3: wait 2 seconds (logs warning)
        # If still failing after 3 attempts, logs error and raises the last exception
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")
    # Validates the strategy up front
    compute_delay(1, initial_delay, backoff_factor, strategy)

    total_attempts = max_retries + 1

    def _pause(name: str, delay: float, cause: Exception) -> None:
        if cancel_event is None:
            time.sleep(delay)
        elif cancel_event.wait(delay):
            raise RetryCancelled(f"{name} cancelled during backoff") from cause

    def decorator(func: F) -> F:
        name = func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise RetryCancelled(f"{name} cancelled before attempt {attempt}")
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= total_attempts:
                        logger.error(
                            "Function %s failed after %d attempts",
                            name,
                            total_attempts,
                            extra={
                                "function": name,
                                "total_attempts": total_attempts,
                                "exception_type": type(e).__name__,
                            },
                        )
                        raise

                    delay = compute_delay(attempt, initial_delay, backoff_factor, strategy)
                    logger.warning(
                        "Function %s failed (attempt %d/%d): %s. Retrying in %.1f seconds...",
                        name,
                        attempt,
                        total_attempts,
                        e,
                        delay,
                        extra={
                            "function": name,
                            "retry_attempt": attempt,
                            "max_retries": total_attempts,
                            "delay_seconds": delay,
                            "exception_type": type(e).__name__,
                        },
                    )
                    if on_retry is not None:
                        on_retry(attempt, e)
                    _pause(name, delay, e)
                    attempt += 1

        return wrapper  # type: ignore

    return decorator
