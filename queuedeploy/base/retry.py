"""
Caller-side retry with exponential backoff.

The reconciler never retries on its own.  A caller that wants to ride
out throttling or an unreachable endpoint wraps a whole ``deploy`` or
``remove`` run with :func:`retry`.  Each rerun starts from the last
committed state, so steps that already succeeded are not repeated.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from functools import wraps
from typing import Any, Callable

from queuedeploy.base.exceptions import ProviderUnavailableError
from queuedeploy.base.logger import qd_logger


def backoff_delays(
    retries: int, base_delay: float, max_delay: float, factor: float
) -> Iterator[float]:
    """Yield the pause before each of *retries* further attempts."""
    delay = base_delay
    for _ in range(retries):
        yield min(delay, max_delay)
        delay *= factor


def retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    retryable_exceptions: tuple[type[BaseException], ...] = (ProviderUnavailableError,),
) -> Callable:
    """Decorator: rerun a function while it raises a retryable exception.

    Args:
        max_attempts: Total attempts, the first one included.
        base_delay: Pause before the first retry, in seconds.
        max_delay: Upper bound for any single pause.
        backoff_factor: Growth of the pause after each retry.
        retryable_exceptions: Exception types worth another attempt.
            Anything else propagates at once.

    Raises:
        ValueError: If *max_attempts* is below 1.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delays = backoff_delays(max_attempts - 1, base_delay, max_delay, backoff_factor)
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable_exceptions as exc:
                    delay = next(delays, None)
                    if delay is None:
                        qd_logger.error(
                            f"{fn.__qualname__} gave up after {attempt} attempt(s): {exc}",
                            operation="retry",
                        )
                        raise
                    qd_logger.warning(
                        f"{fn.__qualname__} attempt {attempt}/{max_attempts} failed "
                        f"({exc}); retrying in {delay:.1f}s",
                        operation="retry",
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
