"""Exponential backoff retry for inference calls.

One wrapper is shared by every gateway operation. Whether an error is
retried is decided by a classifier function.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any, TypeVar

from ..errors import RateLimitedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Retry bounds for a fallible operation.

    Attributes:
        max_attempts: Total attempts including the first call.
        base_delay_seconds: Delay before the first retry (doubles each retry).
    """

    max_attempts: int = 3
    base_delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Get the backoff delay after a failed attempt.

        Args:
            attempt: Zero-based index of the attempt that failed.

        Returns:
            Delay in seconds.
        """
        return self.base_delay_seconds * (2**attempt)


def is_rate_limited(error: BaseException) -> bool:
    """Return True if the error is a transient rate-limit failure."""
    return isinstance(error, RateLimitedError)


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    is_retryable: Callable[[BaseException], bool] = is_rate_limited,
    sleep: Sleep = asyncio.sleep,
    label: str = "inference call",
) -> T:
    """Await func, retrying retryable failures with exponential backoff.

    Args:
        func: Zero-argument coroutine factory.
        policy: Attempt bound and base delay.
        is_retryable: Classifier deciding whether an error is retried.
        sleep: Awaitable sleep, replaceable in tests.
        label: Operation name used in log messages.

    Returns:
        The result of the first successful attempt.

    Raises:
        Exception: The last error once attempts are exhausted, or any
            non-retryable error immediately.
    """
    for attempt in range(policy.max_attempts):
        try:
            return await func()
        except Exception as e:
            if not is_retryable(e):
                raise
            if attempt >= policy.max_attempts - 1:
                logger.error(
                    "%s failed after %d attempts: %s",
                    label,
                    policy.max_attempts,
                    str(e),
                )
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                "%s hit rate limit (attempt %d/%d), retrying in %.1fs",
                label,
                attempt + 1,
                policy.max_attempts,
                delay,
            )
            await sleep(delay)

    raise RuntimeError("Unexpected retry loop exit")


def retry_async(
    policy: RetryPolicy | None = None,
    is_retryable: Callable[[BaseException], bool] = is_rate_limited,
    sleep: Sleep = asyncio.sleep,
    label: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator form of call_with_retry for coroutine functions.

    Args:
        policy: Retry bounds. Defaults to RetryPolicy().
        is_retryable: Classifier deciding whether an error is retried.
        sleep: Awaitable sleep, replaceable in tests.
        label: Operation name for log messages. Defaults to the function name.

    Returns:
        Decorator wrapping a coroutine function with retry logic.
    """
    effective_policy = policy or RetryPolicy()

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await call_with_retry(
                lambda: func(*args, **kwargs),
                effective_policy,
                is_retryable=is_retryable,
                sleep=sleep,
                label=label or func.__name__,
            )

        return wrapper

    return decorator


__all__ = [
    "RetryPolicy",
    "call_with_retry",
    "is_rate_limited",
    "retry_async",
]
