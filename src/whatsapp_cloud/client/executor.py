"""Request executor.

Bounds every attempt of a network call by a timeout and composes the
attempts with a :class:`RetryPolicy`.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from ..errors import RequestTimeoutError
from .retry import RetryCondition, RetryPolicy, retry

T = TypeVar("T")


def with_timeout(
    action: Callable[[], Awaitable[T]],
    timeout_ms: int,
) -> Callable[[], Awaitable[T]]:
    """Wrap ``action`` so each invocation is cancelled after ``timeout_ms``.

    Expiry, as well as a timeout reported by the HTTP transport itself,
    surfaces as :class:`RequestTimeoutError`. A non-positive timeout
    disables the bound.
    """
    timeout = timeout_ms / 1000 if timeout_ms > 0 else None

    async def bounded() -> T:
        try:
            return await asyncio.wait_for(action(), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError(timeout_ms) from e

    return bounded


async def execute(
    action: Callable[[], Awaitable[T]],
    timeout_ms: int,
    retries: int = 0,
    condition: Optional[RetryCondition] = None,
    delay_ms: int = 0,
) -> T:
    """Execute a timeout-bounded action with retries.

    Args:
        action: Zero-argument coroutine function performing one attempt.
        timeout_ms: Per-attempt timeout in milliseconds.
        retries: Maximum number of retries after the first attempt.
        condition: Retry predicate; None retries only on timeouts.
        delay_ms: Fixed delay between attempts in milliseconds.

    Returns:
        The result of the first successful attempt.

    Raises:
        Exception: The error of the last attempt, unchanged.
    """
    policy = RetryPolicy(retries=retries, delay_ms=delay_ms, condition=condition)
    return await retry(with_timeout(action, timeout_ms), policy)
