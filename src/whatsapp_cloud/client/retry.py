"""Retry Policy - Conditional, fixed-delay retries for async calls.

A failed attempt is retried only while the remaining budget is positive
and the retry condition accepts the error. Each retry step works on a
new, smaller policy; the policy itself is never mutated.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from ..errors import RequestTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (error, remaining retries) -> retry?
RetryCondition = Callable[[BaseException, int], bool]


def timeout_retry_condition(error: BaseException, retries: int) -> bool:
    """Retry only when the attempt timed out."""
    return isinstance(error, (RequestTimeoutError, asyncio.TimeoutError, httpx.TimeoutException))


@dataclass(frozen=True)
class RetryPolicy:
    """Remaining retry budget for one logical call.

    Attributes:
        retries: Retries left after the next attempt fails.
        delay_ms: Wait before each retry; ``<= 0`` retries immediately.
        condition: Predicate deciding whether an error may be retried.
            Defaults to :func:`timeout_retry_condition`.
    """

    retries: int = 0
    delay_ms: int = 0
    condition: Optional[RetryCondition] = None

    def should_retry(self, error: BaseException) -> bool:
        """Decide whether ``error`` earns another attempt."""
        if self.retries <= 0:
            return False
        condition = self.condition or timeout_retry_condition
        return bool(condition(error, self.retries))

    def next(self) -> "RetryPolicy":
        """Policy for the following attempt (one retry fewer)."""
        return replace(self, retries=self.retries - 1)


async def wait(delay_ms: int) -> None:
    """Sleep for ``delay_ms`` milliseconds; non-positive delays return at once."""
    if delay_ms <= 0:
        return
    await asyncio.sleep(delay_ms / 1000)


async def retry(action: Callable[[], Awaitable[T]], policy: RetryPolicy) -> T:
    """Run ``action`` until it succeeds or the policy gives up.

    Makes at most ``policy.retries + 1`` attempts. The first success is
    returned as is; the error of the last attempt is re-raised unchanged.

    Args:
        action: Zero-argument coroutine function performing one attempt.
        policy: Retry budget, delay and condition.

    Returns:
        The result of the first successful attempt.
    """
    try:
        return await action()
    except Exception as e:
        if not policy.should_retry(e):
            if policy.retries > 0:
                logger.debug(f"Not retrying {type(e).__name__}: rejected by retry condition")
            raise

        logger.warning(
            f"Attempt failed with {type(e).__name__}: {e}; "
            f"retrying in {max(policy.delay_ms, 0)}ms ({policy.retries} retries left)"
        )
        await wait(policy.delay_ms)
        return await retry(action, policy.next())
