"""Exponential backoff for throttled remote calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ...domain.value_objects import RetryPolicy
from ..exceptions import ThrottlingError, TransientFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class RetryingClient:
    """
    Retries an operation only when the remote side throttles it.

    Delay after failed attempt ``n`` (zero-based) is
    ``min(2**n * base, cap)``, without jitter. Any exception other than
    ThrottlingError propagates unchanged on the first occurrence.
    """

    def __init__(self, policy: RetryPolicy | None = None, *, sleep: Sleep = asyncio.sleep) -> None:
        """
        Initialize the client.

        Args:
            policy: Attempt budget and delay limits.
            sleep: Awaitable sleep function, replaceable in tests.
        """
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        """Active retry policy."""
        return self._policy

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        description: str = "remote call",
    ) -> T:
        """
        Await ``operation()``, retrying on throttling.

        Raises:
            TransientFailure: If every attempt was throttled.
        """
        max_attempts = self._policy.max_retries
        last_error: ThrottlingError | None = None

        for attempt in range(max_attempts):
            try:
                return await operation()
            except ThrottlingError as e:
                last_error = e
                if attempt + 1 >= max_attempts:
                    break
                delay = self._policy.delay_for(attempt)
                logger.warning(
                    "Throttled on %s (attempt %d/%d, retry-after=%s), retrying in %.1fs",
                    description,
                    attempt + 1,
                    max_attempts,
                    e.retry_after,
                    delay,
                )
                await self._sleep(delay)

        msg = f"Retry budget exhausted for {description} after {max_attempts} attempts"
        raise TransientFailure(msg, attempts=max_attempts) from last_error
