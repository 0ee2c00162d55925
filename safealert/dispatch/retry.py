"""Bounded retry with capped exponential backoff for single sends."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

import structlog

from safealert.providers.exceptions import ProviderError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Failures worth another attempt; anything else is a bug and fails at once.
RETRYABLE: tuple[type[BaseException], ...] = (ProviderError, TimeoutError)


class RetryExhaustedError(Exception):
    """Every attempt failed; carries the last error and the attempt count."""

    def __init__(self, last_error: BaseException, attempts: int) -> None:
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(str(last_error) or type(last_error).__name__)


class Attempted(Generic[T]):
    """A successful result plus how many attempts it took."""

    __slots__ = ("value", "attempts")

    def __init__(self, value: T, attempts: int) -> None:
        self.value = value
        self.attempts = attempts


class RetryPolicy:
    """Runs an operation up to ``1 + max_retries`` times.

    Delay before retry *n* is ``delay_ms * 2**(n-1)``, capped at
    ``max_delay_ms``. Each attempt is bounded by ``attempt_timeout_secs``
    when set.
    """

    def __init__(
        self,
        max_retries: int = 3,
        delay_ms: int = 2000,
        max_delay_ms: int = 30000,
        attempt_timeout_secs: float | None = None,
    ) -> None:
        self.max_retries = max(0, max_retries)
        self.delay_ms = max(0, delay_ms)
        self.max_delay_ms = max(0, max_delay_ms)
        self.attempt_timeout_secs = attempt_timeout_secs

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff_secs(self, retry_number: int) -> float:
        """Delay before the given retry (1-based)."""
        delay = self.delay_ms * (2 ** (retry_number - 1))
        return min(delay, self.max_delay_ms) / 1000.0

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        label: str = "",
    ) -> Attempted[T]:
        """Await *operation* until it succeeds or the budget is spent.

        Raises:
            RetryExhaustedError: every attempt raised a retryable error.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                if self.attempt_timeout_secs is not None:
                    value = await asyncio.wait_for(operation(), self.attempt_timeout_secs)
                else:
                    value = await operation()
                return Attempted(value, attempt)
            except RETRYABLE as exc:
                if attempt >= self.max_attempts:
                    raise RetryExhaustedError(exc, attempt) from exc
                delay = self.backoff_secs(attempt)
                logger.warning(
                    "send_retry_scheduled",
                    label=label,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    delay_secs=delay,
                    error=str(exc) or type(exc).__name__,
                )
                if delay > 0:
                    await asyncio.sleep(delay)
