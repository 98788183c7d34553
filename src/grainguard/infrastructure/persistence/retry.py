"""Bounded exponential backoff for units of work."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import psycopg
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from grainguard.domain.exceptions import StorageError, TransientStorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    TransientStorageError,
    psycopg.OperationalError,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Max attempts and doubling backoff between them."""

    max_attempts: int = 4
    initial_wait: float = 0.1
    max_wait: float = 2.0

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            wait=wait_exponential(multiplier=self.initial_wait, min=self.initial_wait, max=self.max_wait),
            stop=stop_after_attempt(self.max_attempts),
            before_sleep=_log_retry,
        )


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("Storage call failed (attempt %d), retrying: %s", retry_state.attempt_number, error)


async def run_with_retry(policy: RetryPolicy, operation: Callable[[], Awaitable[T]]) -> T:
    """Run operation, retrying transient failures; StorageError after exhaustion."""
    try:
        async for attempt in policy.retrying():
            with attempt:
                return await operation()
    except RetryError as e:
        last = e.last_attempt.exception()
        logger.error("Storage call failed after %d attempts: %s", policy.max_attempts, last)
        raise StorageError(f"Storage unavailable after {policy.max_attempts} attempts") from last
    raise StorageError("Storage call did not run")


class RetryingUseCase:
    """Reruns a use case's methods on transient storage failures.

    Every attempt calls the method afresh, so it opens a new unit of work
    with its own connection and transaction.
    """

    def __init__(self, use_case: object, policy: RetryPolicy) -> None:
        self._use_case = use_case
        self._policy = policy

    def __getattr__(self, name: str) -> Callable[..., Awaitable]:
        method = getattr(self._use_case, name)

        async def call(*args, **kwargs):
            return await run_with_retry(self._policy, lambda: method(*args, **kwargs))

        return call
