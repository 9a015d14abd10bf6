"""Resilience – RetryPolicy backed by ``tenacity``.

Used for the remote cache connection budget: a fixed number of attempts with
a linearly increasing wait between them.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

import tenacity

from campus_search.observability.logging import get_logger

T = TypeVar("T")
logger = get_logger(__name__)


class RetryPolicy:
    """Bounded async retry.

    Parameters
    ----------
    max_attempts:
        Total call attempts including the first one.
    initial_delay:
        Wait (seconds) after the first failure.
    increment:
        Added to the wait after every further failure.
    max_delay:
        Upper bound for a single wait.
    retryable_exceptions:
        Only these exception types are retried; anything else propagates
        immediately.
    """

    def __init__(
        self,
        max_attempts: int = 4,
        initial_delay: float = 0.1,
        increment: float = 0.1,
        max_delay: float = 3.0,
        retryable_exceptions: tuple[type[BaseException], ...] = (Exception,),
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.increment = increment
        self.max_delay = max_delay
        self.retryable_exceptions = retryable_exceptions

    def _build_async_retrying(self, operation: str) -> tenacity.AsyncRetrying:
        def _log_retry(state: tenacity.RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome else None
            logger.warning(
                "retry.scheduled",
                operation=operation,
                attempt=state.attempt_number,
                max_attempts=self.max_attempts,
                delay_s=round(state.next_action.sleep, 3) if state.next_action else None,
                error=repr(exc),
            )

        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=tenacity.wait_incrementing(
                start=self.initial_delay, increment=self.increment, max=self.max_delay
            ),
            retry=tenacity.retry_if_exception_type(self.retryable_exceptions),
            before_sleep=_log_retry,
            reraise=True,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]], operation: str = "call") -> T:
        """Await *func* until it succeeds or the attempt budget is spent.

        The last exception is re-raised once all attempts have failed.
        """
        result: Any = None
        async for attempt in self._build_async_retrying(operation):
            with attempt:
                result = await func()
        return result  # type: ignore[no-any-return]


__all__ = ["RetryPolicy"]
