"""Unit tests for RetryPolicy."""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from campus_search.resilience.retry import RetryPolicy


def _policy(**kwargs: object) -> RetryPolicy:
    return RetryPolicy(initial_delay=0, increment=0, max_delay=0, **kwargs)  # type: ignore[arg-type]


class TestRetryPolicy:
    def test_defaults(self) -> None:
        policy = RetryPolicy()
        assert policy.max_attempts == 4
        assert policy.initial_delay == 0.1
        assert policy.max_delay == 3.0

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_first_success_is_returned(self) -> None:
        func = AsyncMock(return_value="PONG")
        assert asyncio.run(_policy().execute_async(func)) == "PONG"
        func.assert_awaited_once()

    def test_retries_until_success(self) -> None:
        func = AsyncMock(side_effect=[OSError("a"), OSError("b"), True])
        assert asyncio.run(_policy(max_attempts=3).execute_async(func, operation="cache.connect")) is True
        assert func.await_count == 3

    def test_last_error_reraised_after_budget(self) -> None:
        func = AsyncMock(side_effect=[OSError("a"), OSError("b")])
        with pytest.raises(OSError, match="b"):
            asyncio.run(_policy(max_attempts=2).execute_async(func))
        assert func.await_count == 2

    def test_non_retryable_error_propagates_at_once(self) -> None:
        func = AsyncMock(side_effect=KeyError("nope"))
        with pytest.raises(KeyError):
            asyncio.run(_policy(retryable_exceptions=(OSError,)).execute_async(func))
        func.assert_awaited_once()
