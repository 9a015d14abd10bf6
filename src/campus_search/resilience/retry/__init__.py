"""Resilience – bounded retry with incrementing backoff."""
from campus_search.resilience.retry.policy import RetryPolicy

__all__ = ["RetryPolicy"]
