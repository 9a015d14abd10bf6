"""Resilience – retry policies."""
from campus_search.resilience.retry import RetryPolicy

__all__ = ["RetryPolicy"]
