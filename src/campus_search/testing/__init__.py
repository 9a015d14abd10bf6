"""Testing support – in-memory data source, sample rows and a frozen clock.

``InMemoryDataSource`` doubles as the backend for local development when no
PostgREST endpoint is available.
"""

from campus_search.testing.fakes import (
    FrozenClock,
    InMemoryDataSource,
    parse_expression,
    sample_records,
)

__all__ = ["FrozenClock", "InMemoryDataSource", "parse_expression", "sample_records"]
