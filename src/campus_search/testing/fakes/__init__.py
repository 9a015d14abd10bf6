"""Testing fakes – in-memory doubles for the search ports."""
from campus_search.kernel.time import FrozenClock
from campus_search.testing.fakes.data_source import InMemoryDataSource, parse_expression
from campus_search.testing.fakes.institutions import sample_records

__all__ = ["FrozenClock", "InMemoryDataSource", "parse_expression", "sample_records"]
