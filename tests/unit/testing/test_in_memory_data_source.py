"""Unit tests for the in-memory data source used by tests and local runs."""
from __future__ import annotations

import asyncio

import pytest

from campus_search.application.search import DataSource, QueryExpander, SourceConstraint
from campus_search.kernel.errors import ExternalServiceError
from campus_search.testing import InMemoryDataSource, parse_expression, sample_records


def _names(page: object) -> list[str]:
    return [r["institution_name"] for r in page.records]  # type: ignore[attr-defined]


class TestParseExpression:
    def test_groups(self) -> None:
        assert parse_expression("(a | b) & c") == [{"a", "b"}, {"c"}]

    def test_empty(self) -> None:
        assert parse_expression("") == []


class TestInMemoryDataSource:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryDataSource(), DataSource)

    def test_empty_expression_returns_everything(self) -> None:
        page = asyncio.run(InMemoryDataSource(sample_records()).fetch("", [], 1, 100))
        assert page.total == 8
        assert len(page.records) == 8

    def test_expanded_query(self) -> None:
        expression = QueryExpander().build_boolean_expression("state university")
        page = asyncio.run(InMemoryDataSource(sample_records()).fetch(expression, [], 1, 20))
        assert _names(page) == [
            "California State University Long Beach",
            "Santa Monica College",
            "Ohio State University",
            "University of Texas at Austin",
        ]

    def test_constraints(self) -> None:
        source = InMemoryDataSource(sample_records())
        constraints = [
            SourceConstraint("state_code", ("CA", "MA"), op="in"),
            SourceConstraint("rank", 10, op="lte"),
        ]
        page = asyncio.run(source.fetch("", constraints, 1, 20))
        assert _names(page) == [
            "California Institute of Technology",
            "Massachusetts Institute of Technology",
        ]

    def test_pagination(self) -> None:
        source = InMemoryDataSource(sample_records())
        page = asyncio.run(source.fetch("", [], 3, 3))
        assert page.total == 8
        assert len(page.records) == 2
        assert page.has_next is False

    def test_records_are_copies(self) -> None:
        source = InMemoryDataSource(sample_records())
        page = asyncio.run(source.fetch("", [], 1, 1))
        page.records[0]["institution_name"] = "changed"
        assert source.records[0]["institution_name"] != "changed"

    def test_calls_are_recorded(self) -> None:
        source = InMemoryDataSource(sample_records())
        asyncio.run(source.fetch("tech", [], 2, 5))
        assert source.calls == [("tech", (), 2, 5)]
        assert source.fetch_count == 1

    def test_failing(self) -> None:
        source = InMemoryDataSource.failing("down")
        with pytest.raises(ExternalServiceError):
            asyncio.run(source.fetch("", [], 1, 20))
        assert source.fetch_count == 1
