"""Application search – data-source port and its value objects."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, Sequence, runtime_checkable

__all__ = ["DataSource", "SourceConstraint", "SourcePage"]


@dataclass(frozen=True)
class SourceConstraint:
    """A field-level constraint evaluated by the data source."""
    field: str
    value: Any
    op: Literal["in", "gte", "lte", "eq"] = "eq"


@dataclass
class SourcePage:
    records: list[dict[str, Any]]
    total: int
    page: int
    page_size: int
    took_ms: int = 0
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        if self.page_size == 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@runtime_checkable
class DataSource(Protocol):
    async def fetch(
        self,
        expression: str,
        constraints: Sequence[SourceConstraint],
        page: int,
        page_size: int,
    ) -> SourcePage: ...
