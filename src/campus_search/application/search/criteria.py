"""Application search – filter criteria and FilterState.

A :class:`FilterCriterion` is enabled exactly when it carries values, so a
criterion can never be switched on while empty or off while populated.
"""
from __future__ import annotations

import dataclasses
import json
from datetime import date
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

__all__ = [
    "CostRange",
    "DeadlineWindow",
    "FilterCriterion",
    "FilterState",
    "FilterType",
    "LanguageLevel",
    "LanguageRequirement",
    "Operator",
    "RankingRange",
]

T = TypeVar("T")

LanguageLevel = Literal["beginner", "intermediate", "advanced", "native"]
Season = Literal["fall", "spring", "summer", "winter"]


class Operator(str, Enum):
    AND = "AND"
    OR = "OR"


class FilterType(str, Enum):
    LOCATION = "location"
    SUBJECT = "subject"
    COST = "cost"
    LANGUAGE = "language"
    INSTITUTION_TYPE = "institution_type"
    RANKING = "ranking"
    DEADLINE = "deadline"


@dataclasses.dataclass(frozen=True)
class CostRange:
    min: float
    max: float
    currency: str = "USD"

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclasses.dataclass(frozen=True)
class RankingRange:
    min: int
    max: int
    ranking_system: str | None = None

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


@dataclasses.dataclass(frozen=True)
class LanguageRequirement:
    language: str
    level: LanguageLevel = "intermediate"
    test_required: bool = False
    minimum_score: str | None = None


@dataclasses.dataclass(frozen=True)
class DeadlineWindow:
    start: date
    end: date
    season: Season | None = None

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclasses.dataclass(frozen=True)
class FilterCriterion(Generic[T]):
    """Values selected for one category plus how they combine."""

    type: FilterType
    values: tuple[T, ...] = ()
    operator: Operator = Operator.OR

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    @property
    def enabled(self) -> bool:
        return bool(self.values)

    def with_values(self, *values: T) -> "FilterCriterion[T]":
        return dataclasses.replace(self, values=tuple(values))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "values": [_value_to_json(v) for v in self.values],
            "operator": self.operator.value,
            "enabled": self.enabled,
        }


def _criterion(type_: FilterType, operator: Operator) -> Any:
    return dataclasses.field(default_factory=lambda: FilterCriterion(type_, (), operator))


@dataclasses.dataclass(frozen=True)
class FilterState:
    """One criterion slot per category; built fresh for every request."""

    locations: FilterCriterion[str] = _criterion(FilterType.LOCATION, Operator.OR)
    subjects: FilterCriterion[str] = _criterion(FilterType.SUBJECT, Operator.OR)
    costs: FilterCriterion[CostRange] = _criterion(FilterType.COST, Operator.AND)
    languages: FilterCriterion[LanguageRequirement] = _criterion(FilterType.LANGUAGE, Operator.OR)
    institution_types: FilterCriterion[str] = _criterion(FilterType.INSTITUTION_TYPE, Operator.OR)
    rankings: FilterCriterion[RankingRange] = _criterion(FilterType.RANKING, Operator.AND)
    deadlines: FilterCriterion[DeadlineWindow] = _criterion(FilterType.DEADLINE, Operator.AND)

    def criteria(self) -> tuple[FilterCriterion[Any], ...]:
        """All slots in evaluation order."""
        return (
            self.locations,
            self.subjects,
            self.costs,
            self.languages,
            self.institution_types,
            self.rankings,
            self.deadlines,
        )

    @property
    def active_count(self) -> int:
        return sum(1 for c in self.criteria() if c.enabled)

    @property
    def has_active(self) -> bool:
        return self.active_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "locations": self.locations.to_dict(),
            "subjects": self.subjects.to_dict(),
            "costs": self.costs.to_dict(),
            "languages": self.languages.to_dict(),
            "institutionTypes": self.institution_types.to_dict(),
            "rankings": self.rankings.to_dict(),
            "deadlines": self.deadlines.to_dict(),
        }

    def cache_token(self) -> str:
        """Canonical JSON; equal states always give equal tokens."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


def _value_to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            k: (v.isoformat() if isinstance(v, date) else v)
            for k, v in dataclasses.asdict(value).items()
        }
    if isinstance(value, date):
        return value.isoformat()
    return value
