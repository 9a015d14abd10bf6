"""Application search – FilterQuery, the flat query-parameter form of a FilterState.

Lists travel comma-separated (``countries=CA,NY``); ranges travel as a pair
of bounds (``costMin``/``costMax``) and must be given together.
"""
from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Any, Callable, Mapping, TypeVar

from campus_search.application.search.criteria import (
    CostRange,
    DeadlineWindow,
    FilterCriterion,
    FilterState,
    FilterType,
    LanguageRequirement,
    Operator,
    RankingRange,
)
from campus_search.application.search.ports import SourceConstraint
from campus_search.kernel.errors import ValidationError

__all__ = ["FilterQuery"]

N = TypeVar("N")

_LIST_PARAMS = {
    "countries": "countries",
    "majors": "majors",
    "languages": "languages",
    "institutionTypes": "institution_types",
}


def _split(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return datetime.fromisoformat(raw).date()


@dataclasses.dataclass(frozen=True)
class FilterQuery:
    countries: tuple[str, ...] = ()
    majors: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    institution_types: tuple[str, ...] = ()
    cost_min: float | None = None
    cost_max: float | None = None
    ranking_min: int | None = None
    ranking_max: int | None = None
    deadline_after: date | None = None
    deadline_before: date | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "FilterQuery":
        """Parse request query parameters.

        Raises :class:`ValidationError` listing every malformed parameter.
        """
        errors: list[dict[str, Any]] = []

        def number(name: str, convert: Callable[[str], N]) -> N | None:
            raw = params.get(name)
            if raw is None or str(raw).strip() == "":
                return None
            try:
                return convert(str(raw).strip())
            except ValueError:
                errors.append({"param": name, "value": raw, "reason": "not a number"})
                return None

        def day(name: str) -> date | None:
            raw = params.get(name)
            if raw is None or str(raw).strip() == "":
                return None
            try:
                return _parse_date(str(raw).strip())
            except ValueError:
                errors.append({"param": name, "value": raw, "reason": "not an ISO-8601 date"})
                return None

        lists = {attr: _split(params.get(name)) for name, attr in _LIST_PARAMS.items()}
        query = cls(
            **lists,
            cost_min=number("costMin", float),
            cost_max=number("costMax", float),
            ranking_min=number("rankingMin", int),
            ranking_max=number("rankingMax", int),
            deadline_after=day("deadlineAfter"),
            deadline_before=day("deadlineBefore"),
        )
        if not errors:
            errors.extend(query._bound_errors())
        if errors:
            raise ValidationError("Invalid filter parameters", errors=errors)
        return query

    def _bound_errors(self) -> list[dict[str, Any]]:
        errors: list[dict[str, Any]] = []
        pairs = (
            ("costMin", "costMax", self.cost_min, self.cost_max),
            ("rankingMin", "rankingMax", self.ranking_min, self.ranking_max),
            ("deadlineAfter", "deadlineBefore", self.deadline_after, self.deadline_before),
        )
        for low_name, high_name, low, high in pairs:
            if (low is None) != (high is None):
                missing = high_name if high is None else low_name
                errors.append({"param": missing, "value": None, "reason": f"required with {low_name}/{high_name}"})
            elif low is not None and high is not None and low > high:
                errors.append({"param": low_name, "value": str(low), "reason": f"greater than {high_name}"})
        return errors

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for name, attr in _LIST_PARAMS.items():
            values = getattr(self, attr)
            if values:
                params[name] = ",".join(values)
        scalars = {
            "costMin": self.cost_min,
            "costMax": self.cost_max,
            "rankingMin": self.ranking_min,
            "rankingMax": self.ranking_max,
            "deadlineAfter": self.deadline_after.isoformat() if self.deadline_after else None,
            "deadlineBefore": self.deadline_before.isoformat() if self.deadline_before else None,
        }
        for name, value in scalars.items():
            if value is None:
                continue
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            params[name] = str(value)
        return params

    @classmethod
    def from_state(cls, state: FilterState) -> "FilterQuery":
        """Flatten *state*; multiple ranges collapse to their overall bounds."""
        costs = state.costs.values
        rankings = state.rankings.values
        deadlines = state.deadlines.values
        return cls(
            countries=tuple(state.locations.values),
            majors=tuple(state.subjects.values),
            languages=tuple(req.language for req in state.languages.values),
            institution_types=tuple(state.institution_types.values),
            cost_min=min(r.min for r in costs) if costs else None,
            cost_max=max(r.max for r in costs) if costs else None,
            ranking_min=min(r.min for r in rankings) if rankings else None,
            ranking_max=max(r.max for r in rankings) if rankings else None,
            deadline_after=min(w.start for w in deadlines) if deadlines else None,
            deadline_before=max(w.end for w in deadlines) if deadlines else None,
        )

    def to_state(self) -> FilterState:
        state = FilterState()
        replacements: dict[str, FilterCriterion[Any]] = {}
        if self.countries:
            replacements["locations"] = state.locations.with_values(*self.countries)
        if self.majors:
            replacements["subjects"] = state.subjects.with_values(*self.majors)
        if self.languages:
            replacements["languages"] = state.languages.with_values(
                *(LanguageRequirement(language) for language in self.languages)
            )
        if self.institution_types:
            replacements["institution_types"] = state.institution_types.with_values(*self.institution_types)
        if self.cost_min is not None and self.cost_max is not None:
            replacements["costs"] = FilterCriterion(
                FilterType.COST, (CostRange(self.cost_min, self.cost_max),), Operator.AND
            )
        if self.ranking_min is not None and self.ranking_max is not None:
            replacements["rankings"] = FilterCriterion(
                FilterType.RANKING, (RankingRange(self.ranking_min, self.ranking_max),), Operator.AND
            )
        if self.deadline_after is not None and self.deadline_before is not None:
            replacements["deadlines"] = FilterCriterion(
                FilterType.DEADLINE, (DeadlineWindow(self.deadline_after, self.deadline_before),), Operator.AND
            )
        return dataclasses.replace(state, **replacements)

    def to_constraints(self) -> list[SourceConstraint]:
        """Constraints the data source can evaluate itself."""
        constraints: list[SourceConstraint] = []
        if self.countries:
            constraints.append(SourceConstraint("state_code", self.countries, op="in"))
        if self.institution_types:
            constraints.append(SourceConstraint("level_of_institution", self.institution_types, op="in"))
        return constraints
