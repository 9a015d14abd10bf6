"""Application search – FilterEngine.

Categories are combined with AND. Within a category, membership filters
(location, subject, language, institution type) always match any value;
range filters (cost, ranking, deadline) follow the criterion's operator.
"""
from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, MutableMapping, Sequence, TypeVar

from campus_search.application.search.criteria import (
    CostRange,
    DeadlineWindow,
    FilterCriterion,
    FilterState,
    LanguageRequirement,
    Operator,
    RankingRange,
)
from campus_search.application.search.institution import Institution
from campus_search.observability.logging import get_logger

T = TypeVar("T")
R = TypeVar("R")

__all__ = ["FilterEngine", "FilterResult"]

_log = get_logger(__name__)

DEFAULT_LANGUAGE = "english"
DEFAULT_INSTITUTION_TYPE = "university"


@dataclass(frozen=True)
class FilterResult(Generic[T]):
    items: list[T]
    total_count: int
    applied_filters: FilterState
    match_percentage: float


def _combine(operator: Operator, ranges: Iterable[R], inside: Callable[[R], bool]) -> bool:
    match operator:
        case Operator.AND:
            return all(inside(r) for r in ranges)
        case Operator.OR:
            return any(inside(r) for r in ranges)


class FilterEngine:
    """Deterministic, side-effect free refinement of candidate lists."""

    def apply(self, items: Sequence[Institution], state: FilterState) -> FilterResult[Institution]:
        t0 = time.monotonic()
        steps: list[tuple[FilterCriterion[Any], Callable[[Institution, Any], bool]]] = [
            (state.locations, self.matches_location),
            (state.subjects, self.matches_subject),
            (state.costs, self.matches_cost),
            (state.languages, self.matches_language),
            (state.institution_types, self.matches_institution_type),
            (state.rankings, self.matches_ranking),
            (state.deadlines, self.matches_deadline),
        ]

        filtered = list(items)
        for criterion, predicate in steps:
            if not criterion.enabled:
                continue
            filtered = [item for item in filtered if predicate(item, criterion)]

        total = len(items)
        result = FilterResult(
            items=filtered,
            total_count=len(filtered),
            applied_filters=state,
            match_percentage=(len(filtered) / total * 100) if total else 0.0,
        )
        _log.debug(
            "filters.applied",
            candidates=total,
            matched=len(filtered),
            active=state.active_count,
            duration_ms=round((time.monotonic() - t0) * 1000, 3),
        )
        return result

    def apply_memoized(
        self,
        items: Sequence[Institution],
        state: FilterState,
        memo: MutableMapping[str, FilterResult[Institution]],
    ) -> FilterResult[Institution]:
        """Like :meth:`apply`, reusing *memo* keyed by the state's cache token.

        The memo is only valid for one candidate list; the caller owns it.
        """
        token = state.cache_token()
        cached = memo.get(token)
        if cached is not None:
            return cached
        result = self.apply(items, state)
        memo[token] = result
        return result

    # Per-category predicates ----------------------------------------------

    @staticmethod
    def matches_location(item: Institution, criterion: FilterCriterion[str]) -> bool:
        candidates = {v.lower() for v in (item.state_code, item.country) if v}
        return any(value.lower() in candidates for value in criterion.values)

    @staticmethod
    def matches_subject(item: Institution, criterion: FilterCriterion[str]) -> bool:
        majors = {m.lower() for m in item.majors}
        name = item.institution_name.lower()
        return any(s.lower() in majors or s.lower() in name for s in criterion.values)

    @staticmethod
    def matches_cost(item: Institution, criterion: FilterCriterion[CostRange]) -> bool:
        tuition = item.tuition_and_fees or 0
        return _combine(criterion.operator, criterion.values, lambda r: r.contains(tuition))

    @staticmethod
    def matches_language(item: Institution, criterion: FilterCriterion[LanguageRequirement]) -> bool:
        language = (item.language_of_instruction or DEFAULT_LANGUAGE).lower()
        return any(req.language.lower() == language for req in criterion.values)

    @staticmethod
    def matches_institution_type(item: Institution, criterion: FilterCriterion[str]) -> bool:
        kind = (item.level_of_institution or DEFAULT_INSTITUTION_TYPE).lower()
        return any(value.lower() == kind for value in criterion.values)

    @staticmethod
    def matches_ranking(item: Institution, criterion: FilterCriterion[RankingRange]) -> bool:
        rank = next((r for r in (item.rank, item.world_ranking) if r), sys.maxsize)
        return _combine(criterion.operator, criterion.values, lambda r: r.contains(rank))

    @staticmethod
    def matches_deadline(item: Institution, criterion: FilterCriterion[DeadlineWindow]) -> bool:
        deadline = item.application_deadline
        if deadline is None:
            return False
        return _combine(criterion.operator, criterion.values, lambda w: w.contains(deadline))
