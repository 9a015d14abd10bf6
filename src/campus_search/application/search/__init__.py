"""Application search – synonym expansion, filtering and the search pipeline."""
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
from campus_search.application.search.expander import QueryExpander, reserved_tokens, tokenize
from campus_search.application.search.filters import FilterEngine, FilterResult
from campus_search.application.search.institution import Institution
from campus_search.application.search.params import FilterQuery
from campus_search.application.search.ports import DataSource, SourceConstraint, SourcePage
from campus_search.application.search.service import (
    InstitutionSearchService,
    SearchOutcome,
    SearchRequest,
)
from campus_search.application.search.synonyms import (
    INSTITUTION_SYNONYMS,
    REGION_ABBREVIATIONS,
    SynonymMapping,
    SynonymTable,
)

__all__ = [
    "CostRange",
    "DataSource",
    "DeadlineWindow",
    "FilterCriterion",
    "FilterEngine",
    "FilterQuery",
    "FilterResult",
    "FilterState",
    "FilterType",
    "INSTITUTION_SYNONYMS",
    "Institution",
    "InstitutionSearchService",
    "LanguageRequirement",
    "Operator",
    "QueryExpander",
    "REGION_ABBREVIATIONS",
    "RankingRange",
    "SearchOutcome",
    "SearchRequest",
    "SourceConstraint",
    "SourcePage",
    "SynonymMapping",
    "SynonymTable",
    "reserved_tokens",
    "tokenize",
]
