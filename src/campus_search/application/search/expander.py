"""Application search – QueryExpander.

Two views of the same free text:

* :meth:`QueryExpander.expand` – flat term set for broad matching;
* :meth:`QueryExpander.build_boolean_expression` – one OR-group per token,
  groups joined with AND, in the store's full-text dialect::

      "california tech" -> "(california | ca | cal) & (tech | technical | ...)"
"""
from __future__ import annotations

from campus_search.application.search.synonyms import SynonymTable

__all__ = ["AND", "OR", "QueryExpander", "RESERVED_CHARACTERS", "reserved_tokens", "tokenize"]

AND = " & "
OR = " | "

# operators and quoting of the store's full-text dialect
RESERVED_CHARACTERS = frozenset("&|!():'*<>\\")


def tokenize(query: str) -> list[str]:
    return query.lower().split()


def reserved_tokens(query: str) -> list[str]:
    """Tokens that would be read as full-text operators rather than words."""
    return [token for token in tokenize(query) if not RESERVED_CHARACTERS.isdisjoint(token)]


class QueryExpander:
    def __init__(self, table: SynonymTable | None = None) -> None:
        self._table = table or SynonymTable.default()

    @property
    def table(self) -> SynonymTable:
        return self._table

    def expand(self, query: str) -> set[str]:
        """Every token plus its region expansion and synonym relatives.

        The result carries no grouping; use
        :meth:`build_boolean_expression` when token positions matter.
        """
        terms: set[str] = set()
        for token in tokenize(query):
            terms.add(token)
            region = self._table.region_name(token)
            if region:
                terms.add(region)
            for mapping in self._table.mappings_for(token):
                terms.update(mapping.members)
        return terms

    def synonym_group(self, token: str) -> list[str]:
        """Ordered, de-duplicated alternatives for a single token position."""
        group: dict[str, None] = {token: None}

        region = self._table.region_name(token)
        if region:
            group[region] = None
        code = self._table.region_code(token)
        if code:
            group[code] = None

        for mapping in self._table.mappings_for(token):
            for member in mapping.members:
                group[member] = None

        # one extra hop so "cal" also reaches "ca" through "california"
        for member in list(group):
            counterpart = self._table.region_code(member) or self._table.region_name(member)
            if counterpart:
                group[counterpart] = None

        return list(group)

    def build_boolean_expression(self, query: str) -> str:
        """Conjunction of per-token OR-groups; ``""`` means no text filter."""
        groups: list[str] = []
        for token in tokenize(query):
            members = self.synonym_group(token)
            if len(members) > 1:
                groups.append(f"({OR.join(members)})")
            else:
                groups.append(token)
        return AND.join(groups)
