"""Application search – SynonymTable and the built-in vocabulary.

Mappings are directed (``term -> synonyms``) but looked up in both
directions. Region expansions must be single words: the full-text dialect
cannot hold a multi-word literal inside an OR group, so two-word states are
left out on purpose.
"""
from __future__ import annotations

import dataclasses
from typing import Iterable, Mapping

__all__ = [
    "INSTITUTION_SYNONYMS",
    "REGION_ABBREVIATIONS",
    "SynonymMapping",
    "SynonymTable",
]


@dataclasses.dataclass(frozen=True)
class SynonymMapping:
    term: str
    synonyms: tuple[str, ...]

    @property
    def members(self) -> tuple[str, ...]:
        """Canonical term followed by its synonyms."""
        return (self.term, *self.synonyms)


INSTITUTION_SYNONYMS: tuple[SynonymMapping, ...] = (
    SynonymMapping("university", ("college", "uni", "school", "institution", "academy")),
    SynonymMapping("college", ("university", "school", "institution", "academy")),
    SynonymMapping("tech", ("technical", "technology", "technological", "polytechnic")),
    SynonymMapping("state", ("public",)),
    SynonymMapping("private", ("independent",)),
    SynonymMapping("community", ("cc", "junior")),
    SynonymMapping("cal", ("california",)),
    SynonymMapping("california", ("cal",)),
)

# nh, nj, nm, nc, nd, ri, sc, sd, wv and dc have no single-word name
REGION_ABBREVIATIONS: Mapping[str, str] = {
    "al": "alabama",
    "ak": "alaska",
    "az": "arizona",
    "ar": "arkansas",
    "ca": "california",
    "co": "colorado",
    "ct": "connecticut",
    "de": "delaware",
    "fl": "florida",
    "ga": "georgia",
    "hi": "hawaii",
    "id": "idaho",
    "il": "illinois",
    "in": "indiana",
    "ia": "iowa",
    "ks": "kansas",
    "ky": "kentucky",
    "la": "louisiana",
    "me": "maine",
    "md": "maryland",
    "ma": "massachusetts",
    "mi": "michigan",
    "mn": "minnesota",
    "ms": "mississippi",
    "mo": "missouri",
    "mt": "montana",
    "ne": "nebraska",
    "nv": "nevada",
    "ny": "york",
    "oh": "ohio",
    "ok": "oklahoma",
    "or": "oregon",
    "pa": "pennsylvania",
    "tn": "tennessee",
    "tx": "texas",
    "ut": "utah",
    "vt": "vermont",
    "va": "virginia",
    "wa": "washington",
    "wi": "wisconsin",
    "wy": "wyoming",
}


class SynonymTable:
    """Read-only lookup over synonym mappings and region abbreviations."""

    def __init__(
        self,
        mappings: Iterable[SynonymMapping] = (),
        regions: Mapping[str, str] | None = None,
    ) -> None:
        self._mappings: tuple[SynonymMapping, ...] = tuple(mappings)
        regions = dict(regions or {})
        for code, name in regions.items():
            if len(name.split()) != 1:
                raise ValueError(f"region {code!r} must expand to a single word, got {name!r}")
        self._region_names: dict[str, str] = {code.lower(): name.lower() for code, name in regions.items()}
        self._region_codes: dict[str, str] = {}
        for code, name in self._region_names.items():
            self._region_codes.setdefault(name, code)

        # token -> indexes of mappings mentioning it, kept in table order
        index: dict[str, list[int]] = {}
        for position, mapping in enumerate(self._mappings):
            for member in mapping.members:
                slots = index.setdefault(member, [])
                if position not in slots:
                    slots.append(position)
        self._index = index

    @classmethod
    def default(cls) -> "SynonymTable":
        return cls(INSTITUTION_SYNONYMS, REGION_ABBREVIATIONS)

    @property
    def mappings(self) -> tuple[SynonymMapping, ...]:
        return self._mappings

    def mappings_for(self, token: str) -> list[SynonymMapping]:
        """Mappings whose term is *token* or whose synonyms contain it."""
        return [self._mappings[i] for i in self._index.get(token, ())]

    def region_name(self, code: str) -> str | None:
        return self._region_names.get(code)

    def region_code(self, name: str) -> str | None:
        return self._region_codes.get(name)
