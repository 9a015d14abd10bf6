"""Application search – Institution candidate record."""
from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Any, Mapping

__all__ = ["Institution"]


def _parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


@dataclasses.dataclass(frozen=True)
class Institution:
    """One row returned by the data source, with store defaults applied."""

    unitid: int
    institution_name: str
    city: str = ""
    state_code: str = ""
    level_of_institution: str | None = None
    control_of_institution: str | None = None
    degree_of_urbanization: str | None = None
    rank: int | None = None
    tuition_and_fees: float | None = None
    language_of_instruction: str | None = None
    world_ranking: int | None = None
    country: str | None = None
    majors: tuple[str, ...] = ()
    application_deadline: date | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Institution":
        rank = record.get("rank") or None
        return cls(
            unitid=record["unitid"],
            institution_name=record.get("institution_name") or "",
            city=record.get("city") or "",
            state_code=record.get("state_code") or "",
            level_of_institution=record.get("level_of_institution") or "4-year",
            control_of_institution=record.get("control_of_institution") or "Public",
            degree_of_urbanization=record.get("degree_of_urbanization") or "City",
            rank=rank,
            tuition_and_fees=record.get("tuition_and_fees") or None,
            language_of_instruction=record.get("language_of_instruction") or "English",
            world_ranking=record.get("world_ranking") or rank,
            country=record.get("country") or "USA",
            majors=tuple(record.get("majors") or ()),
            application_deadline=_parse_date(record.get("application_deadline")),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["majors"] = list(self.majors)
        if self.application_deadline is not None:
            data["application_deadline"] = self.application_deadline.isoformat()
        return data
