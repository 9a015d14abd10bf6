"""Testing fakes – a small institution dataset in data-store row shape."""
from __future__ import annotations

from typing import Any

__all__ = ["sample_records"]

_ROWS: tuple[dict[str, Any], ...] = (
    {
        "unitid": 110404,
        "institution_name": "California Institute of Technology",
        "city": "Pasadena",
        "state_code": "CA",
        "level_of_institution": "4-year",
        "control_of_institution": "Private",
        "degree_of_urbanization": "City",
        "rank": 7,
        "tuition_and_fees": 60816,
        "majors": ["Physics", "Engineering"],
        "application_deadline": "2027-01-03",
    },
    {
        "unitid": 110422,
        "institution_name": "California State University Long Beach",
        "city": "Long Beach",
        "state_code": "CA",
        "level_of_institution": "4-year",
        "control_of_institution": "Public",
        "degree_of_urbanization": "City",
        "rank": 105,
        "tuition_and_fees": 6846,
        "majors": ["Nursing", "Business"],
        "application_deadline": "2026-11-30",
    },
    {
        "unitid": 122977,
        "institution_name": "Santa Monica College",
        "city": "Santa Monica",
        "state_code": "CA",
        "level_of_institution": "2-year",
        "control_of_institution": "Public",
        "degree_of_urbanization": "City",
        "rank": None,
        "tuition_and_fees": 1142,
    },
    {
        "unitid": 139755,
        "institution_name": "Georgia Institute of Technology",
        "city": "Atlanta",
        "state_code": "GA",
        "level_of_institution": "4-year",
        "control_of_institution": "Public",
        "degree_of_urbanization": "City",
        "rank": 33,
        "tuition_and_fees": 12682,
        "majors": ["Engineering", "Computer Science"],
        "application_deadline": "2027-01-04",
    },
    {
        "unitid": 166683,
        "institution_name": "Massachusetts Institute of Technology",
        "city": "Cambridge",
        "state_code": "MA",
        "level_of_institution": "4-year",
        "control_of_institution": "Private",
        "degree_of_urbanization": "City",
        "rank": 2,
        "tuition_and_fees": 59750,
        "majors": ["Engineering", "Physics", "Computer Science"],
        "application_deadline": "2027-01-05",
    },
    {
        "unitid": 193900,
        "institution_name": "New York University",
        "city": "New York",
        "state_code": "NY",
        "level_of_institution": "4-year",
        "control_of_institution": "Private",
        "degree_of_urbanization": "City",
        "rank": 35,
        "tuition_and_fees": 60438,
        "majors": ["Business", "Film"],
    },
    {
        "unitid": 204796,
        "institution_name": "Ohio State University",
        "city": "Columbus",
        "state_code": "OH",
        "level_of_institution": "4-year",
        "control_of_institution": "Public",
        "degree_of_urbanization": "City",
        "rank": 43,
        "tuition_and_fees": 12485,
        "majors": ["Agriculture", "Business"],
        "application_deadline": "2027-02-01",
    },
    {
        "unitid": 228778,
        "institution_name": "University of Texas at Austin",
        "city": "Austin",
        "state_code": "TX",
        "level_of_institution": "4-year",
        "control_of_institution": "Public",
        "degree_of_urbanization": "City",
        "rank": 32,
        "tuition_and_fees": 11752,
        "majors": ["Computer Science", "Business"],
        "application_deadline": "2026-12-01",
    },
)


def sample_records() -> list[dict[str, Any]]:
    """Fresh copies of the sample rows (safe to mutate)."""
    return [dict(row) for row in _ROWS]
