"""
Derived-field functions — validity dates and NACE classification.

Turkish OHS documents (risk assessments, emergency plans) are valid for a
period fixed by the workplace hazard class. Year addition uses
``relativedelta``: a 29 February start date lands on 28 February in a
non-leap target year.

The hazard class and sector of a workplace follow from the two-digit
division of its NACE activity code.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta


class HazardClass(str, Enum):
    LOW = "Az Tehlikeli"
    MEDIUM = "Tehlikeli"
    HIGH = "Çok Tehlikeli"


HAZARD_VALIDITY_YEARS: dict[HazardClass, int] = {
    HazardClass.LOW: 6,
    HazardClass.MEDIUM: 4,
    HazardClass.HIGH: 2,
}


def parse_date(value: object) -> date | None:
    """Accept a date, datetime or ISO-8601 string; anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return isoparse(value.strip()).date()
        except ValueError:
            return None
    return None


def parse_hazard_class(value: object) -> HazardClass | None:
    if isinstance(value, HazardClass):
        return value
    try:
        return HazardClass(value)
    except ValueError:
        return None


def add_years(start: date, years: int) -> date:
    return start + relativedelta(years=years)


def validity_date(start: object, hazard_class: object) -> str | None:
    """
    ISO date at which a document issued on ``start`` expires.

    Returns None while either input is missing or unparseable, so a stale
    value never survives a change to an invalid input.
    """
    start_date = parse_date(start)
    level = parse_hazard_class(hazard_class)
    if start_date is None or level is None:
        return None
    return add_years(start_date, HAZARD_VALIDITY_YEARS[level]).isoformat()


# Two-digit NACE division → hazard class (İSG hazard class communiqué)
_VERY_HAZARDOUS_DIVISIONS = frozenset(
    ["05", "06", "07", "08", "09", "24", "25", "41", "42", "43", "49", "50", "51"]
)
_HAZARDOUS_DIVISIONS = frozenset(
    [f"{n:02d}" for n in range(10, 18)]
    + ["23"]
    + [str(n) for n in range(26, 34)]
    + [str(n) for n in range(35, 40)]
    + ["52", "53"]
)

NACE_SECTORS: dict[str, str] = {
    "41": "construction",
    "42": "construction",
    "43": "construction",
    "10": "manufacturing",
    "11": "manufacturing",
    "23": "manufacturing",
    "24": "manufacturing",
    "25": "manufacturing",
    "64": "office",
    "65": "office",
    "66": "office",
    "69": "office",
    "70": "office",
}

DEFAULT_SECTOR = "office"


def nace_division(code: object) -> str | None:
    """First two digits of a NACE code such as ``"41.20"``, else None."""
    if not isinstance(code, str):
        return None
    division = code.strip()[:2]
    if len(division) != 2 or not division.isdigit():
        return None
    return division


def hazard_class_for_nace(code: object) -> str | None:
    division = nace_division(code)
    if division is None:
        return None
    if division in _VERY_HAZARDOUS_DIVISIONS:
        return HazardClass.HIGH.value
    if division in _HAZARDOUS_DIVISIONS:
        return HazardClass.MEDIUM.value
    return HazardClass.LOW.value


def sector_for_nace(code: object) -> str | None:
    division = nace_division(code)
    if division is None:
        return None
    return NACE_SECTORS.get(division, DEFAULT_SECTOR)
