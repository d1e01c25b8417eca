"""
Calendar Loader (``production_config.loader``).

Responsibility
--------------
Loads holiday calendar YAML files and parses them into typed
``production_config.schema`` dataclass instances.  This is internal
tooling; the single public entry point for runtime calendars is
``production_config.get_business_calendar()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys in parsed dict  -> ``KeyError`` propagates.
* Invalid date format  -> ``ValueError`` from ``date.fromisoformat``.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from production_config.schema import CalendarDefinition, HolidayDef


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_date(value: Any) -> date:
    """
    Parse a date from YAML (string or date object).

    Raises:
        ValueError: if ``value`` is not a valid date representation.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_holiday(data: Any) -> HolidayDef:
    """Parse a holiday entry: either a bare date or ``{date, name}``."""
    if isinstance(data, dict):
        return HolidayDef(date=parse_date(data["date"]), name=data.get("name", ""))
    return HolidayDef(date=parse_date(data))


def parse_calendar(data: dict[str, Any]) -> CalendarDefinition:
    """
    Parse a ``CalendarDefinition`` from a dict.

    Year keys may be ints or numeric strings.  Years are sorted; holiday
    order within a year is preserved.
    """
    years_raw = data.get("years") or {}
    years = tuple(
        (int(year), tuple(parse_holiday(h) for h in (holidays or ())))
        for year, holidays in sorted(years_raw.items(), key=lambda kv: int(kv[0]))
    )
    return CalendarDefinition(
        name=data["name"],
        description=data.get("description", ""),
        years=years,
    )


def load_calendar(path: Path) -> CalendarDefinition:
    """Load and parse one calendar file."""
    return parse_calendar(load_yaml_file(path))
