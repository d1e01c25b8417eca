"""
production_config -- single public entrypoint for business-day calendars.

Responsibility:
    Provides the ONLY way to obtain a holiday calendar at runtime through
    ``get_business_calendar()``.  Holiday tables are configuration data
    kept in YAML under ``production_config/calendars``; adding a year
    means editing YAML, never code.

Architecture position:
    Configuration -- sits above ``production_kernel`` and
    ``production_engines`` and below ``production_services``.  Engines
    MUST NEVER import from ``production_config``; they receive the built
    ``BusinessCalendar`` as a parameter.

Failure modes:
    - ``FileNotFoundError`` -- no calendar file with the requested name.
    - ``CalendarConfigError`` -- the calendar failed validation.
    - ``yaml.YAMLError`` / ``KeyError`` / ``ValueError`` -- malformed file.

Audit relevance:
    Every successful call emits a ``PRODUCTION_CONFIG_TRACE`` log entry with
    the calendar name, covered years and holiday count.
"""

from __future__ import annotations

import logging
from pathlib import Path

from production_config.loader import load_calendar
from production_config.schema import CalendarDefinition
from production_config.validator import validate_calendar
from production_engines.calendar import BusinessCalendar, HolidaySet
from production_kernel.exceptions import CalendarConfigError

_logger = logging.getLogger("production_kernel.config")

# Default calendar directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "calendars"

DEFAULT_CALENDAR = "us_federal"


def load_calendar_definition(
    name: str = DEFAULT_CALENDAR,
    config_dir: Path | None = None,
) -> CalendarDefinition:
    """Load and validate a calendar definition without building it."""
    path = (config_dir or _DEFAULT_CONFIG_DIR) / f"{name}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"No holiday calendar named '{name}' at {path}")

    definition = load_calendar(path)
    validation = validate_calendar(definition)
    if not validation.is_valid:
        raise CalendarConfigError(definition.name, "; ".join(validation.errors))
    for warning in validation.warnings:
        _logger.warning("calendar_config_warning", extra={
            "calendar_name": definition.name,
            "detail": warning,
        })
    return definition


def build_business_calendar(definition: CalendarDefinition) -> BusinessCalendar:
    """Turn a validated definition into the runtime calendar."""
    holidays = HolidaySet({
        year: frozenset(h.date for h in holidays)
        for year, holidays in definition.years
    })
    return BusinessCalendar(holidays=holidays, name=definition.name)


def get_business_calendar(
    name: str = DEFAULT_CALENDAR,
    config_dir: Path | None = None,
) -> BusinessCalendar:
    """The ONLY public calendar entrypoint.

    Args:
        name: Calendar file stem (``<name>.yaml``).
        config_dir: Override path to the calendars directory.
            Defaults to production_config/calendars/.

    Returns:
        BusinessCalendar built from the validated holiday table.

    Raises:
        FileNotFoundError: If no calendar with that name exists.
        CalendarConfigError: If the calendar fails validation.
    """
    definition = load_calendar_definition(name, config_dir)
    calendar = build_business_calendar(definition)

    _logger.info(
        "PRODUCTION_CONFIG_TRACE",
        extra={
            "trace_type": "PRODUCTION_CONFIG_TRACE",
            "calendar_name": definition.name,
            "years": list(calendar.holidays.years),
            "holiday_count": len(calendar.holidays),
        },
    )
    return calendar


__all__ = [
    "DEFAULT_CALENDAR",
    "build_business_calendar",
    "get_business_calendar",
    "load_calendar_definition",
]
