"""
Holiday calendar schema.

Defines the human-authored, reviewable source artifact for business-day
calendars.  YAML files are parsed into these types by the loader,
validated by the validator, and turned into a runtime
``BusinessCalendar`` by ``production_config.get_business_calendar``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class HolidayDef:
    """One non-working day."""

    date: date
    name: str = ""


@dataclass(frozen=True)
class CalendarDefinition:
    """A named holiday table keyed by calendar year."""

    name: str
    description: str = ""
    years: tuple[tuple[int, tuple[HolidayDef, ...]], ...] = ()

    @property
    def holiday_dates(self) -> tuple[date, ...]:
        return tuple(h.date for _, holidays in self.years for h in holidays)

    def holidays_for(self, year: int) -> tuple[HolidayDef, ...]:
        for y, holidays in self.years:
            if y == year:
                return holidays
        return ()
