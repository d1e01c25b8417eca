"""
Module: production_engines.calendar
Responsibility:
    Answer "is this date a business day" from a weekend rule and a
    per-year holiday table.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    The holiday table is static data supplied by production_config; it is
    never fetched at call time.

Invariants enforced:
    - A business day is Monday-Friday AND not a holiday of that date's year.
    - Absent configuration means an empty holiday set (weekends only).
    - HolidaySet is immutable once built.

Failure modes:
    - None.  ``is_business_day`` is total over ``date`` inputs.

Usage:
    from datetime import date
    from production_engines.calendar import BusinessCalendar, HolidaySet

    calendar = BusinessCalendar(HolidaySet.from_dates([date(2025, 7, 4)]))
    calendar.is_business_day(date(2025, 7, 4))  # False
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType

# date.weekday(): Monday == 0 ... Sunday == 6
WEEKEND_DAYS: frozenset[int] = frozenset({5, 6})


@dataclass(frozen=True)
class HolidaySet:
    """
    Holidays keyed by calendar year.

    Contract:
        Frozen; each year maps to a frozenset of dates in that year.
    Guarantees:
        - ``contains(d)`` only consults the table for ``d.year``.
    """

    by_year: Mapping[int, frozenset[date]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        frozen = {
            int(year): frozenset(days) for year, days in self.by_year.items()
        }
        object.__setattr__(self, "by_year", MappingProxyType(frozen))

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.by_year.items())))

    @classmethod
    def empty(cls) -> HolidaySet:
        return cls()

    @classmethod
    def from_dates(cls, dates: Iterable[date]) -> HolidaySet:
        """Group a flat collection of holiday dates by year."""
        grouped: dict[int, set[date]] = {}
        for d in dates:
            grouped.setdefault(d.year, set()).add(d)
        return cls({year: frozenset(days) for year, days in grouped.items()})

    @property
    def years(self) -> tuple[int, ...]:
        return tuple(sorted(self.by_year))

    def contains(self, day: date) -> bool:
        return day in self.by_year.get(day.year, frozenset())

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.contains(day)

    def __len__(self) -> int:
        return sum(len(days) for days in self.by_year.values())


@dataclass(frozen=True)
class BusinessCalendar:
    """
    Weekend rule plus holiday table.

    Contract:
        Pure; no I/O, fully deterministic.
    Non-goals:
        - Does not compute holidays (e.g. "last Monday in May"); the table
          is configuration data.
    """

    holidays: HolidaySet = field(default_factory=HolidaySet.empty)
    name: str = "weekends-only"

    def is_business_day(self, day: date) -> bool:
        if day.weekday() in WEEKEND_DAYS:
            return False
        return not self.holidays.contains(day)

    def is_holiday(self, day: date) -> bool:
        return self.holidays.contains(day)


# Shared instance for callers that supply no configuration.
WEEKENDS_ONLY = BusinessCalendar()
