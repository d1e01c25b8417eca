"""
Calendar validation.

Checks a parsed ``CalendarDefinition`` before it becomes a runtime
``BusinessCalendar``:

* every holiday falls in the year it is listed under;
* no date is listed twice.

Weekend holidays are allowed (they are simply redundant) and reported as
warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from production_config.schema import CalendarDefinition


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_calendar(definition: CalendarDefinition) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    for year, holidays in definition.years:
        seen: set = set()
        for holiday in holidays:
            if holiday.date.year != year:
                errors.append(
                    f"{holiday.date.isoformat()} ({holiday.name or 'unnamed'}) "
                    f"is listed under {year}"
                )
            if holiday.date in seen:
                errors.append(f"{holiday.date.isoformat()} is listed twice in {year}")
            seen.add(holiday.date)
            if holiday.date.weekday() >= 5:
                warnings.append(
                    f"{holiday.date.isoformat()} ({holiday.name or 'unnamed'}) "
                    f"falls on a weekend"
                )

    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))
