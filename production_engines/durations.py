"""
Module: production_engines.durations
Responsibility:
    Count business days between milestones and derive the two named
    durations shown on the project panel (QC and NTC), plus the
    display-severity bands consumers colour them with.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``working_days`` is inclusive of both ends and never negative.
    - ``end < start`` clamps to 0 (milestones may be transiently swapped
      while a user is editing).
    - Named durations are None (displayed "–") when an endpoint is absent.

Failure modes:
    - None.  All functions are total over ``date`` / ``None`` inputs.

Usage:
    from datetime import date
    from production_engines.durations import working_days, band_duration

    days = working_days(date(2025, 3, 3), date(2025, 3, 7))  # 5
    band_duration(days)  # DurationBand.WARNING
"""

from __future__ import annotations

from datetime import date, timedelta
from enum import Enum

from production_engines.calendar import WEEKENDS_ONLY, BusinessCalendar
from production_engines.tracer import traced_engine
from production_kernel.domain.project import Project
from production_kernel.logging_config import get_logger

logger = get_logger("engines.durations")

ABSENT_DURATION = "–"


class DurationBand(str, Enum):
    """Display severity for a business-day duration."""

    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


@traced_engine("durations", "1.0", fingerprint_fields=("start", "end"))
def working_days(
    start: date,
    end: date,
    calendar: BusinessCalendar | None = None,
) -> int:
    """
    Count business days from ``start`` to ``end`` inclusive.

    Preconditions:
        ``start`` and ``end`` are calendar dates.

    Postconditions:
        Returns an integer >= 0.  ``working_days(d, d)`` is 1 when ``d`` is
        a business day, else 0.  Returns 0 when ``end < start``.
    """
    cal = calendar or WEEKENDS_ONLY
    if end < start:
        return 0

    count = 0
    current = start
    step = timedelta(days=1)
    while current <= end:
        if cal.is_business_day(current):
            count += 1
        current += step
    return count


def qc_duration(project: Project, calendar: BusinessCalendar | None = None) -> int | None:
    """
    Business days from QC start to executive review (or ship when there is
    no executive review).  None when qc_start or both endpoints are absent.
    """
    if project.qc_start is None:
        return None
    end = project.executive_review or project.ship
    if end is None:
        return None
    return working_days(project.qc_start, end, calendar)


def ntc_duration(project: Project, calendar: BusinessCalendar | None = None) -> int | None:
    """Business days from NTC testing to QC start; None when either is absent."""
    if project.ntc_testing is None or project.qc_start is None:
        return None
    return working_days(project.ntc_testing, project.qc_start, calendar)


def band_duration(days: int) -> DurationBand:
    """General banding: <=3 good, 4-7 warning, >7 critical."""
    if days <= 3:
        return DurationBand.GOOD
    if days <= 7:
        return DurationBand.WARNING
    return DurationBand.CRITICAL


def band_qc_duration(days: int) -> DurationBand:
    """QC banding: <2 critical, <4 warning, else good."""
    if days < 2:
        return DurationBand.CRITICAL
    if days < 4:
        return DurationBand.WARNING
    return DurationBand.GOOD


def format_duration(days: int | None) -> str:
    """Render a duration for display; absent durations render as an en dash."""
    if days is None:
        return ABSENT_DURATION
    return str(days)
