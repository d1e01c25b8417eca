"""
Module: production_engines.timeline
Responsibility:
    Project milestone dates onto a normalized 0-100 position within a
    project's production window, compute elapsed progress against today,
    and build the marker set drawn on the production timeline.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Positions and progress are clamped to [0, 100].
    - A non-positive window span yields position 0 (no division by zero).
    - ``project_position(start, start, end) == 0`` and
      ``project_position(end, start, end) == 100`` for end > start, and
      positions are non-decreasing in the projected date.
    - Window start: fabrication_start, else assembly_start, else today.
      Window end: ship, else start + DEFAULT_HORIZON_DAYS.
    - A marker is "reached" iff its date <= today, independent of progress.

Failure modes:
    - None.  Absent milestones are skipped.

Usage:
    from datetime import date
    from production_engines.timeline import TimelineWindow, elapsed_progress

    window = TimelineWindow.for_project(project, today=date(2025, 2, 15))
    elapsed_progress(date(2025, 2, 15), window.start, window.end)  # ~29.8
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from production_engines.tracer import traced_engine
from production_kernel.domain.project import TIMELINE_MILESTONES, Project
from production_kernel.logging_config import get_logger

logger = get_logger("engines.timeline")

DEFAULT_HORIZON_DAYS = 30

# Markers closer than this (in position points) to the previous one get
# their label offset so the two do not overlap.
MARKER_OFFSET_THRESHOLD = 15.0

SHIPPING_TODAY = "SHIPPING TODAY"
SHIPPED = "SHIPPED"


@dataclass(frozen=True)
class TimelineWindow:
    """
    Date range a project's milestones are normalized against.

    ``start_is_fallback`` is True when neither fabrication nor assembly
    start is known and today stands in for the start (progress bar only).
    """

    start: date
    end: date
    start_is_fallback: bool = False
    end_is_default: bool = False

    @classmethod
    def for_project(cls, project: Project, today: date) -> TimelineWindow:
        start = project.fabrication_start or project.assembly_start
        start_is_fallback = start is None
        if start is None:
            start = today

        end = project.ship
        end_is_default = end is None
        if end is None:
            end = start + timedelta(days=DEFAULT_HORIZON_DAYS)

        return cls(
            start=start,
            end=end,
            start_is_fallback=start_is_fallback,
            end_is_default=end_is_default,
        )

    @property
    def span_days(self) -> int:
        return (self.end - self.start).days

    def position(self, day: date) -> float:
        return project_position(day, self.start, self.end)


@dataclass(frozen=True)
class MilestoneMarker:
    """One milestone placed on the timeline."""

    field: str
    label: str
    date: date
    position: float
    reached: bool
    needs_offset: bool = False


@dataclass(frozen=True)
class ProjectTimeline:
    """Everything a timeline view needs for one project on one day."""

    window: TimelineWindow
    progress: float
    markers: tuple[MilestoneMarker, ...]
    next_milestone: MilestoneMarker | None
    ship_countdown: str | None


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _raw_position(day: date, window_start: date, window_end: date) -> float:
    span = (window_end - window_start).days
    if span <= 0:
        return 0.0
    return 100.0 * (day - window_start).days / span


def project_position(day: date, window_start: date, window_end: date) -> float:
    """
    Normalized position of ``day`` within the window.

    Formula: 100 * (day - start) / (end - start), clamped to [0, 100].
    Returns 0.0 when end <= start.
    """
    return _clamp(_raw_position(day, window_start, window_end))


def elapsed_progress(today: date, window_start: date, window_end: date) -> float:
    """Share of the window elapsed as of today; never below 0 nor above 100."""
    return _clamp(project_position(today, window_start, window_end))


def milestone_markers(
    project: Project,
    today: date,
    window: TimelineWindow | None = None,
) -> tuple[MilestoneMarker, ...]:
    """
    Markers for the six timeline milestones, canonical order, absent skipped.

    The ship marker is labelled SHIPPED once today is past the ship date.
    Label offsets compare unclamped positions; ``position`` itself is clamped.
    """
    window = window or TimelineWindow.for_project(project, today)
    markers: list[MilestoneMarker] = []
    previous_raw = -20.0
    for field_name, label in TIMELINE_MILESTONES:
        day = getattr(project, field_name)
        if day is None:
            continue
        if field_name == "ship" and today > day:
            label = SHIPPED
        raw = _raw_position(day, window.start, window.end)
        markers.append(MilestoneMarker(
            field=field_name,
            label=label,
            date=day,
            position=_clamp(raw),
            reached=day <= today,
            needs_offset=raw - previous_raw < MARKER_OFFSET_THRESHOLD,
        ))
        previous_raw = raw
    return tuple(markers)


def next_milestone(project: Project, today: date) -> MilestoneMarker | None:
    """First timeline milestone dated on or after today, in canonical order."""
    for marker in milestone_markers(project, today):
        if marker.date >= today:
            return marker
    return None


def ship_countdown(project: Project, today: date) -> str | None:
    """Shipping status line shown above the progress indicator."""
    if project.ship is None:
        return None
    if today == project.ship:
        return SHIPPING_TODAY
    if today > project.ship:
        return SHIPPED
    return f"{(project.ship - today).days} days until shipping"


@traced_engine("timeline", "1.0", fingerprint_fields=("today",))
def project_timeline(project: Project, today: date) -> ProjectTimeline:
    """Assemble window, progress, markers and countdown for one project."""
    window = TimelineWindow.for_project(project, today)
    markers = milestone_markers(project, today, window)
    upcoming = next((m for m in markers if m.date >= today), None)
    progress = elapsed_progress(today, window.start, window.end)

    logger.debug("timeline_projected", extra={
        "project_id": project.id,
        "window_start": window.start.isoformat(),
        "window_end": window.end.isoformat(),
        "progress": round(progress, 2),
        "marker_count": len(markers),
    })

    return ProjectTimeline(
        window=window,
        progress=progress,
        markers=markers,
        next_milestone=upcoming,
        ship_countdown=ship_countdown(project, today),
    )
