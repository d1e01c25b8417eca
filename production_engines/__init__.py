"""
Module: production_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    project lifecycle engines.  This is the canonical import surface for
    higher layers (production_services and display code).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import production_kernel (and sibling engine modules).
    MUST NOT import production_config or production_services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      "today" is passed in as an explicit parameter; callers read it from
      an injected Clock.
    - Determinism: identical inputs always produce identical outputs.
    - No shared mutable state; safe to call concurrently.

Usage:
    from production_engines.calendar import BusinessCalendar, HolidaySet
    from production_engines.durations import working_days, qc_duration
    from production_engines.phase import derive_phase, set_manual_phase
    from production_engines.timeline import project_position, elapsed_progress
    from production_engines.ranking import RankingConfig, compare, sort_projects
"""

from production_engines.calendar import (
    WEEKENDS_ONLY,
    BusinessCalendar,
    HolidaySet,
)
from production_engines.durations import (
    DurationBand,
    band_duration,
    band_qc_duration,
    format_duration,
    ntc_duration,
    qc_duration,
    working_days,
)
from production_engines.phase import (
    PHASE_RULES,
    can_complete,
    decorate_phases,
    derive_phase,
    reset_manual_phase,
    set_manual_phase,
)
from production_engines.ranking import (
    RankingConfig,
    RankingKey,
    SortDirection,
    compare,
    filter_projects,
    matches_query,
    sort_projects,
)
from production_engines.timeline import (
    DEFAULT_HORIZON_DAYS,
    MilestoneMarker,
    ProjectTimeline,
    TimelineWindow,
    elapsed_progress,
    milestone_markers,
    next_milestone,
    project_position,
    project_timeline,
    ship_countdown,
)
from production_engines.tracer import traced_engine

__all__ = [
    "BusinessCalendar",
    "DEFAULT_HORIZON_DAYS",
    "DurationBand",
    "HolidaySet",
    "MilestoneMarker",
    "PHASE_RULES",
    "ProjectTimeline",
    "RankingConfig",
    "RankingKey",
    "SortDirection",
    "TimelineWindow",
    "WEEKENDS_ONLY",
    "band_duration",
    "band_qc_duration",
    "can_complete",
    "compare",
    "decorate_phases",
    "derive_phase",
    "elapsed_progress",
    "filter_projects",
    "format_duration",
    "matches_query",
    "milestone_markers",
    "next_milestone",
    "ntc_duration",
    "project_position",
    "project_timeline",
    "qc_duration",
    "reset_manual_phase",
    "set_manual_phase",
    "ship_countdown",
    "sort_projects",
    "traced_engine",
    "working_days",
]
