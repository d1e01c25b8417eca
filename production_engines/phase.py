"""
Module: production_engines.phase
Responsibility:
    Derive a project's lifecycle phase from its milestone dates and
    "today", and apply the manual-override transitions (pin / reset).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    "today" is always an explicit parameter; the caller reads it from an
    injected Clock.

Invariants enforced:
    - Pinned projects (``manual_status``) return ``status`` unchanged.
    - Unpinned derivation depends only on milestone dates and today, and is
      monotonic in today: a later today never yields an earlier phase.
    - No milestones present -> NOT_STARTED.
    - COMPLETED may only be pinned strictly after the ship date.
    - Transitions return new Project instances; inputs are never mutated.

Failure modes:
    - PrematureCompletionError from ``set_manual_phase`` when COMPLETED is
      requested with no ship date or with today <= ship.
    - ``derive_phase`` never raises; absent dates fall through.

Usage:
    from datetime import date
    from production_engines.phase import derive_phase, set_manual_phase

    phase = derive_phase(project, today=date(2025, 2, 15))
    pinned = set_manual_phase(project, Phase.IN_WRAP, today=date(2025, 2, 15))
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from datetime import date

from production_engines.tracer import traced_engine
from production_kernel.domain.project import Phase, Project
from production_kernel.exceptions import PrematureCompletionError
from production_kernel.logging_config import get_logger

logger = get_logger("engines.phase")

# First matching rule wins: later milestones subsume earlier ones.
PHASE_RULES: tuple[tuple[str, Phase], ...] = (
    ("ship", Phase.COMPLETED),
    ("qc_start", Phase.IN_QC),
    ("ntc_testing", Phase.IN_NTC_TESTING),
    ("wrap_graphics", Phase.IN_WRAP),
    ("assembly_start", Phase.IN_ASSEMBLY),
    ("fabrication_start", Phase.IN_FAB),
)


def derive_phase(project: Project, today: date) -> Phase:
    """
    Map a project's milestones to its current lifecycle phase.

    Preconditions:
        ``today`` is a calendar date supplied by the caller.

    Postconditions:
        Returns ``project.status`` when pinned; otherwise the phase of the
        latest milestone (in precedence order) whose date is <= today, or
        NOT_STARTED.
    """
    if project.manual_status:
        logger.debug("phase_pinned", extra={
            "project_id": project.id,
            "phase": project.status.value,
        })
        return project.status

    for field_name, phase in PHASE_RULES:
        milestone = getattr(project, field_name)
        if milestone is not None and today >= milestone:
            logger.debug("phase_derived", extra={
                "project_id": project.id,
                "phase": phase.value,
                "matched_milestone": field_name,
                "milestone_date": milestone.isoformat(),
                "today": today.isoformat(),
            })
            return phase

    logger.debug("phase_derived", extra={
        "project_id": project.id,
        "phase": Phase.NOT_STARTED.value,
        "matched_milestone": None,
        "today": today.isoformat(),
    })
    return Phase.NOT_STARTED


@traced_engine("phase", "1.0", fingerprint_fields=("today",))
def decorate_phases(projects: Iterable[Project], today: date) -> list[Project]:
    """
    Return copies of ``projects`` with ``status`` set to the derived phase.

    Pinned projects are returned as-is.  The derived value is never meant to
    be persisted; callers re-run this on every refresh.
    """
    decorated: list[Project] = []
    for project in projects:
        if project.manual_status:
            decorated.append(project)
            continue
        phase = derive_phase(project, today)
        if phase is project.status:
            decorated.append(project)
        else:
            decorated.append(dataclasses.replace(project, status=phase))
    return decorated


def can_complete(project: Project, today: date) -> bool:
    """True when COMPLETED may be pinned: a ship date exists and has passed."""
    return project.ship is not None and today > project.ship


@traced_engine("phase", "1.0", fingerprint_fields=("phase", "today"))
def set_manual_phase(project: Project, phase: Phase, today: date) -> Project:
    """
    Pin ``project`` to ``phase``.

    Postconditions:
        Returns a copy with ``manual_status=True`` and ``status=phase``.

    Raises:
        PrematureCompletionError: if ``phase`` is COMPLETED and the ship
            date is absent or today <= ship.  Nothing is changed.
    """
    if phase is Phase.COMPLETED and not can_complete(project, today):
        logger.warning("manual_phase_rejected", extra={
            "project_id": project.id,
            "requested_phase": phase.value,
            "ship": project.ship.isoformat() if project.ship else None,
            "today": today.isoformat(),
        })
        raise PrematureCompletionError(project.id, phase.value, project.ship, today)

    logger.info("manual_phase_set", extra={
        "project_id": project.id,
        "previous_phase": project.status.value,
        "previous_manual": project.manual_status,
        "phase": phase.value,
    })
    return dataclasses.replace(project, manual_status=True, status=phase)


def reset_manual_phase(project: Project) -> Project:
    """
    Clear the manual pin.

    The returned copy keeps its last ``status`` until the next
    ``derive_phase`` call recomputes it from the milestones.
    """
    if project.manual_status:
        logger.info("manual_phase_reset", extra={
            "project_id": project.id,
            "previous_phase": project.status.value,
        })
    return dataclasses.replace(project, manual_status=False)
