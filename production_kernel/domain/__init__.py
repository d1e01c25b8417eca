"""
Pure domain layer.

This module contains immutable project records and the lifecycle
phase enum with NO dependencies on:
- Persistence
- Time/clock (beyond the injectable Clock abstraction)
- I/O

All domain objects are immutable and deterministic.
"""

from production_kernel.domain.clock import (
    Clock,
    DeterministicClock,
    SequentialClock,
    SystemClock,
)
from production_kernel.domain.project import (
    MILESTONE_FIELDS,
    PROGRESS_FIELDS,
    TIMELINE_MILESTONES,
    Phase,
    Project,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "MILESTONE_FIELDS",
    "PROGRESS_FIELDS",
    "Phase",
    "Project",
    "SequentialClock",
    "SystemClock",
    "TIMELINE_MILESTONES",
]
