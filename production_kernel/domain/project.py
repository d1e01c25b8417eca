"""
Project -- Immutable manufacturing project record and lifecycle phase.

Responsibility:
    Defines the ``Phase`` enum (ordered by production sequence) and the
    frozen ``Project`` dataclass the engines operate on.  Converts to and
    from the camelCase records served by the persistence collaborator.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.

Invariants enforced:
    - Progress metrics are integers in 0..100.
    - ``status`` is always present and defaults to ``Phase.NOT_STARTED``.
    - Records are immutable; state changes produce new instances via
      ``dataclasses.replace``.

Failure modes:
    - ValueError from ``Project.__post_init__`` on out-of-range progress.
    - ValueError from ``Project.from_record`` on an unparseable date string.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import date, datetime
from enum import Enum
from typing import Any


class Phase(str, Enum):
    """
    Manufacturing lifecycle stage of a project.

    Values are the strings stored by the persistence collaborator.
    Declaration order is NOT the ordering contract; use ``rank``.
    """

    NOT_STARTED = "NOT STARTED"
    IN_FAB = "IN FAB"
    IN_ASSEMBLY = "IN ASSEMBLY"
    IN_WRAP = "IN WRAP"
    IN_NTC_TESTING = "IN NTC TESTING"
    IN_QC = "IN QC"
    COMPLETED = "COMPLETED"

    @classmethod
    def sequence(cls) -> tuple[Phase, ...]:
        """All phases in production order."""
        return _PHASE_SEQUENCE

    @property
    def rank(self) -> int:
        """Zero-based position in the production sequence."""
        return _PHASE_SEQUENCE.index(self)

    @classmethod
    def parse(cls, value: Any) -> Phase:
        """Coerce a stored status value; unknown values fall back to NOT_STARTED."""
        if isinstance(value, Phase):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NOT_STARTED


_PHASE_SEQUENCE: tuple[Phase, ...] = (
    Phase.NOT_STARTED,
    Phase.IN_FAB,
    Phase.IN_ASSEMBLY,
    Phase.IN_WRAP,
    Phase.IN_NTC_TESTING,
    Phase.IN_QC,
    Phase.COMPLETED,
)


# Canonical milestone order; present dates are expected to be non-decreasing.
MILESTONE_FIELDS: tuple[str, ...] = (
    "contract_date",
    "fabrication_start",
    "assembly_start",
    "wrap_graphics",
    "ntc_testing",
    "qc_start",
    "executive_review",
    "ship",
    "delivery",
)

# Milestones drawn on the production timeline, with display labels.
TIMELINE_MILESTONES: tuple[tuple[str, str], ...] = (
    ("fabrication_start", "Fabrication Start"),
    ("assembly_start", "Assembly Start"),
    ("wrap_graphics", "Wrap/Graphics"),
    ("ntc_testing", "NTC Testing"),
    ("qc_start", "QC Start"),
    ("ship", "Ship"),
)

PROGRESS_FIELDS: tuple[str, ...] = (
    "me_cad_progress",
    "ee_design_progress",
    "it_design_progress",
    "ntc_design_progress",
)

# snake_case field -> collaborator record key
_RECORD_KEYS: dict[str, str] = {
    "id": "id",
    "project_number": "projectNumber",
    "name": "name",
    "location": "location",
    "team": "team",
    "contract_date": "contractDate",
    "fabrication_start": "fabricationStart",
    "assembly_start": "assemblyStart",
    "wrap_graphics": "wrapGraphics",
    "ntc_testing": "ntcTesting",
    "qc_start": "qcStart",
    "executive_review": "executiveReview",
    "executive_review_time": "executiveReviewTime",
    "ship": "ship",
    "delivery": "delivery",
    "manual_status": "manualStatus",
    "status": "status",
    "me_cad_progress": "meCadProgress",
    "ee_design_progress": "eeDesignProgress",
    "it_design_progress": "itDesignProgress",
    "ntc_design_progress": "ntcDesignProgress",
}


def parse_record_date(value: Any) -> date | None:
    """
    Parse a milestone value from a collaborator record.

    Accepts ``date``, ``datetime`` (time dropped) or an ISO string such as
    ``"2025-03-03"`` or ``"2025-03-03T00:00:00.000Z"``.  Empty values are
    absent.

    Raises:
        ValueError: if a non-empty string is not an ISO date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Cannot parse date from {value!r}")


@dataclass(frozen=True)
class Project:
    """
    A manufacturing project as seen by the lifecycle engine.

    Contract:
        Frozen snapshot.  Milestone dates are optional; time-of-day is never
        stored except ``executive_review_time``, which is display-only.
    Guarantees:
        - Progress metrics are within 0..100.
        - ``manual_status`` True means ``status`` is authoritative.
    Non-goals:
        - Does not enforce milestone ordering; see
          ``out_of_order_milestones`` for a diagnostic.
    """

    id: str
    project_number: str = ""
    name: str | None = None
    location: str | None = None
    team: str | None = None

    contract_date: date | None = None
    fabrication_start: date | None = None
    assembly_start: date | None = None
    wrap_graphics: date | None = None
    ntc_testing: date | None = None
    qc_start: date | None = None
    executive_review: date | None = None
    executive_review_time: str | None = None
    ship: date | None = None
    delivery: date | None = None

    manual_status: bool = False
    status: Phase = Phase.NOT_STARTED

    me_cad_progress: int = 0
    ee_design_progress: int = 0
    it_design_progress: int = 0
    ntc_design_progress: int = 0

    def __post_init__(self) -> None:
        for name in PROGRESS_FIELDS:
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be between 0 and 100, got {value}")

    def milestone(self, field_name: str) -> date | None:
        """Return a milestone date by field name."""
        if field_name not in MILESTONE_FIELDS:
            raise KeyError(f"Unknown milestone: {field_name}")
        return getattr(self, field_name)

    def present_milestones(self) -> list[tuple[str, date]]:
        """(field, date) pairs for every present milestone, canonical order."""
        return [
            (name, getattr(self, name))
            for name in MILESTONE_FIELDS
            if getattr(self, name) is not None
        ]

    def out_of_order_milestones(self) -> list[tuple[str, str]]:
        """
        Adjacent present milestones whose dates decrease.

        Returns (earlier_field, later_field) pairs where the later milestone
        is dated before the earlier one.  Empty for a well-formed schedule.
        """
        present = self.present_milestones()
        return [
            (prev_name, name)
            for (prev_name, prev_date), (name, value) in zip(present, present[1:])
            if value < prev_date
        ]

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Project:
        """Build a Project from a collaborator record (camelCase keys)."""
        kwargs: dict[str, Any] = {}
        for field_name, key in _RECORD_KEYS.items():
            if key not in record:
                continue
            value = record[key]
            if field_name in MILESTONE_FIELDS:
                kwargs[field_name] = parse_record_date(value)
            elif field_name == "status":
                kwargs[field_name] = Phase.parse(value)
            elif field_name == "manual_status":
                kwargs[field_name] = bool(value)
            elif field_name in PROGRESS_FIELDS:
                kwargs[field_name] = int(value or 0)
            elif field_name in ("id", "project_number"):
                kwargs[field_name] = str(value) if value is not None else ""
            else:
                kwargs[field_name] = value
        if "id" not in kwargs:
            raise KeyError("Project record is missing 'id'")
        return cls(**kwargs)

    def to_record(self) -> dict[str, Any]:
        """Serialize to a collaborator record (camelCase keys, ISO dates)."""
        record: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, Phase):
                value = value.value
            record[_RECORD_KEYS[f.name]] = value
        return record
