"""
Typed Exception Hierarchy for the Production Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from ProductionKernelError:

    ProductionKernelError (base)
    |
    +-- LifecycleError
    |   +-- InvalidStateChangeError
    |       +-- PrematureCompletionError
    |
    +-- ProjectNotFoundError
    |
    +-- CalendarConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Lifecycle       | INVALID_STATE_CHANGE        | Manual phase change refused
                | PREMATURE_COMPLETION        | COMPLETED requested on/before ship date
----------------|-----------------------------|-----------------------------------------
Lookup          | PROJECT_NOT_FOUND           | Store has no project with that id
----------------|-----------------------------|-----------------------------------------
Configuration   | CALENDAR_CONFIG_ERROR       | Holiday calendar YAML is malformed

===============================================================================
HANDLING PATTERNS
===============================================================================

A refused state change is a rejected operation, never a crash.  Nothing has
been mutated when it is raised:

    try:
        service.set_status(project_id, Phase.COMPLETED)
    except PrematureCompletionError as e:
        return {"error": e.code, **e.details()}

Date computations never raise for absent milestones; they treat the rule as
not matching (phase derivation) or the value as infinitely late (ranking).
"""

from __future__ import annotations

from datetime import date


class ProductionKernelError(Exception):
    """
    Base exception for all production kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification, and list their structured attributes in
    `detail_fields`.
    """

    code: str = "PRODUCTION_KERNEL_ERROR"
    detail_fields: tuple[str, ...] = ()

    def details(self) -> dict[str, object]:
        """Structured attributes named by ``detail_fields``, for logs and API errors."""
        return {name: getattr(self, name) for name in self.detail_fields}


# Lifecycle exceptions


class LifecycleError(ProductionKernelError):
    """Base exception for lifecycle state errors."""

    code: str = "LIFECYCLE_ERROR"


class InvalidStateChangeError(LifecycleError):
    """A requested manual phase change was refused; no mutation performed."""

    code: str = "INVALID_STATE_CHANGE"
    detail_fields = ("project_id", "requested_phase", "reason")

    def __init__(self, project_id: str, requested_phase: str, reason: str):
        self.project_id = project_id
        self.requested_phase = requested_phase
        self.reason = reason
        super().__init__(
            f"Cannot set project {project_id} to {requested_phase}: {reason}"
        )


class PrematureCompletionError(InvalidStateChangeError):
    """COMPLETED requested while the ship date is absent or not yet passed."""

    code: str = "PREMATURE_COMPLETION"
    detail_fields = InvalidStateChangeError.detail_fields + ("ship", "today")

    def __init__(
        self,
        project_id: str,
        requested_phase: str,
        ship: date | None,
        today: date,
    ):
        self.ship = ship
        self.today = today
        if ship is None:
            reason = "project has no ship date"
        else:
            reason = (
                f"project can only be marked as completed after the ship "
                f"date ({ship.isoformat()}); today is {today.isoformat()}"
            )
        super().__init__(project_id, requested_phase, reason)


# Lookup exceptions


class ProjectNotFoundError(ProductionKernelError):
    """Project with given ID was not found."""

    code: str = "PROJECT_NOT_FOUND"
    detail_fields = ("project_id",)

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


# Configuration exceptions


class CalendarConfigError(ProductionKernelError):
    """Holiday calendar configuration is malformed."""

    code: str = "CALENDAR_CONFIG_ERROR"
    detail_fields = ("calendar_name", "reason")

    def __init__(self, calendar_name: str, reason: str):
        self.calendar_name = calendar_name
        self.reason = reason
        super().__init__(f"Invalid holiday calendar '{calendar_name}': {reason}")
