"""
production_services.lifecycle_service -- Project lifecycle orchestration.

Responsibility:
    Fetch raw project records from the persistence collaborator, decorate
    each with its derived phase, durations and timeline, rank and filter
    list views, and apply manual status changes through the collaborator.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Receives the ``ProjectStore`` collaborator, a ``Clock`` and an optional
    ``BusinessCalendar`` via constructor injection.  Holds no project state
    between calls; every read re-derives from source dates.

Invariants enforced:
    - "today" is read once per call from the injected Clock and passed to
      the engines explicitly.
    - Derived phases are returned, never written back to the store.
    - A rejected manual change never reaches the store.

Failure modes:
    - ProjectNotFoundError when the store has no project with the id.
    - PrematureCompletionError from ``set_status`` (COMPLETED guard).

Usage:
    service = ProjectLifecycleService(store, SystemClock(), get_business_calendar())
    views = service.list_projects(
        query="truck",
        ranking=RankingConfig(RankingKey.SHIP, direction=SortDirection.ASC),
    )
    service.set_status(project_id, Phase.IN_QC, actor_id="jdoe")
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

from production_engines.calendar import BusinessCalendar
from production_engines.durations import (
    DurationBand,
    band_duration,
    band_qc_duration,
    ntc_duration,
    qc_duration,
)
from production_engines.phase import (
    decorate_phases,
    reset_manual_phase,
    set_manual_phase,
)
from production_engines.ranking import (
    RankingConfig,
    filter_projects,
    sort_projects,
)
from production_engines.timeline import ProjectTimeline, project_timeline
from production_kernel.domain.clock import Clock
from production_kernel.domain.project import Phase, Project
from production_kernel.exceptions import ProjectNotFoundError
from production_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.lifecycle")


class ProjectStore(Protocol):
    """
    Persistence collaborator.

    Records are camelCase mappings as served by the projects API.
    """

    def list_projects(self) -> Sequence[Mapping[str, Any]]:
        ...

    def get_project(self, project_id: str) -> Mapping[str, Any] | None:
        ...

    def patch_project(self, project_id: str, fields: Mapping[str, Any]) -> Mapping[str, Any]:
        ...

    def reset_status(self, project_id: str) -> Mapping[str, Any]:
        ...


@dataclass(frozen=True)
class ProjectView:
    """A project decorated for display on one refresh cycle."""

    project: Project
    qc_days: int | None
    ntc_days: int | None
    timeline: ProjectTimeline

    @property
    def phase(self) -> Phase:
        return self.project.status

    @property
    def qc_band(self) -> DurationBand | None:
        return band_qc_duration(self.qc_days) if self.qc_days is not None else None

    @property
    def ntc_band(self) -> DurationBand | None:
        return band_duration(self.ntc_days) if self.ntc_days is not None else None

    @property
    def progress(self) -> float:
        return self.timeline.progress


class ProjectLifecycleService:
    """
    Decorates and mutates projects on behalf of the dashboard screens.

    Contract:
        Receives ProjectStore, Clock and BusinessCalendar via constructor
        injection.  Each public call reads today exactly once.
    Non-goals:
        - Does not schedule refreshes; callers decide the cadence (timer,
          change feed or on demand) and simply call again.
    """

    def __init__(
        self,
        store: ProjectStore,
        clock: Clock,
        calendar: BusinessCalendar | None = None,
    ):
        self._store = store
        self._clock = clock
        self._calendar = calendar

    def list_projects(
        self,
        query: str = "",
        ranking: RankingConfig | None = None,
    ) -> list[ProjectView]:
        """Filter, derive phases, then rank every project for display."""
        today = self._clock.today()
        projects = [Project.from_record(r) for r in self._store.list_projects()]
        projects = decorate_phases(filter_projects(projects, query), today)
        if ranking is not None:
            projects = sort_projects(projects, ranking)

        logger.debug("projects_listed", extra={
            "count": len(projects),
            "query": query,
            "today": today.isoformat(),
        })
        return [self._view(p, today) for p in projects]

    def get_project(self, project_id: str) -> ProjectView:
        today = self._clock.today()
        return self._derived_view(self._load(project_id), today)

    def set_status(
        self,
        project_id: str,
        phase: Phase,
        actor_id: str | None = None,
    ) -> ProjectView:
        """
        Pin a project to ``phase`` on behalf of ``actor_id``.

        Raises:
            ProjectNotFoundError: if the project does not exist.
            PrematureCompletionError: if COMPLETED is requested on or before
                the ship date.  The store is not called.
        """
        with LogContext.bind(project_id=project_id, actor_id=actor_id):
            today = self._clock.today()
            project = self._load(project_id)
            pinned = set_manual_phase(project, phase, today)

            record = self._store.patch_project(project_id, {
                "status": pinned.status.value,
                "manualStatus": True,
            })
            logger.info("project_status_pinned", extra={
                "phase": pinned.status.value,
            })
            return self._derived_view(Project.from_record(record), today)

    def reset_status(self, project_id: str, actor_id: str | None = None) -> ProjectView:
        """Clear the manual pin and return the freshly derived view."""
        with LogContext.bind(project_id=project_id, actor_id=actor_id):
            today = self._clock.today()
            self._load(project_id)
            record = self._store.reset_status(project_id)
            project = reset_manual_phase(Project.from_record(record))

            view = self._derived_view(project, today)
            logger.info("project_status_reset", extra={
                "phase": view.phase.value,
            })
            return view

    def _load(self, project_id: str) -> Project:
        record = self._store.get_project(project_id)
        if record is None:
            raise ProjectNotFoundError(project_id)
        return Project.from_record(record)

    def _derived_view(self, project: Project, today: date) -> ProjectView:
        [decorated] = decorate_phases([project], today)
        return self._view(decorated, today)

    def _view(self, project: Project, today: date) -> ProjectView:
        """Build the view of a project whose status is already derived."""
        return ProjectView(
            project=project,
            qc_days=qc_duration(project, self._calendar),
            ntc_days=ntc_duration(project, self._calendar),
            timeline=project_timeline(project, today),
        )
