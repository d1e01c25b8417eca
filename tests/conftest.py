"""
Pytest fixtures for the production lifecycle test suite.

Provides:
- Structured logging capture
- Project factories and a deterministic clock
- An in-memory stand-in for the persistence collaborator
"""

import copy
import json
import logging
from collections.abc import Mapping
from datetime import date, datetime, timezone
from io import StringIO
from typing import Any
from uuid import uuid4

import pytest

from production_engines.calendar import BusinessCalendar, HolidaySet
from production_kernel.domain.clock import DeterministicClock
from production_kernel.domain.project import Phase, Project
from production_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# ---------------------------------------------------------------------------
# Logging fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture production_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            set_manual_phase(project, Phase.IN_QC, today)
            logs = captured_logs()
            assert any(r["message"] == "manual_phase_set" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("production_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


def make_project(**overrides: Any) -> Project:
    """Build a Project with a fresh id; any field may be overridden."""
    fields: dict[str, Any] = {
        "id": str(uuid4()),
        "project_number": "P-1000",
        "name": "Mobile Command Unit",
        "location": "Bay 1",
    }
    fields.update(overrides)
    return Project(**fields)


@pytest.fixture
def project_factory():
    return make_project


@pytest.fixture
def scenario_project() -> Project:
    """Fab Jan 1, assembly Feb 1, ship Jun 1 2025."""
    return make_project(
        fabrication_start=date(2025, 1, 1),
        assembly_start=date(2025, 2, 1),
        ship=date(2025, 6, 1),
    )


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2025, 2, 15, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def holiday_calendar() -> BusinessCalendar:
    """Weekends plus Independence Day and Labor Day 2025."""
    return BusinessCalendar(
        HolidaySet.from_dates([date(2025, 7, 4), date(2025, 9, 1)]),
        name="test",
    )


# ---------------------------------------------------------------------------
# Persistence collaborator double
# ---------------------------------------------------------------------------


class InMemoryProjectStore:
    """Stores camelCase project records the way the projects API serves them."""

    def __init__(self, records: list[Mapping[str, Any]] | None = None):
        self._records: dict[str, dict[str, Any]] = {}
        self.patch_calls: list[tuple[str, dict[str, Any]]] = []
        self.reset_calls: list[str] = []
        for record in records or ():
            self._records[record["id"]] = dict(record)

    def add(self, project: Project) -> None:
        self._records[project.id] = project.to_record()

    def list_projects(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(r) for r in self._records.values()]

    def get_project(self, project_id: str) -> dict[str, Any] | None:
        record = self._records.get(project_id)
        return copy.deepcopy(record) if record is not None else None

    def patch_project(self, project_id: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        self.patch_calls.append((project_id, dict(fields)))
        self._records[project_id].update(fields)
        return copy.deepcopy(self._records[project_id])

    def reset_status(self, project_id: str) -> dict[str, Any]:
        self.reset_calls.append(project_id)
        self._records[project_id]["manualStatus"] = False
        return copy.deepcopy(self._records[project_id])

    def raw(self, project_id: str) -> dict[str, Any]:
        return self._records[project_id]


@pytest.fixture
def store() -> InMemoryProjectStore:
    return InMemoryProjectStore()


@pytest.fixture
def pinned_project() -> Project:
    return make_project(
        fabrication_start=date(2025, 1, 1),
        ship=date(2025, 6, 1),
        manual_status=True,
        status=Phase.IN_WRAP,
    )
