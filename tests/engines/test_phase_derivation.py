"""
Tests for the Phase Derivation Engine.

Covers:
- Precedence order of milestone rules
- Boundary (today == milestone)
- Manual override pinning, the COMPLETED guard, and reset
- Collection decoration
"""

import dataclasses
from datetime import date

import pytest

from production_engines.phase import (
    can_complete,
    decorate_phases,
    derive_phase,
    reset_manual_phase,
    set_manual_phase,
)
from production_kernel.domain.project import Phase
from production_kernel.exceptions import (
    InvalidStateChangeError,
    PrematureCompletionError,
)

FULL_SCHEDULE = {
    "fabrication_start": date(2025, 1, 6),
    "assembly_start": date(2025, 2, 3),
    "wrap_graphics": date(2025, 3, 3),
    "ntc_testing": date(2025, 3, 17),
    "qc_start": date(2025, 3, 24),
    "ship": date(2025, 4, 7),
}


class TestDerivePhase:
    """Tests for derive_phase precedence."""

    def test_no_milestones_is_not_started(self, project_factory):
        assert derive_phase(project_factory(), date(2025, 6, 1)) is Phase.NOT_STARTED

    def test_before_fabrication_is_not_started(self, project_factory):
        project = project_factory(**FULL_SCHEDULE)

        assert derive_phase(project, date(2025, 1, 5)) is Phase.NOT_STARTED

    @pytest.mark.parametrize("today, expected", [
        (date(2025, 1, 6), Phase.IN_FAB),
        (date(2025, 2, 3), Phase.IN_ASSEMBLY),
        (date(2025, 3, 3), Phase.IN_WRAP),
        (date(2025, 3, 17), Phase.IN_NTC_TESTING),
        (date(2025, 3, 24), Phase.IN_QC),
        (date(2025, 4, 7), Phase.COMPLETED),
        (date(2026, 1, 1), Phase.COMPLETED),
    ])
    def test_milestone_reached_on_its_date(self, project_factory, today, expected):
        project = project_factory(**FULL_SCHEDULE)

        assert derive_phase(project, today) is expected

    def test_day_before_milestone_keeps_previous_phase(self, project_factory):
        project = project_factory(**FULL_SCHEDULE)

        assert derive_phase(project, date(2025, 3, 23)) is Phase.IN_NTC_TESTING

    def test_absent_dates_fall_through(self, project_factory):
        project = project_factory(fabrication_start=date(2025, 1, 6), qc_start=date(2025, 3, 24))

        assert derive_phase(project, date(2025, 3, 1)) is Phase.IN_FAB
        assert derive_phase(project, date(2025, 3, 24)) is Phase.IN_QC

    def test_later_milestone_wins_even_when_earlier_missing(self, project_factory):
        project = project_factory(ship=date(2025, 4, 7))

        assert derive_phase(project, date(2025, 4, 7)) is Phase.COMPLETED

    def test_scenario_in_assembly(self, scenario_project):
        assert derive_phase(scenario_project, date(2025, 2, 15)) is Phase.IN_ASSEMBLY

    def test_ignores_progress_metrics(self, project_factory):
        a = project_factory(**FULL_SCHEDULE)
        b = dataclasses.replace(a, me_cad_progress=100, ee_design_progress=55)

        assert derive_phase(a, date(2025, 3, 5)) is derive_phase(b, date(2025, 3, 5))

    def test_pinned_project_returns_status(self, pinned_project):
        assert derive_phase(pinned_project, date(2025, 7, 1)) is Phase.IN_WRAP

    def test_pinned_project_ignores_milestone_edits(self, pinned_project):
        edited = dataclasses.replace(pinned_project, ship=date(2025, 1, 2))

        assert derive_phase(edited, date(2025, 7, 1)) is Phase.IN_WRAP

    def test_logs_matched_milestone(self, project_factory, captured_logs):
        project = project_factory(**FULL_SCHEDULE)
        derive_phase(project, date(2025, 3, 5))

        logs = [r for r in captured_logs() if r["message"] == "phase_derived"]
        assert logs[-1]["matched_milestone"] == "wrap_graphics"
        assert logs[-1]["phase"] == "IN WRAP"


class TestSetManualPhase:
    """Tests for pinning a phase."""

    def test_pins_phase(self, scenario_project):
        pinned = set_manual_phase(scenario_project, Phase.IN_WRAP, date(2025, 2, 15))

        assert pinned.manual_status is True
        assert pinned.status is Phase.IN_WRAP
        assert derive_phase(pinned, date(2025, 2, 15)) is Phase.IN_WRAP

    def test_does_not_mutate_input(self, scenario_project):
        set_manual_phase(scenario_project, Phase.IN_WRAP, date(2025, 2, 15))

        assert scenario_project.manual_status is False
        assert scenario_project.status is Phase.NOT_STARTED

    def test_can_pin_earlier_phase(self, scenario_project):
        pinned = set_manual_phase(scenario_project, Phase.NOT_STARTED, date(2025, 3, 1))

        assert derive_phase(pinned, date(2025, 3, 1)) is Phase.NOT_STARTED

    def test_completed_before_ship_rejected(self, scenario_project):
        with pytest.raises(PrematureCompletionError) as exc_info:
            set_manual_phase(scenario_project, Phase.COMPLETED, date(2025, 5, 1))

        err = exc_info.value
        assert err.code == "PREMATURE_COMPLETION"
        assert err.ship == date(2025, 6, 1)
        assert err.today == date(2025, 5, 1)
        assert err.project_id == scenario_project.id
        assert scenario_project.manual_status is False

    def test_completed_on_ship_date_rejected(self, scenario_project):
        with pytest.raises(PrematureCompletionError):
            set_manual_phase(scenario_project, Phase.COMPLETED, date(2025, 6, 1))

    def test_completed_without_ship_rejected(self, project_factory):
        project = project_factory(fabrication_start=date(2025, 1, 1))

        with pytest.raises(InvalidStateChangeError) as exc_info:
            set_manual_phase(project, Phase.COMPLETED, date(2030, 1, 1))

        assert "no ship date" in exc_info.value.reason

    def test_completed_after_ship_accepted(self, scenario_project):
        pinned = set_manual_phase(scenario_project, Phase.COMPLETED, date(2025, 6, 2))

        assert pinned.status is Phase.COMPLETED
        assert pinned.manual_status is True

    def test_can_complete(self, scenario_project, project_factory):
        assert not can_complete(scenario_project, date(2025, 6, 1))
        assert can_complete(scenario_project, date(2025, 6, 2))
        assert not can_complete(project_factory(), date(2025, 6, 2))

    def test_rejection_logged(self, scenario_project, captured_logs):
        with pytest.raises(PrematureCompletionError):
            set_manual_phase(scenario_project, Phase.COMPLETED, date(2025, 5, 1))

        logs = [r for r in captured_logs() if r["message"] == "manual_phase_rejected"]
        assert logs[0]["level"] == "WARNING"
        assert logs[0]["ship"] == "2025-06-01"


class TestResetManualPhase:
    """Tests for clearing the pin."""

    def test_reset_recomputes_on_next_derivation(self, pinned_project):
        reset = reset_manual_phase(pinned_project)

        assert reset.manual_status is False
        assert derive_phase(reset, date(2025, 2, 15)) is Phase.IN_FAB

    def test_reset_of_unpinned_is_noop(self, scenario_project):
        assert reset_manual_phase(scenario_project) == scenario_project


class TestDecoratePhases:
    """Tests for decorating a collection."""

    def test_replaces_status_with_derived(self, scenario_project, pinned_project):
        decorated = decorate_phases([scenario_project, pinned_project], date(2025, 2, 15))

        assert decorated[0].status is Phase.IN_ASSEMBLY
        assert decorated[1] is pinned_project

    def test_preserves_order_and_length(self, project_factory):
        projects = [project_factory(project_number=f"P-{i}") for i in range(5)]

        decorated = decorate_phases(projects, date(2025, 1, 1))

        assert [p.project_number for p in decorated] == [f"P-{i}" for i in range(5)]

    def test_idempotent(self, scenario_project):
        once = decorate_phases([scenario_project], date(2025, 2, 15))
        twice = decorate_phases(once, date(2025, 2, 15))

        assert once == twice

    def test_phase_advances_with_today_alone(self, scenario_project):
        before = decorate_phases([scenario_project], date(2025, 1, 31))[0]
        after = decorate_phases([scenario_project], date(2025, 2, 1))[0]

        assert before.status is Phase.IN_FAB
        assert after.status is Phase.IN_ASSEMBLY
