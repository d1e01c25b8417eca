"""
Tests for holiday calendar configuration.

Covers:
- Loading the bundled calendar
- Parsing bare-date and named entries
- Validation failures (wrong year, duplicates)
- Missing calendars
"""

from datetime import date
from pathlib import Path

import pytest

from production_config import (
    build_business_calendar,
    get_business_calendar,
    load_calendar_definition,
)
from production_config.loader import parse_calendar, parse_date
from production_config.validator import validate_calendar
from production_engines.durations import working_days
from production_kernel.exceptions import CalendarConfigError


def _write(tmp_path: Path, name: str, body: str) -> Path:
    path = tmp_path / f"{name}.yaml"
    path.write_text(body)
    return tmp_path


class TestBundledCalendar:

    def test_loads_us_federal(self):
        calendar = get_business_calendar()

        assert calendar.name == "us_federal"
        assert calendar.holidays.years == (2024, 2025, 2026)

    def test_known_holidays(self):
        calendar = get_business_calendar("us_federal")

        assert not calendar.is_business_day(date(2025, 7, 4))
        assert not calendar.is_business_day(date(2025, 11, 27))
        assert not calendar.is_business_day(date(2026, 7, 3))
        assert calendar.is_business_day(date(2025, 3, 3))

    def test_holiday_week_duration(self):
        calendar = get_business_calendar()

        # Thanksgiving week 2025
        assert working_days(date(2025, 11, 24), date(2025, 11, 28), calendar) == 4

    def test_emits_config_trace(self, captured_logs):
        get_business_calendar()

        traces = [r for r in captured_logs() if r["message"] == "PRODUCTION_CONFIG_TRACE"]
        assert traces[-1]["calendar_name"] == "us_federal"
        assert traces[-1]["holiday_count"] == 33


class TestParsing:

    def test_parse_date_forms(self):
        assert parse_date("2025-01-01") == date(2025, 1, 1)
        assert parse_date(date(2025, 1, 1)) == date(2025, 1, 1)
        with pytest.raises(ValueError):
            parse_date(20250101)

    def test_bare_and_named_entries(self):
        definition = parse_calendar({
            "name": "shop",
            "years": {
                "2025": ["2025-12-24", {"date": "2025-12-26", "name": "Boxing Day"}],
            },
        })

        holidays = definition.holidays_for(2025)
        assert [h.date for h in holidays] == [date(2025, 12, 24), date(2025, 12, 26)]
        assert holidays[1].name == "Boxing Day"

    def test_custom_directory(self, tmp_path):
        config_dir = _write(tmp_path, "plant_b", (
            "name: plant_b\n"
            "years:\n"
            "  2025:\n"
            "    - date: 2025-08-15\n"
            "      name: Plant shutdown\n"
        ))

        calendar = get_business_calendar("plant_b", config_dir=config_dir)

        assert not calendar.is_business_day(date(2025, 8, 15))
        assert calendar.is_business_day(date(2025, 7, 4))

    def test_empty_years_means_weekends_only(self, tmp_path):
        config_dir = _write(tmp_path, "empty", "name: empty\n")

        calendar = get_business_calendar("empty", config_dir=config_dir)

        assert len(calendar.holidays) == 0
        assert calendar.is_business_day(date(2025, 12, 25))


class TestValidation:

    def test_wrong_year_rejected(self, tmp_path):
        config_dir = _write(tmp_path, "bad", (
            "name: bad\n"
            "years:\n"
            "  2025:\n"
            "    - 2026-01-01\n"
        ))

        with pytest.raises(CalendarConfigError) as exc_info:
            load_calendar_definition("bad", config_dir)

        assert exc_info.value.code == "CALENDAR_CONFIG_ERROR"
        assert "listed under 2025" in exc_info.value.reason

    def test_duplicate_rejected(self):
        definition = parse_calendar({
            "name": "dup",
            "years": {2025: ["2025-01-01", "2025-01-01"]},
        })

        result = validate_calendar(definition)

        assert not result.is_valid
        assert "twice" in result.errors[0]

    def test_weekend_holiday_is_warning(self):
        definition = parse_calendar({
            "name": "weekend",
            "years": {2026: ["2026-07-04"]},
        })

        result = validate_calendar(definition)

        assert result.is_valid
        assert result.warnings

    def test_missing_calendar(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_business_calendar("nope", config_dir=tmp_path)

    def test_build_from_definition(self):
        definition = parse_calendar({"name": "x", "years": {2025: ["2025-01-01"]}})

        calendar = build_business_calendar(definition)

        assert calendar.is_holiday(date(2025, 1, 1))
