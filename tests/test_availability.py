"""
Tests for the availability aggregation engine.
"""

from dataclasses import replace
from datetime import date, datetime, time, timezone

import pytest

from core.config import PROJECT_COLORS
from core.validation import InvalidRangeError
from models.availability import CalendarCategory
from services.availability import ColorAllocator, collect_events, compute_availability

MONDAY = date(2025, 11, 3)
TUESDAY = date(2025, 11, 4)
SATURDAY = date(2025, 11, 8)


def day_row(report, day):
    return next(row for row in report.daily_availability if row.date == day)


def details_for(report, day):
    return next(row for row in report.daily_details if row.date == day).events


class TestScenarios:
    def test_no_events_gives_buffered_capacity(self, time_config, calendars):
        report = compute_availability(time_config, calendars, [])
        monday = day_row(report, MONDAY)
        assert monday.available_hours == pytest.approx(6.4)
        assert monday.total_hours == pytest.approx(6.4)
        assert monday.capacity_hours == pytest.approx(6.4)
        assert report.project_tasks == []
        assert report.fungible_summaries == []

    def test_fungible_event_reduces_band(self, time_config, calendars, make_event):
        events = [make_event("Standup", MONDAY, time(10), time(11), "cal-meetings", CalendarCategory.FUNGIBLE)]
        report = compute_availability(time_config, calendars, events)
        monday = day_row(report, MONDAY)
        assert monday.fungible_hours == pytest.approx(1.0)
        assert monday.available_hours == pytest.approx(5.4)
        assert monday.total_hours == pytest.approx(5.4)

        assert len(report.fungible_summaries) == 1
        summary = report.fungible_summaries[0]
        assert summary.calendar_name == "Meetings"
        assert summary.total_hours == pytest.approx(1.0)

        [detail] = details_for(report, MONDAY)
        assert detail.impact_type == "reduces_available"
        assert detail.local_start == "10:00 AM"
        assert detail.calendar_name == "Meetings"

    def test_task_event_tracked_by_project(self, time_config, calendars, make_event):
        events = [make_event("Acme: Draft proposal", MONDAY, time(13), time(15))]
        report = compute_availability(time_config, calendars, events)

        [entry] = report.project_tasks
        assert (entry.project, entry.task) == ("Acme", "Draft proposal")
        assert entry.hours == pytest.approx(2.0)

        monday = day_row(report, MONDAY)
        assert monday.task_hours == pytest.approx(2.0)
        assert monday.available_hours == pytest.approx(4.4)
        # Task time consumes inside the band, it does not shrink it
        assert monday.total_hours == pytest.approx(6.4)

        [summary] = report.project_summaries
        assert summary.project == "Acme"
        assert summary.total_hours == pytest.approx(2.0)

    def test_blocking_keyword_ignored(self, time_config, calendars, make_event):
        events = [make_event("Block", MONDAY, time(10), time(12))]
        report = compute_availability(time_config, calendars, events)
        monday = day_row(report, MONDAY)
        assert monday.available_hours == pytest.approx(6.4)
        assert report.project_tasks == []
        assert details_for(report, MONDAY) == []

    def test_weekend_uses_weekend_window(self, time_config, calendars, make_event):
        events = [make_event("Acme: Weekend push", SATURDAY, time(9), time(11))]
        report = compute_availability(time_config, calendars, events)
        saturday = day_row(report, SATURDAY)
        # Weekend window 10:00-12:00 with 0.8 buffer
        assert saturday.capacity_hours == pytest.approx(1.6)
        assert saturday.task_hours == pytest.approx(1.0)
        assert saturday.available_hours == pytest.approx(0.6)
        assert day_row(report, MONDAY).capacity_hours == pytest.approx(6.4)


class TestAggregation:
    def test_one_row_per_day(self, time_config, calendars):
        report = compute_availability(time_config, calendars, [])
        assert [row.date for row in report.daily_availability] == [
            date(2025, 11, d) for d in range(3, 10)
        ]
        assert [row.label for row in report.daily_details][:2] == ["Mon, 11/3", "Tue, 11/4"]

    def test_task_buckets_use_full_duration(self, time_config, calendars, make_event):
        events = [make_event("Acme: Draft", MONDAY, time(16), time(19))]
        report = compute_availability(time_config, calendars, events)
        assert report.project_tasks[0].hours == pytest.approx(3.0)
        assert day_row(report, MONDAY).task_hours == pytest.approx(1.0)

    def test_fungible_summary_counts_overlap_only(self, time_config, calendars, make_event):
        events = [make_event("Offsite", MONDAY, time(16), time(19), "cal-meetings", CalendarCategory.FUNGIBLE)]
        report = compute_availability(time_config, calendars, events)
        assert report.fungible_summaries[0].total_hours == pytest.approx(1.0)

    def test_fungible_summary_created_without_overlap(self, time_config, calendars, make_event):
        events = [make_event("Dinner", MONDAY, time(19), time(20), "cal-meetings", CalendarCategory.FUNGIBLE)]
        report = compute_availability(time_config, calendars, events)
        assert report.fungible_summaries[0].total_hours == 0
        assert details_for(report, MONDAY) == []

    def test_grouping_is_case_insensitive(self, time_config, calendars, make_event):
        events = [
            make_event("Acme: Draft", MONDAY, time(9), time(10)),
            make_event("acme : draft ", TUESDAY, time(9), time(11)),
        ]
        report = compute_availability(time_config, calendars, events)
        [entry] = report.project_tasks
        assert (entry.project, entry.task) == ("Acme", "Draft")
        assert entry.hours == pytest.approx(3.0)

    def test_sorting(self, time_config, calendars, make_event):
        events = [
            make_event("Zeta: Build", MONDAY, time(9), time(10)),
            make_event("Acme: Review", MONDAY, time(10), time(11)),
            make_event("Acme: Draft", MONDAY, time(11), time(12)),
            make_event("Zeta: Ship", TUESDAY, time(9), time(13)),
        ]
        report = compute_availability(time_config, calendars, events)
        assert [(pt.project, pt.task) for pt in report.project_tasks] == [
            ("Acme", "Draft"), ("Acme", "Review"), ("Zeta", "Build"), ("Zeta", "Ship"),
        ]
        assert [ps.project for ps in report.project_summaries] == ["Zeta", "Acme"]
        assert report.project_summaries[0].total_hours == pytest.approx(5.0)

    def test_fungible_sorted_by_hours(self, time_config, make_event):
        calendars = [
            {"calendar_id": "a", "calendar_name": "Commute", "category": CalendarCategory.FUNGIBLE},
            {"calendar_id": "b", "calendar_name": "Meetings", "category": CalendarCategory.FUNGIBLE},
        ]
        events = [
            make_event("Drive", MONDAY, time(9), time(10), "a", CalendarCategory.FUNGIBLE),
            make_event("Sync", MONDAY, time(10), time(13), "b", CalendarCategory.FUNGIBLE),
        ]
        report = compute_availability(time_config, calendars, events)
        assert [fs.calendar_name for fs in report.fungible_summaries] == ["Meetings", "Commute"]

    def test_all_day_events_skipped(self, time_config, calendars):
        events = [
            {
                "summary": "Acme: Conference",
                "start": None,
                "end": None,
                "calendar_id": "cal-work",
                "category": CalendarCategory.TASK,
            }
        ]
        report = compute_availability(time_config, calendars, events)
        assert report.project_tasks == []

    def test_reversed_events_skipped(self, time_config, calendars, make_event):
        events = [
            make_event("Acme: Draft proposal", MONDAY, time(13), time(15)),
            make_event("Acme: Draft proposal", MONDAY, time(16), time(14)),
        ]
        report = compute_availability(time_config, calendars, events)
        assert [pt.hours for pt in report.project_tasks] == [2.0]
        assert day_row(report, MONDAY).available_hours == pytest.approx(4.4)
        assert len(details_for(report, MONDAY)) == 1

    def test_events_outside_range_skipped(self, time_config, calendars, make_event):
        events = [make_event("Acme: Early", date(2025, 11, 2), time(10), time(11))]
        report = compute_availability(time_config, calendars, events)
        assert report.project_tasks == []

    def test_local_date_decides_the_day(self, time_config, calendars):
        # 2025-11-04 01:00 UTC is Monday 20:00 in New York
        events = [
            {
                "summary": "Acme: Late call",
                "start": datetime(2025, 11, 4, 1, 0, tzinfo=timezone.utc),
                "end": datetime(2025, 11, 4, 2, 0, tzinfo=timezone.utc),
                "calendar_id": "cal-work",
                "category": CalendarCategory.TASK,
            }
        ]
        report = compute_availability(time_config, calendars, events)
        assert len(details_for(report, MONDAY)) == 1
        assert details_for(report, TUESDAY) == []

    def test_inactive_events_excluded(self, time_config, calendars, make_event):
        events = [make_event("Party", MONDAY, time(10), time(11), "cal-birthdays", CalendarCategory.INACTIVE)]
        report = compute_availability(time_config, calendars, events)
        assert day_row(report, MONDAY).available_hours == pytest.approx(6.4)

    def test_unknown_calendar_label(self, time_config, calendars, make_event):
        events = [make_event("Acme: Draft", MONDAY, time(9), time(10), "cal-gone")]
        report = compute_availability(time_config, calendars, events)
        assert details_for(report, MONDAY)[0].calendar_name == "Unknown Calendar"

    def test_unnamed_event(self, time_config, calendars, make_event):
        events = [make_event("", MONDAY, time(9), time(10))]
        report = compute_availability(time_config, calendars, events)
        assert details_for(report, MONDAY)[0].summary == "Unnamed Event"
        assert (report.project_tasks[0].project, report.project_tasks[0].task) == ("Unassigned", "Unnamed Task")

    def test_custom_block_keywords(self, time_config, calendars, make_event):
        events = [make_event("Acme: Hold for travel", MONDAY, time(9), time(10))]
        report = compute_availability(time_config, calendars, events, block_keywords=["hold"])
        assert report.project_tasks == []

    def test_invalid_window_rejected(self, time_config, calendars):
        config = replace(time_config, weekday_start=time(17), weekday_end=time(9))
        with pytest.raises(InvalidRangeError):
            compute_availability(config, calendars, [])

    def test_invalid_date_range_rejected(self, time_config, calendars):
        config = replace(time_config, end_date=date(2025, 11, 1))
        with pytest.raises(InvalidRangeError):
            compute_availability(config, calendars, [])


class TestProperties:
    @pytest.fixture
    def busy_events(self, make_event):
        return [
            make_event("Standup", MONDAY, time(9), time(12), "cal-meetings", CalendarCategory.FUNGIBLE),
            make_event("Acme: Draft", MONDAY, time(11), time(18)),
            make_event("Zeta: Build", TUESDAY, time(10), time(12)),
            make_event("All hands", TUESDAY, time(13), time(14), "cal-meetings", CalendarCategory.FUNGIBLE),
            make_event("Block", TUESDAY, time(14), time(16)),
            make_event("Acme: Weekend", SATURDAY, time(10), time(11)),
        ]

    def test_available_within_bounds(self, time_config, calendars, busy_events):
        report = compute_availability(time_config, calendars, busy_events)
        for row in report.daily_availability:
            assert 0 <= row.available_hours <= row.capacity_hours
            assert 0 <= row.total_hours <= row.capacity_hours

    def test_deductions_not_double_counted(self, time_config, calendars, busy_events):
        report = compute_availability(time_config, calendars, busy_events)
        for row in report.daily_availability:
            expected = max(0.0, row.capacity_hours - row.fungible_hours - row.task_hours)
            assert row.available_hours == pytest.approx(expected)

    def test_idempotent(self, time_config, calendars, busy_events):
        first = compute_availability(time_config, calendars, busy_events)
        second = compute_availability(time_config, calendars, busy_events)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_inputs_not_mutated(self, time_config, calendars, busy_events):
        snapshot = [dict(event) for event in busy_events]
        compute_availability(time_config, calendars, busy_events)
        assert busy_events == snapshot


class TestColors:
    def test_allocation_in_first_seen_order(self):
        colors = ColorAllocator()
        assert colors.color_for("Acme") == PROJECT_COLORS[0]
        assert colors.color_for("Zeta") == PROJECT_COLORS[1]
        assert colors.color_for("acme") == PROJECT_COLORS[0]

    def test_palette_wraps(self):
        colors = ColorAllocator(["#111111", "#222222"])
        assert [colors.color_for(name) for name in "abc"] == ["#111111", "#222222", "#111111"]

    def test_projects_and_calendars_share_palette(self, time_config, calendars, make_event):
        events = [
            make_event("Standup", MONDAY, time(9), time(10), "cal-meetings", CalendarCategory.FUNGIBLE),
            make_event("Acme: Draft", MONDAY, time(10), time(11)),
        ]
        report = compute_availability(time_config, calendars, events)
        assert report.fungible_summaries[0].color == PROJECT_COLORS[0]
        assert report.project_tasks[0].color == PROJECT_COLORS[1]
        assert report.project_summaries[0].color == PROJECT_COLORS[1]

    def test_colors_reset_between_runs(self, time_config, calendars, make_event):
        first = compute_availability(time_config, calendars, [make_event("Acme: A", MONDAY, time(9), time(10))])
        second = compute_availability(time_config, calendars, [make_event("Zeta: B", MONDAY, time(9), time(10))])
        assert first.project_tasks[0].color == second.project_tasks[0].color == PROJECT_COLORS[0]


class TestCollectEvents:
    def test_filters_inactive_and_tags_events(self, calendars):
        start = datetime(2025, 11, 3, 15, tzinfo=timezone.utc)
        end = datetime(2025, 11, 3, 16, tzinfo=timezone.utc)
        events_by_calendar = {
            "cal-meetings": [{"summary": "Standup", "start": start, "end": end}],
            "cal-work": [{"summary": "Acme: Draft", "start": start, "end": end}],
            "cal-birthdays": [{"summary": "Party", "start": start, "end": end}],
        }
        events = collect_events(calendars, events_by_calendar)
        assert [e["summary"] for e in events] == ["Standup", "Acme: Draft"]
        assert events[0]["category"] == CalendarCategory.FUNGIBLE
        assert events[1]["calendar_id"] == "cal-work"

    def test_missing_calendar_lists(self, calendars):
        assert collect_events(calendars, {}) == []
