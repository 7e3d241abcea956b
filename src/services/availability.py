"""
Availability aggregation engine.

Folds classified events and per-day work windows into a Report:
- daily availability (capacity, fungible and task deductions)
- project/task hours and per-project totals
- per-calendar fungible time
- per-day event details

All mutable state lives in an AvailabilityContext created per call, so
repeated or concurrent runs never share colours or totals.
"""

from dataclasses import dataclass, field
from datetime import date

from core.config import PROJECT_COLORS, UNKNOWN_CALENDAR, UNNAMED_EVENT
from core.timeutils import DateRange, as_zone, format_day_label, format_local_clock, resolve_window
from core.validation import MalformedEventError, require_instants, validate_time_config
from models.availability import (
    CalendarCategory,
    CalendarInfo,
    DailyAvailability,
    DailyCapacity,
    DailyDetails,
    DailyEventDetail,
    Event,
    FungibleSummary,
    ProjectSummary,
    ProjectTask,
    Report,
    TimeConfig,
)
from services.classifier import Classification, classify_event, project_task_key

ACTIVE_CATEGORIES = {CalendarCategory.FUNGIBLE, CalendarCategory.TASK}


class ColorAllocator:
    """
    Hands out palette colours in order of first request, wrapping around.

    Names are matched case-insensitively. Not reentrant: one allocator
    belongs to one computation run.
    """

    def __init__(self, palette: list[str] | None = None):
        self.palette = list(palette or PROJECT_COLORS)
        self._assigned: dict[str, str] = {}

    def color_for(self, name: str) -> str:
        key = name.strip().casefold()
        if key not in self._assigned:
            self._assigned[key] = self.palette[len(self._assigned) % len(self.palette)]
        return self._assigned[key]

    @property
    def assigned(self) -> dict[str, str]:
        return dict(self._assigned)


@dataclass
class AvailabilityContext:
    """Working state for a single compute_availability call."""

    config: TimeConfig
    calendars: dict[str, CalendarInfo]
    block_keywords: list[str] | None = None
    colors: ColorAllocator = field(default_factory=ColorAllocator)
    capacity: dict[date, DailyCapacity] = field(default_factory=dict)
    project_tasks: dict[tuple[str, str], ProjectTask] = field(default_factory=dict)
    fungible: dict[str, FungibleSummary] = field(default_factory=dict)
    details: dict[date, list[DailyEventDetail]] = field(default_factory=dict)


def collect_events(
    calendars: list[CalendarInfo], events_by_calendar: dict[str, list[Event]]
) -> list[Event]:
    """
    Flatten per-calendar event lists, keeping only fungible and task calendars.

    Each event is tagged with its calendar's id and category. Calendar order
    is preserved, which fixes colour assignment for a given input.
    """
    relevant = []
    for calendar in calendars:
        category = CalendarCategory(calendar["category"])
        if category not in ACTIVE_CATEGORIES:
            continue
        for event in events_by_calendar.get(calendar["calendar_id"], []):
            relevant.append(
                {**event, "calendar_id": calendar["calendar_id"], "category": category}
            )
    return relevant


def compute_availability(
    config: TimeConfig,
    calendars: list[CalendarInfo],
    events: list[Event],
    block_keywords: list[str] | None = None,
) -> Report:
    """
    Compute the availability report for an already-fetched set of events.

    Raises:
        InvalidRangeError / InvalidConfigError: config fails validation; no report
    """
    validate_time_config(config)
    dates = DateRange.from_config(config)

    ctx = AvailabilityContext(
        config=config,
        calendars={calendar["calendar_id"]: calendar for calendar in calendars},
        block_keywords=block_keywords,
    )
    for day in dates:
        ctx.capacity[day] = DailyCapacity.for_window(resolve_window(day, config).capacity_minutes)
        ctx.details[day] = []

    for event in events:
        _process_event(ctx, event)

    return _build_report(ctx, dates)


def _process_event(ctx: AvailabilityContext, event: Event):
    """Classify one event and fold it into the context."""
    if CalendarCategory(event["category"]) not in ACTIVE_CATEGORIES:
        return
    try:
        start, end = require_instants(event)
    except MalformedEventError:
        # All-day and broken events are out of scope
        return

    tz = as_zone(ctx.config.timezone)
    day = start.astimezone(tz).date()
    if day not in ctx.capacity:
        return

    window = resolve_window(day, ctx.config)
    result = classify_event(event, window, ctx.capacity[day], tz, ctx.block_keywords)

    calendar = ctx.calendars.get(event["calendar_id"])
    calendar_name = calendar["calendar_name"] if calendar else UNKNOWN_CALENDAR

    if event["category"] == CalendarCategory.FUNGIBLE and calendar:
        _add_fungible(ctx, event["calendar_id"], calendar_name, result)
    elif result.impact_type == "task_tracked":
        _add_project_task(ctx, result)

    if result.impact_type != "ignored":
        ctx.details[day].append(
            DailyEventDetail(
                summary=event.get("summary") or UNNAMED_EVENT,
                calendar_name=calendar_name,
                category=CalendarCategory(event["category"]),
                local_start=format_local_clock(start, tz),
                local_end=format_local_clock(end, tz),
                duration_hours=result.duration_minutes / 60,
                impact_type=result.impact_type,
            )
        )


def _add_fungible(ctx: AvailabilityContext, calendar_id: str, calendar_name: str, result: Classification):
    summary = ctx.fungible.get(calendar_id)
    if summary is None:
        summary = FungibleSummary(
            calendar_name=calendar_name,
            total_hours=0.0,
            color=ctx.colors.color_for(calendar_name),
        )
        ctx.fungible[calendar_id] = summary
    # Only time inside the work window counts as fungible
    summary.total_hours += result.overlap_minutes / 60


def _add_project_task(ctx: AvailabilityContext, result: Classification):
    key = project_task_key(result.project, result.task)
    entry = ctx.project_tasks.get(key)
    if entry is None:
        entry = ProjectTask(
            project=result.project,
            task=result.task,
            hours=0.0,
            color=ctx.colors.color_for(result.project),
        )
        ctx.project_tasks[key] = entry
    # Task buckets get the full duration, not just the overlap
    entry.hours += result.duration_minutes / 60


def _build_report(ctx: AvailabilityContext, dates: DateRange) -> Report:
    daily_availability = []
    daily_details = []
    for day in dates:
        capacity = ctx.capacity[day]
        label = format_day_label(day)
        daily_availability.append(
            DailyAvailability(
                date=day,
                label=label,
                available_hours=max(0.0, capacity.available_minutes) / 60,
                total_hours=max(0.0, (capacity.total_minutes - capacity.fungible_minutes) / 60),
                capacity_hours=capacity.total_minutes / 60,
                fungible_hours=capacity.fungible_minutes / 60,
                task_hours=capacity.task_minutes / 60,
            )
        )
        daily_details.append(DailyDetails(date=day, label=label, events=ctx.details[day]))

    project_summaries: dict[str, ProjectSummary] = {}
    for entry in ctx.project_tasks.values():
        key = entry.project.strip().casefold()
        if key not in project_summaries:
            project_summaries[key] = ProjectSummary(
                project=entry.project, total_hours=0.0, color=entry.color
            )
        project_summaries[key].total_hours += entry.hours

    return Report(
        daily_availability=daily_availability,
        project_tasks=sorted(
            ctx.project_tasks.values(),
            key=lambda entry: project_task_key(entry.project, entry.task),
        ),
        project_summaries=sorted(
            project_summaries.values(), key=lambda summary: summary.total_hours, reverse=True
        ),
        fungible_summaries=sorted(
            ctx.fungible.values(), key=lambda summary: summary.total_hours, reverse=True
        ),
        daily_details=daily_details,
    )
