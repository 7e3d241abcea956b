"""
Category-driven event classification.

Fungible events reduce the day's available time. Task events are parsed into
project/task buckets and also reduce available time unless their summary
contains a blocking keyword.
"""

from dataclasses import dataclass
from zoneinfo import ZoneInfo

from core.config import BLOCK_KEYWORDS, UNASSIGNED_PROJECT, UNNAMED_TASK
from core.timeutils import WorkWindow, as_zone, overlap_minutes
from core.validation import require_instants
from models.availability import CalendarCategory, DailyCapacity, Event, ImpactType


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a single event against its day."""

    impact_type: ImpactType
    overlap_minutes: int
    duration_minutes: float
    project: str | None = None
    task: str | None = None


def parse_project_task(summary: str | None) -> tuple[str, str]:
    """
    Split 'Project: Task' on the first colon.

    Without a colon the whole summary is the project and also the task.
    """
    if not summary or not summary.strip():
        return UNASSIGNED_PROJECT, UNNAMED_TASK
    if ":" in summary:
        project, _, task = summary.partition(":")
        return project.strip(), task.strip()
    return summary.strip(), summary.strip()


def project_task_key(project: str, task: str) -> tuple[str, str]:
    """Case-insensitive grouping key for a project/task pair."""
    return project.strip().casefold(), task.strip().casefold()


def is_blocked(summary: str | None, keywords: list[str] | None = None) -> bool:
    """Check if a task summary contains a blocking keyword."""
    keywords = BLOCK_KEYWORDS if keywords is None else keywords
    text = (summary or "").lower()
    return any(keyword.lower() in text for keyword in keywords)


def classify_event(
    event: Event,
    window: WorkWindow,
    capacity: DailyCapacity,
    tz: str | ZoneInfo,
    block_keywords: list[str] | None = None,
) -> Classification:
    """
    Classify an event and apply its effect to the day's capacity.

    The day is the event's local start date. Raises MalformedEventError when
    the event has no start/end instants.
    """
    start, end = require_instants(event)
    duration = (end - start).total_seconds() / 60
    day = start.astimezone(as_zone(tz)).date()
    overlap = overlap_minutes(start, end, window.start, window.end, day, tz)
    category = CalendarCategory(event["category"])

    if category == CalendarCategory.FUNGIBLE:
        if overlap > 0:
            capacity.apply_fungible(overlap)
            return Classification("reduces_available", overlap, duration)
        return Classification("ignored", overlap, duration)

    if category == CalendarCategory.TASK:
        if is_blocked(event.get("summary"), block_keywords):
            return Classification("ignored", overlap, duration)
        if overlap > 0:
            capacity.apply_task(overlap)
        project, task = parse_project_task(event.get("summary"))
        return Classification("task_tracked", overlap, duration, project, task)

    # Inactive calendars are filtered before classification
    return Classification("ignored", 0, duration)
