"""
Data models for calendar availability computation.

Input records (calendars, events) are TypedDicts so that collaborators can hand
over plain dictionaries. Everything the engine derives is a dataclass.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Literal, TypedDict


class CalendarCategory(str, Enum):
    """How a calendar's events are treated by the engine."""

    INACTIVE = "inactive"
    FUNGIBLE = "fungible"
    TASK = "task"


ImpactType = Literal["reduces_available", "task_tracked", "ignored"]


class CalendarInfo(TypedDict):
    """Calendar with its user-assigned category."""
    calendar_id: str
    calendar_name: str
    category: CalendarCategory


class Event(TypedDict):
    """Calendar event with concrete start/end instants (None when all-day)."""
    summary: str
    start: datetime | None
    end: datetime | None
    calendar_id: str
    category: CalendarCategory


@dataclass(frozen=True)
class TimeConfig:
    """Date range, work windows and buffer used for one computation."""

    start_date: date
    end_date: date
    weekday_start: time
    weekday_end: time
    weekend_start: time
    weekend_end: time
    timezone: str
    buffer_factor: float


@dataclass
class DailyCapacity:
    """Per-day minutes. available_minutes only ever decreases and never drops below 0."""

    total_minutes: float
    available_minutes: float
    fungible_minutes: int = 0
    task_minutes: int = 0

    @classmethod
    def for_window(cls, capacity_minutes: float) -> "DailyCapacity":
        return cls(total_minutes=capacity_minutes, available_minutes=capacity_minutes)

    def apply_fungible(self, minutes: int):
        self.fungible_minutes += minutes
        self._deduct(minutes)

    def apply_task(self, minutes: int):
        self.task_minutes += minutes
        self._deduct(minutes)

    def _deduct(self, minutes: int):
        self.available_minutes = max(0.0, self.available_minutes - minutes)


# =============================================================================
# REPORT ROWS
# =============================================================================


@dataclass
class DailyAvailability:
    date: date
    label: str
    available_hours: float
    # Chart baseline: capacity after fungible deductions only
    total_hours: float
    capacity_hours: float
    fungible_hours: float
    task_hours: float


@dataclass
class ProjectTask:
    project: str
    task: str
    hours: float
    color: str


@dataclass
class ProjectSummary:
    project: str
    total_hours: float
    color: str


@dataclass
class FungibleSummary:
    calendar_name: str
    total_hours: float
    color: str


@dataclass
class DailyEventDetail:
    summary: str
    calendar_name: str
    category: CalendarCategory
    local_start: str
    local_end: str
    duration_hours: float
    impact_type: ImpactType


@dataclass
class DailyDetails:
    date: date
    label: str
    events: list[DailyEventDetail] = field(default_factory=list)


@dataclass
class Report:
    """Result of one availability computation."""

    daily_availability: list[DailyAvailability]
    project_tasks: list[ProjectTask]
    project_summaries: list[ProjectSummary]
    fungible_summaries: list[FungibleSummary]
    daily_details: list[DailyDetails]

    def to_dict(self) -> dict:
        """Plain JSON-ready representation (ISO dates, enum values)."""
        return _jsonable(asdict(self))


def _jsonable(value):
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value
