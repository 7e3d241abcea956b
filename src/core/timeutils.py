"""
Timezone-aware date sequencing, work-window resolution and overlap calculation.

Dates are always handled as civil dates in the configured timezone. Instants
are only converted to local wall-clock time through zoneinfo, so DST
transitions never skip or repeat a day.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import Iterator
from zoneinfo import ZoneInfo

from core.validation import InvalidRangeError, clock_minutes
from models.availability import TimeConfig


def as_zone(tz: str | ZoneInfo) -> ZoneInfo:
    return tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)


# =============================================================================
# DATE SEQUENCER
# =============================================================================


class DateRange:
    """
    Inclusive range of civil dates in a timezone.

    Iterating yields one date per calendar day. Each iteration starts over,
    so the same range can be walked any number of times.
    """

    def __init__(self, start: date, end: date, tz: str | ZoneInfo):
        if end < start:
            raise InvalidRangeError(f"End date {end} is before start date {start}.")
        self.start = start
        self.end = end
        self.tz = as_zone(tz)

    @classmethod
    def from_config(cls, config: TimeConfig) -> "DateRange":
        return cls(config.start_date, config.end_date, config.timezone)

    def __iter__(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    def fetch_window(self) -> tuple[datetime, datetime]:
        """
        UTC instants covering local midnight of the first day through local
        midnight after the last day.
        """
        time_min = datetime.combine(self.start, time.min, tzinfo=self.tz)
        time_max = datetime.combine(self.end + timedelta(days=1), time.min, tzinfo=self.tz)
        return time_min.astimezone(dt_timezone.utc), time_max.astimezone(dt_timezone.utc)


# =============================================================================
# WORK WINDOW RESOLVER
# =============================================================================


@dataclass(frozen=True)
class WorkWindow:
    """Nominal work window for a day plus the buffer applied to its capacity."""

    start: time
    end: time
    buffer_factor: float

    @property
    def nominal_minutes(self) -> int:
        return clock_minutes(self.end) - clock_minutes(self.start)

    @property
    def capacity_minutes(self) -> float:
        return max(0.0, self.nominal_minutes * self.buffer_factor)


def is_weekend(day: date) -> bool:
    """Saturday or Sunday."""
    return day.weekday() >= 5


def resolve_window(day: date, config: TimeConfig) -> WorkWindow:
    """Pick the weekend or weekday window for a civil date."""
    if is_weekend(day):
        return WorkWindow(config.weekend_start, config.weekend_end, config.buffer_factor)
    return WorkWindow(config.weekday_start, config.weekday_end, config.buffer_factor)


# =============================================================================
# OVERLAP CALCULATOR
# =============================================================================


def overlap_minutes(
    event_start: datetime,
    event_end: datetime,
    window_start: time,
    window_end: time,
    day: date,
    tz: str | ZoneInfo,
) -> int:
    """
    Minutes of an event's local time range that fall inside the day's work window.

    Only events whose local start falls on `day` are credited. Both ends are
    compared as local clock times, so an event that runs past local midnight
    ends "early" on the clock and usually gets nothing.
    """
    zone = as_zone(tz)
    local_start = event_start.astimezone(zone)
    local_end = event_end.astimezone(zone)
    if local_start.date() != day:
        return 0

    start_clock = clock_minutes(local_start.time())
    end_clock = clock_minutes(local_end.time())
    overlap = min(end_clock, clock_minutes(window_end)) - max(start_clock, clock_minutes(window_start))
    return max(0, overlap)


# =============================================================================
# DISPLAY FORMATTING
# =============================================================================


def format_day_label(day: date) -> str:
    """Short chart label, e.g. 'Mon, 11/3'."""
    return f"{day.strftime('%a')}, {day.month}/{day.day}"


def format_local_clock(instant: datetime, tz: str | ZoneInfo) -> str:
    """Local clock time without zero-padded hour, e.g. '9:05 AM'."""
    local = instant.astimezone(as_zone(tz))
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"
