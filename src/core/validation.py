"""
Configuration validation and the errors raised by availability computation.
"""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.config import (
    DEFAULT_RANGE_DAYS,
    DEFAULT_TIME_BUFFER_FACTOR,
    DEFAULT_TIMEZONE,
    DEFAULT_WEEKDAY_END,
    DEFAULT_WEEKDAY_START,
    DEFAULT_WEEKEND_END,
    DEFAULT_WEEKEND_START,
)
from models.availability import Event, TimeConfig


# =============================================================================
# ERRORS
# =============================================================================


class AvailabilityError(Exception):
    """Base class for availability computation errors."""


class InvalidConfigError(AvailabilityError, ValueError):
    """Configuration record is missing fields or has unusable values."""


class InvalidRangeError(InvalidConfigError):
    """End date before start date, or a work window whose end is not after its start."""


class MalformedEventError(AvailabilityError):
    """Event lacks precise start/end instants (all-day or broken)."""


# =============================================================================
# PARSING
# =============================================================================

# Accepted keys for each TimeConfig field: stored camelCase record shape first
CONFIG_FIELDS = {
    "start_date": ("startDate", "start_date"),
    "end_date": ("endDate", "end_date"),
    "weekday_start": ("weekdayStartTime", "weekday_start"),
    "weekday_end": ("weekdayEndTime", "weekday_end"),
    "weekend_start": ("weekendStartTime", "weekend_start"),
    "weekend_end": ("weekendEndTime", "weekend_end"),
    "timezone": ("timezone",),
    "buffer_factor": ("timeBufferFactor", "buffer_factor"),
}


def parse_clock(value: str | time) -> time:
    """Parse an 'HH:MM' clock string."""
    if isinstance(value, time):
        return value
    try:
        hours, minutes = (int(part) for part in str(value).strip().split(":"))
        return time(hours, minutes)
    except ValueError:
        raise InvalidConfigError(f"Invalid clock time '{value}', expected HH:MM")


def parse_date(value: str | date) -> date:
    """Parse a 'YYYY-MM-DD' date string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidConfigError(f"Invalid date '{value}', expected YYYY-MM-DD")


def parse_time_config(data: dict) -> TimeConfig:
    """
    Build a TimeConfig from a config record.

    Accepts camelCase or snake_case keys. A missing buffer factor falls back
    to the default so that older records without it still load.
    """
    values = {}
    missing = []
    for name, keys in CONFIG_FIELDS.items():
        raw = next((data[key] for key in keys if data.get(key) not in (None, "")), None)
        if raw is None:
            if name == "buffer_factor":
                raw = DEFAULT_TIME_BUFFER_FACTOR
            else:
                missing.append(keys[0])
                continue
        values[name] = raw

    if missing:
        raise InvalidConfigError(f"Missing config fields: {', '.join(missing)}")

    try:
        buffer_factor = float(values["buffer_factor"])
    except (TypeError, ValueError):
        raise InvalidConfigError(f"Invalid buffer factor '{values['buffer_factor']}'")

    return TimeConfig(
        start_date=parse_date(values["start_date"]),
        end_date=parse_date(values["end_date"]),
        weekday_start=parse_clock(values["weekday_start"]),
        weekday_end=parse_clock(values["weekday_end"]),
        weekend_start=parse_clock(values["weekend_start"]),
        weekend_end=parse_clock(values["weekend_end"]),
        timezone=str(values["timezone"]).strip(),
        buffer_factor=buffer_factor,
    )


def default_time_config(today: date | None = None, timezone: str | None = None) -> TimeConfig:
    """Default config: today through DEFAULT_RANGE_DAYS days later in the given timezone."""
    timezone = timezone or DEFAULT_TIMEZONE
    try:
        zone = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidConfigError(f"Unknown timezone '{timezone}'.")
    if today is None:
        today = datetime.now(zone).date()
    return TimeConfig(
        start_date=today,
        end_date=today + timedelta(days=DEFAULT_RANGE_DAYS),
        weekday_start=parse_clock(DEFAULT_WEEKDAY_START),
        weekday_end=parse_clock(DEFAULT_WEEKDAY_END),
        weekend_start=parse_clock(DEFAULT_WEEKEND_START),
        weekend_end=parse_clock(DEFAULT_WEEKEND_END),
        timezone=timezone,
        buffer_factor=DEFAULT_TIME_BUFFER_FACTOR,
    )


# =============================================================================
# VALIDATION
# =============================================================================


def clock_minutes(value: time) -> int:
    """Minutes since midnight for a clock time."""
    return value.hour * 60 + value.minute


def validate_time_config(config: TimeConfig) -> TimeConfig:
    """
    Check a TimeConfig before any computation starts.

    Raises:
        InvalidRangeError: a work window or the date range is empty/inverted
        InvalidConfigError: bad buffer factor or unknown timezone
    """
    if clock_minutes(config.weekday_end) - clock_minutes(config.weekday_start) <= 0:
        raise InvalidRangeError("Weekday end time must be after start time.")
    if clock_minutes(config.weekend_end) - clock_minutes(config.weekend_start) <= 0:
        raise InvalidRangeError("Weekend end time must be after start time.")
    if config.end_date < config.start_date:
        raise InvalidRangeError(
            f"End date {config.end_date} is before start date {config.start_date}."
        )
    if not 0 < config.buffer_factor <= 1:
        raise InvalidConfigError(
            f"Time buffer factor must be greater than 0 and at most 1, got {config.buffer_factor}."
        )
    try:
        ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidConfigError(f"Unknown timezone '{config.timezone}'.")
    return config


def require_instants(event: Event) -> tuple[datetime, datetime]:
    """Return the event's (start, end) instants or raise MalformedEventError."""
    start = event.get("start")
    end = event.get("end")
    if start is None or end is None:
        raise MalformedEventError(f"Event '{event.get('summary', '')}' has no start/end time")
    if start.tzinfo is None or end.tzinfo is None:
        raise MalformedEventError(f"Event '{event.get('summary', '')}' has naive timestamps")
    if end < start:
        raise MalformedEventError(f"Event '{event.get('summary', '')}' ends before it starts")
    return start, end
