"""Pydantic request models for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.availability import CalendarCategory


class TimeConfigPayload(BaseModel):
    """Config record; accepts camelCase keys as well as snake_case."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    weekday_start: str = Field(alias="weekdayStartTime")
    weekday_end: str = Field(alias="weekdayEndTime")
    weekend_start: str = Field(alias="weekendStartTime")
    weekend_end: str = Field(alias="weekendEndTime")
    timezone: str
    buffer_factor: float | None = Field(default=None, alias="timeBufferFactor")


class CalendarPayload(BaseModel):
    calendar_id: str
    calendar_name: str
    category: CalendarCategory = CalendarCategory.INACTIVE


class EventPayload(BaseModel):
    calendar_id: str
    summary: str = ""
    # Omitted for all-day events
    start: datetime | None = None
    end: datetime | None = None


class AvailabilityRequest(BaseModel):
    """Everything one computation needs: config, categorized calendars, fetched events."""

    config: TimeConfigPayload
    calendars: list[CalendarPayload]
    events: list[EventPayload] = []
    block_keywords: list[str] | None = None
