"""API Pydantic models."""

from .requests import AvailabilityRequest, CalendarPayload, EventPayload, TimeConfigPayload
from .responses import ErrorCodes, ErrorResponse, HealthResponse, ReportResponse

__all__ = [
    "AvailabilityRequest",
    "CalendarPayload",
    "EventPayload",
    "TimeConfigPayload",
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "ReportResponse",
]
