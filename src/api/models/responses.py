"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    graph_configured: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DailyAvailabilityResponse(BaseModel):
    date: str  # YYYY-MM-DD
    label: str
    available_hours: float
    total_hours: float
    capacity_hours: float
    fungible_hours: float
    task_hours: float


class ProjectTaskResponse(BaseModel):
    project: str
    task: str
    hours: float
    color: str


class ProjectSummaryResponse(BaseModel):
    project: str
    total_hours: float
    color: str


class FungibleSummaryResponse(BaseModel):
    calendar_name: str
    total_hours: float
    color: str


class DailyEventDetailResponse(BaseModel):
    summary: str
    calendar_name: str
    category: str
    local_start: str
    local_end: str
    duration_hours: float
    impact_type: str


class DailyDetailsResponse(BaseModel):
    date: str
    label: str
    events: list[DailyEventDetailResponse]


class ReportResponse(BaseModel):
    """Computed availability report."""

    daily_availability: list[DailyAvailabilityResponse]
    project_tasks: list[ProjectTaskResponse]
    project_summaries: list[ProjectSummaryResponse]
    fungible_summaries: list[FungibleSummaryResponse]
    daily_details: list[DailyDetailsResponse]
