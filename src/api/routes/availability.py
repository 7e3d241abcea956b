"""Availability computation endpoints."""

import asyncio
import time
from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from api.dependencies import verify_api_key
from api.logging import RequestLog, log_request
from api.models.requests import AvailabilityRequest
from api.models.responses import ErrorCodes, ReportResponse
from core.validation import parse_time_config
from models.availability import Report
from services.availability import collect_events, compute_availability
from services.reports import create_availability_workbook, workbook_to_bytes

router = APIRouter(prefix="/v1")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def build_report(payload: AvailabilityRequest) -> tuple[Report, int]:
    """Turn a request payload into a Report. Returns (report, relevant event count)."""
    config = parse_time_config(payload.config.model_dump())
    calendars = [
        {
            "calendar_id": calendar.calendar_id,
            "calendar_name": calendar.calendar_name,
            "category": calendar.category,
        }
        for calendar in payload.calendars
    ]

    events_by_calendar = defaultdict(list)
    for event in payload.events:
        events_by_calendar[event.calendar_id].append(
            {"summary": event.summary, "start": event.start, "end": event.end}
        )

    events = collect_events(calendars, events_by_calendar)
    report = compute_availability(config, calendars, events, payload.block_keywords)
    return report, len(events)


async def _compute_logged(request: Request, payload: AvailabilityRequest, endpoint: str) -> Report:
    """Run the computation off the event loop, mapping errors and logging the request."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint=endpoint,
        method="POST",
        client_ip=get_client_ip(request),
    )

    try:
        report, event_count = await asyncio.to_thread(build_report, payload)

        request_log.status_code = 200
        request_log.days_computed = len(report.daily_availability)
        request_log.events_processed = event_count
        request_log.available_hours = round(
            sum(day.available_hours for day in report.daily_availability), 2
        )
        return report

    except ValueError as e:
        error_msg = str(e)
        request_log.status_code = 422
        request_log.error_code = ErrorCodes.VALIDATION_ERROR
        request_log.error_message = error_msg
        request_log.details.append(("validation_error", error_msg))

        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Availability configuration is invalid",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": [error_msg],
            },
        )

    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        try:
            log_request(request_log)
        except Exception as log_error:
            # Don't fail the request if logging fails
            print(f"Failed to write request log: {log_error}")


@router.post("/availability/compute", response_model=ReportResponse)
async def compute_availability_endpoint(
    request: Request,
    payload: AvailabilityRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Compute daily availability and project/fungible breakdowns.

    Events must already be fetched and expanded; all-day events are skipped.
    """
    report = await _compute_logged(request, payload, "/v1/availability/compute")
    return ReportResponse.model_validate(report.to_dict())


@router.post("/availability/export")
async def export_availability_endpoint(
    request: Request,
    payload: AvailabilityRequest,
    _api_key: str = Depends(verify_api_key),
):
    """Same computation as /availability/compute, returned as an Excel workbook."""
    report = await _compute_logged(request, payload, "/v1/availability/export")
    excel_bytes = await asyncio.to_thread(
        lambda: workbook_to_bytes(create_availability_workbook(report))
    )
    filename = f"availability_{payload.config.start_date}_{payload.config.end_date}.xlsx"
    return Response(
        content=excel_bytes,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
