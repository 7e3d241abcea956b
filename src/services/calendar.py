"""
Calendar listing and event fetching from MS Graph.
"""

import re
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from azure.identity import ClientSecretCredential
from kiota_abstractions.base_request_configuration import RequestConfiguration
from msgraph import GraphServiceClient
from msgraph.generated.users.item.calendars.item.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder,
)

from core.config import GRAPH_APP_ID, GRAPH_CLIENT_SECRET, GRAPH_PAGE_SIZE, GRAPH_TENANT_ID
from models.availability import CalendarCategory, CalendarInfo, Event

_graph_client: GraphServiceClient | None = None

# Graph returns up to 7 fractional digits; datetime accepts at most 6
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


def get_graph_client() -> GraphServiceClient:
    """Get or create the MS Graph client (lazy initialization)."""
    global _graph_client
    if _graph_client is None:
        _graph_client = GraphServiceClient(
            credentials=ClientSecretCredential(
                tenant_id=GRAPH_TENANT_ID,
                client_id=GRAPH_APP_ID,
                client_secret=GRAPH_CLIENT_SECRET,
            ),
            scopes=["https://graph.microsoft.com/.default"],
        )
    return _graph_client


def graph_configured() -> bool:
    """Check that all Graph credentials are present."""
    return bool(GRAPH_TENANT_ID and GRAPH_APP_ID and GRAPH_CLIENT_SECRET)


async def list_user_calendars(
    user_id: str, assignments: dict[str, CalendarCategory] | None = None
) -> list[CalendarInfo]:
    """
    List a user's calendars with their assigned categories.

    Assignments are matched on calendar name (case-insensitive) or id.
    Calendars without an assignment are Inactive.
    """
    graph = get_graph_client()
    lookup = {key.casefold(): CalendarCategory(value) for key, value in (assignments or {}).items()}

    response = await graph.users.by_user_id(user_id).calendars.get()
    calendars = response.value if response and response.value else []

    results = []
    for calendar in sorted(calendars, key=lambda c: (c.name or "").casefold()):
        category = lookup.get(
            (calendar.name or "").casefold(), lookup.get(calendar.id.casefold(), CalendarCategory.INACTIVE)
        )
        results.append(
            {
                "calendar_id": calendar.id,
                "calendar_name": calendar.name or "",
                "category": category,
            }
        )
    return results


async def fetch_calendar_events(
    user_id: str, calendar: CalendarInfo, time_min: datetime, time_max: datetime
) -> list[Event]:
    """
    Fetch all events of a calendar between two instants.

    Uses calendarView so recurring events arrive already expanded, and follows
    paging links until the range is exhausted. Errors propagate to the caller.
    """
    graph = get_graph_client()

    query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
        start_date_time=time_min.strftime("%Y-%m-%dT%H:%M:%SZ"),
        end_date_time=time_max.strftime("%Y-%m-%dT%H:%M:%SZ"),
        select=["subject", "start", "end", "isAllDay"],
        orderby=["start/dateTime"],
        top=GRAPH_PAGE_SIZE,
    )
    config = RequestConfiguration(query_parameters=query_params)

    builder = graph.users.by_user_id(user_id).calendars.by_calendar_id(
        calendar["calendar_id"]
    ).calendar_view
    response = await builder.get(request_configuration=config)

    events = []
    while response:
        for raw_event in response.value or []:
            events.append(parse_graph_event(raw_event, calendar))
        if not response.odata_next_link:
            break
        response = await builder.with_url(response.odata_next_link).get()

    return events


async def fetch_relevant_events(
    user_id: str, calendars: list[CalendarInfo], fetch_window: tuple[datetime, datetime]
) -> dict[str, list[Event]]:
    """
    Fetch events for every Fungible or Task calendar, one calendar at a time.

    Returns a calendar_id -> events mapping; Inactive calendars are never fetched.
    """
    time_min, time_max = fetch_window
    events_by_calendar = {}
    for calendar in calendars:
        category = CalendarCategory(calendar["category"])
        if category == CalendarCategory.INACTIVE:
            continue
        print(f"  Fetching from {calendar['calendar_name']} ({category.value})...")
        events = await fetch_calendar_events(user_id, calendar, time_min, time_max)
        print(f"    Found {len(events)} events")
        events_by_calendar[calendar["calendar_id"]] = events
    return events_by_calendar


def parse_graph_datetime(value: str | None, time_zone: str | None) -> datetime | None:
    """Parse a Graph dateTimeTimeZone pair into an aware datetime."""
    if not value:
        return None
    parsed = datetime.fromisoformat(_EXTRA_FRACTION.sub(r"\1", value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        try:
            parsed = parsed.replace(tzinfo=ZoneInfo(time_zone or "UTC"))
        except (ZoneInfoNotFoundError, ValueError):
            # Windows zone names (e.g. "Pacific Standard Time") are not IANA
            parsed = parsed.replace(tzinfo=ZoneInfo("UTC"))
    return parsed


def parse_graph_event(event, calendar: CalendarInfo) -> Event:
    """Parse MS Graph event into our format. All-day events get no instants."""
    start = end = None
    if not event.is_all_day:
        if event.start:
            start = parse_graph_datetime(event.start.date_time, event.start.time_zone)
        if event.end:
            end = parse_graph_datetime(event.end.date_time, event.end.time_zone)

    return {
        "summary": event.subject or "",
        "start": start,
        "end": end,
        "calendar_id": calendar["calendar_id"],
        "category": CalendarCategory(calendar["category"]),
    }
