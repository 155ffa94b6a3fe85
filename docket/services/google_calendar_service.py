"""
Google Calendar Service
Lists upcoming events and pushes work orders to a dispatcher's calendar
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..config import GOOGLE_CALENDAR_ID, GOOGLE_CALENDAR_TIMEOUT

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"
UPCOMING_EVENTS_LIMIT = 10


class GoogleCalendarError(Exception):
    """Google answered with an error or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _events_url(calendar_id: str) -> str:
    return f"{GOOGLE_CALENDAR_API}/calendars/{quote(calendar_id, safe='@.')}/events"


def _rfc3339(value: datetime) -> str:
    """Naive values are UTC"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=GOOGLE_CALENDAR_TIMEOUT)


async def _request(method: str, url: str, access_token: str, **kwargs) -> dict[str, Any]:
    headers = {"Authorization": f"Bearer {access_token}"}
    try:
        async with _client() as client:
            response = await client.request(method, url, headers=headers, **kwargs)
    except httpx.HTTPError as e:
        logger.error(f"❌ Google Calendar request failed: {e}")
        raise GoogleCalendarError(f"Google Calendar unreachable: {e}") from e

    if response.status_code >= 400:
        logger.error(f"❌ Google Calendar API error {response.status_code}: {response.text}")
        raise GoogleCalendarError(
            f"Google Calendar API error ({response.status_code})", status_code=response.status_code
        )
    return response.json()


async def list_upcoming_events(
    access_token: str,
    calendar_id: str = GOOGLE_CALENDAR_ID,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """Next ten events from now, ordered by start time"""
    params = {
        "timeMin": _rfc3339(now or datetime.now(timezone.utc)),
        "maxResults": UPCOMING_EVENTS_LIMIT,
        "singleEvents": "true",
        "orderBy": "startTime",
    }
    data = await _request("GET", _events_url(calendar_id), access_token, params=params)
    events = data.get("items", [])
    logger.info(f"📅 Fetched {len(events)} upcoming Google Calendar events")
    return events


async def create_event(
    access_token: str,
    summary: str,
    start: datetime,
    end: datetime,
    description: Optional[str] = None,
    location: Optional[str] = None,
    calendar_id: str = GOOGLE_CALENDAR_ID,
) -> dict[str, Any]:
    """Insert an event; times are sent in UTC"""
    body: dict[str, Any] = {
        "summary": summary,
        "start": {"dateTime": _rfc3339(start), "timeZone": "UTC"},
        "end": {"dateTime": _rfc3339(end), "timeZone": "UTC"},
    }
    if description:
        body["description"] = description
    if location:
        body["location"] = location

    event = await _request("POST", _events_url(calendar_id), access_token, json=body)
    logger.info(f"✅ Google Calendar event created: {event.get('id')}")
    return event
