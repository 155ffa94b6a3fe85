"""
Work order time calculations

Work orders are entered as a calendar date plus separate start/end hour
strings in the dispatcher's local time. They are stored as naive UTC
datetimes. Offsets follow the browser convention (Date.getTimezoneOffset):
the number of minutes to add to local time to reach UTC, so UTC-5 is 300.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

MAX_TZ_OFFSET_MINUTES = 14 * 60

HOUR_PATTERN = re.compile(r"^\d{1,2}(:\d{2})?( ?[AP]M)?$")
HOUR_FORMATS = ("%H:%M", "%I:%M %p", "%I:%M%p", "%I %p", "%I%p")


@dataclass
class ScheduleWindow:
    start: datetime
    end: Optional[datetime]
    start_hour: str
    end_hour: Optional[str]

    @property
    def duration_hours(self) -> float:
        return hours_between(self.start, self.end)


def validate_tz_offset(tz_offset: int) -> int:
    if abs(tz_offset) > MAX_TZ_OFFSET_MINUTES:
        raise ValueError(f"Timezone offset must be within ±{MAX_TZ_OFFSET_MINUTES} minutes")
    return tz_offset


def parse_hour(value: Optional[str]) -> Optional[time]:
    """Parse "14:30", "9:05", "2:30 PM", "2PM"; blank means not provided."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    normalized = value.upper()
    # strptime alone would also take "9:5"
    if HOUR_PATTERN.match(normalized):
        for fmt in HOUR_FORMATS:
            try:
                return datetime.strptime(normalized, fmt).time()
            except ValueError:
                continue
    raise ValueError(f"Invalid hour '{value}'. Use HH:MM or h:MM AM/PM")


def format_hour(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetimes are converted to UTC; naive ones are assumed to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_local(value: datetime, tz_offset: int) -> datetime:
    """Naive UTC -> naive local wall time"""
    return value - timedelta(minutes=tz_offset)


def from_local(value: datetime, tz_offset: int) -> datetime:
    """Naive local wall time -> naive UTC"""
    return value + timedelta(minutes=tz_offset)


def schedule_day(value: datetime, tz_offset: int) -> date:
    """
    The local calendar day a date field refers to.

    A date-only or naive value already names the day the dispatcher picked;
    an aware value is an instant and is moved into local time first.
    """
    if value.tzinfo is None:
        return value.date()
    return to_local(to_naive_utc(value), tz_offset).date()


def combine_date_and_hour(day: date, hour: time, tz_offset: int) -> datetime:
    """Local day + local hour -> naive UTC"""
    return from_local(datetime.combine(day, hour), tz_offset)


def format_local_hour(value: Optional[datetime], tz_offset: int) -> Optional[str]:
    if value is None:
        return None
    return to_local(value, tz_offset).strftime("%H:%M")


def format_date_for_input(value: Optional[datetime], tz_offset: int) -> str:
    """Format for datetime-local inputs (YYYY-MM-DDTHH:MM) in the caller's local time"""
    if value is None:
        return ""
    return to_local(value, tz_offset).strftime("%Y-%m-%dT%H:%M")


def hours_between(start: Optional[datetime], end: Optional[datetime]) -> float:
    if start is None or end is None:
        return 0.0
    return (end - start).total_seconds() / 3600


def local_day_start(now_utc: datetime, tz_offset: int) -> datetime:
    """Naive UTC instant of the most recent local midnight"""
    local_now = to_local(to_naive_utc(now_utc), tz_offset)
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return from_local(midnight, tz_offset)


def reconcile_schedule(
    start_date: datetime,
    end_date: Optional[datetime] = None,
    start_hour: Optional[str] = None,
    end_hour: Optional[str] = None,
    tz_offset: int = 0,
) -> ScheduleWindow:
    """
    Combine date fields with hour strings into a UTC schedule window.

    Raises:
        ValueError: for unparseable hours or an end before the start
    """
    validate_tz_offset(tz_offset)
    start_time = parse_hour(start_hour)
    end_time = parse_hour(end_hour)

    if start_time is not None:
        start = combine_date_and_hour(schedule_day(start_date, tz_offset), start_time, tz_offset)
    else:
        start = to_naive_utc(start_date)

    if end_time is not None:
        base = end_date if end_date is not None else start_date
        end = combine_date_and_hour(schedule_day(base, tz_offset), end_time, tz_offset)
        if end_date is None and end <= start:
            # Overnight job
            end += timedelta(days=1)
    else:
        end = to_naive_utc(end_date)

    if end is not None and end < start:
        raise ValueError("End time must be after start time")

    return ScheduleWindow(
        start=start,
        end=end,
        start_hour=format_hour(start_time) or format_local_hour(start, tz_offset),
        end_hour=format_hour(end_time) or format_local_hour(end, tz_offset),
    )
