"""Calendar event representation of work orders"""

import logging
from typing import Optional

from ...models import User, WorkOrder
from .schemas import CalendarEvent, CalendarEventProps

logger = logging.getLogger(__name__)

DEFAULT_EVENT_COLORS = {"backgroundColor": "#6b7280", "borderColor": "#4b5563"}

EVENT_COLORS = {
    "PICKUP": {"backgroundColor": "#3b82f6", "borderColor": "#2563eb"},
    "DELIVERY": {"backgroundColor": "#10b981", "borderColor": "#059669"},
    "SETUP": {"backgroundColor": "#f59e0b", "borderColor": "#d97706"},
    "ACTIVATION": {"backgroundColor": "#8b5cf6", "borderColor": "#7c3aed"},
    "TEARDOWN": {"backgroundColor": "#ef4444", "borderColor": "#dc2626"},
}


def get_event_color(work_order_type: Optional[str]) -> dict[str, str]:
    return EVENT_COLORS.get(work_order_type or "", DEFAULT_EVENT_COLORS)


def format_assignee_name(user: Optional[User]) -> str:
    if user is None:
        return ""
    return f"{user.first_name} {user.last_name}"


def event_title(work_order: WorkOrder) -> str:
    return f"{work_order.fame_number} - {work_order.client_name}"


def to_calendar_event(work_order: WorkOrder) -> CalendarEvent:
    colors = get_event_color(work_order.type)
    return CalendarEvent(
        id=work_order.id,
        title=event_title(work_order),
        start=work_order.start_date,
        end=work_order.end_date or work_order.start_date,
        backgroundColor=colors["backgroundColor"],
        borderColor=colors["borderColor"],
        extendedProps=CalendarEventProps(
            type=work_order.type,
            status=work_order.status,
            fameNumber=work_order.fame_number,
            clientName=work_order.client_name,
            clientEmail=work_order.client_email,
            clientPhone=work_order.client_phone,
            assignedTo=format_assignee_name(work_order.assigned_to),
            supervisor=format_assignee_name(work_order.supervisor),
            assignedToId=work_order.assigned_to_id,
            supervisorId=work_order.supervisor_id,
            startHour=work_order.start_hour,
            endHour=work_order.end_hour,
        ),
    )


def to_calendar_events(work_orders: list[WorkOrder]) -> list[CalendarEvent]:
    events = []
    skipped = 0
    for work_order in work_orders:
        if work_order.assigned_to is None:
            skipped += 1
            continue
        events.append(to_calendar_event(work_order))
    if skipped:
        logger.warning(f"⚠️ Skipped {skipped} work order(s) without an assignee in calendar feed")
    return events
