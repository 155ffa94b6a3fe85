from datetime import datetime

from docket.domain.workorders.calendar import (
    DEFAULT_EVENT_COLORS,
    get_event_color,
    to_calendar_event,
    to_calendar_events,
)
from docket.models import User, WorkOrder


def build_work_order(**overrides) -> WorkOrder:
    technician = User(id="tech-1", first_name="Sarah", last_name="Johnson", role="TECHNICIAN")
    fields = dict(
        id="wo-1",
        fame_number="WO-2024-001",
        client_name="John Smith",
        type="DELIVERY",
        status="PENDING",
        start_date=datetime(2024, 3, 10, 14, 0),
        end_date=datetime(2024, 3, 10, 22, 0),
        start_hour="09:00",
        end_hour="17:00",
        assigned_to_id="tech-1",
    )
    fields.update(overrides)
    work_order = WorkOrder(**fields)
    if "assigned_to" not in overrides:
        work_order.assigned_to = technician
    return work_order


def test_colors_by_type() -> None:
    assert get_event_color("PICKUP") == {"backgroundColor": "#3b82f6", "borderColor": "#2563eb"}
    assert get_event_color("TEARDOWN")["backgroundColor"] == "#ef4444"
    assert get_event_color("INSPECTION") == DEFAULT_EVENT_COLORS
    assert get_event_color(None) == DEFAULT_EVENT_COLORS


def test_event_shape() -> None:
    event = to_calendar_event(build_work_order())

    assert event.title == "WO-2024-001 - John Smith"
    assert event.backgroundColor == "#10b981"
    assert event.extendedProps.assignedTo == "Sarah Johnson"
    assert event.extendedProps.supervisor == ""

    data = event.model_dump(mode="json")
    assert data["start"] == "2024-03-10T14:00:00Z"
    assert data["end"] == "2024-03-10T22:00:00Z"


def test_open_ended_order_ends_at_start() -> None:
    event = to_calendar_event(build_work_order(end_date=None))
    assert event.end == event.start


def test_orders_without_assignee_are_skipped() -> None:
    orphan = build_work_order(id="wo-2", assigned_to=None)
    events = to_calendar_events([build_work_order(), orphan])

    assert [e.id for e in events] == ["wo-1"]
