import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_permission
from ..database import get_db
from ..domain.workorders.calendar import event_title
from ..domain.workorders.service import WorkOrderService
from ..models import User
from ..permissions import Permission
from ..services import google_calendar_service
from ..services.google_calendar_service import GoogleCalendarError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["Google Calendar"])


class CalendarEventCreate(BaseModel):
    summary: str
    start: datetime
    end: datetime

    @field_validator("summary")
    @classmethod
    def required_summary(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Summary cannot be empty")
        return v


def google_access_token(
    x_google_access_token: Optional[str] = Header(None, alias="X-Google-Access-Token"),
) -> str:
    """Google OAuth access token the dashboard obtained for the signed-in user"""
    if not x_google_access_token:
        raise HTTPException(status_code=400, detail="Missing X-Google-Access-Token header")
    return x_google_access_token


def _upstream_error(e: GoogleCalendarError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(e))


@router.get("")
async def list_google_events(
    _: User = Depends(get_current_user),
    access_token: str = Depends(google_access_token),
) -> list[dict[str, Any]]:
    """Next ten events on the dispatch calendar"""
    try:
        return await google_calendar_service.list_upcoming_events(access_token)
    except GoogleCalendarError as e:
        raise _upstream_error(e)


@router.post("", status_code=201)
async def create_google_event(
    data: CalendarEventCreate,
    _: User = Depends(get_current_user),
    access_token: str = Depends(google_access_token),
) -> dict[str, Any]:
    if data.end < data.start:
        raise HTTPException(status_code=400, detail="End time must be after start time")
    try:
        return await google_calendar_service.create_event(
            access_token, data.summary, data.start, data.end
        )
    except GoogleCalendarError as e:
        raise _upstream_error(e)


@router.post("/workorders/{work_order_id}", status_code=201)
async def push_work_order(
    work_order_id: str,
    current_user: User = Depends(require_permission(Permission.EDIT_WORK_ORDERS)),
    access_token: str = Depends(google_access_token),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Copy a work order onto the Google calendar"""
    work_order = WorkOrderService(db).get_work_order(work_order_id)

    description_lines = [f"Type: {work_order.type}", f"Status: {work_order.status}"]
    if work_order.assigned_to:
        description_lines.append(f"Technician: {work_order.assigned_to.full_name}")
    if work_order.note_text:
        description_lines.append(work_order.note_text)

    try:
        event = await google_calendar_service.create_event(
            access_token,
            event_title(work_order),
            work_order.start_date,
            work_order.end_date or work_order.start_date,
            description="\n".join(description_lines),
            location=work_order.location,
        )
    except GoogleCalendarError as e:
        raise _upstream_error(e)

    logger.info(f"📅 {current_user.email} pushed work order {work_order.fame_number} to Google Calendar")
    return event
