"""Work order router - FastAPI endpoints for work orders and the calendar feed"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_permission
from ...database import get_db
from ...models import User, WorkOrder, WorkOrderStatus, WorkOrderType
from ...permissions import Permission
from ...schemas import MessageResponse, UserSummary
from ..locations.schemas import LocationResponse
from .schemas import (
    AssignmentUpdate,
    CalendarEvent,
    EquipmentSummary,
    WorkOrderCreate,
    WorkOrderDetailResponse,
    WorkOrderFormData,
    WorkOrderResponse,
    WorkOrderUpdate,
    WorkOrderUpdateResponse,
)
from .service import WorkOrderService, resolve_tz_offset
from .time_calculator import from_local

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workorders", tags=["Work Orders"])


def get_work_order_service(db: Session = Depends(get_db)) -> WorkOrderService:
    """Dependency injection for WorkOrderService"""
    return WorkOrderService(db)


def _user_summary(user: Optional[User]) -> Optional[UserSummary]:
    if user is None:
        return None
    return UserSummary(id=user.id, firstName=user.first_name, lastName=user.last_name)


def _base_fields(wo: WorkOrder) -> dict:
    return dict(
        id=wo.id,
        title=wo.title,
        fameNumber=wo.fame_number,
        type=wo.type,
        status=wo.status,
        clientName=wo.client_name,
        clientContactName=wo.client_contact_name,
        clientEmail=wo.client_email,
        clientPhone=wo.client_phone,
        startDate=wo.start_date,
        endDate=wo.end_date,
        startHour=wo.start_hour,
        endHour=wo.end_hour,
        location=wo.location,
        noteText=wo.note_text,
        assignedToId=wo.assigned_to_id,
        supervisorId=wo.supervisor_id,
        createdById=wo.created_by_id,
        pickupLocationId=wo.pickup_location_id,
        deliveryLocationId=wo.delivery_location_id,
        assignedTo=_user_summary(wo.assigned_to),
        supervisor=_user_summary(wo.supervisor),
        createdAt=wo.created_at,
        updatedAt=wo.updated_at,
    )


def work_order_response(wo: WorkOrder) -> WorkOrderResponse:
    return WorkOrderResponse(**_base_fields(wo))


def work_order_detail_response(wo: WorkOrder) -> WorkOrderDetailResponse:
    return WorkOrderDetailResponse(
        **_base_fields(wo),
        pickupLocation=LocationResponse.from_location(wo.pickup_location) if wo.pickup_location else None,
        deliveryLocation=LocationResponse.from_location(wo.delivery_location) if wo.delivery_location else None,
        equipment=[
            EquipmentSummary(
                id=e.id,
                name=e.name,
                type=e.type,
                status=e.status,
                licensePlate=e.license_plate,
            )
            for e in wo.equipment
        ],
    )


@router.get("", response_model=list[WorkOrderResponse])
async def get_work_orders(
    status: Optional[WorkOrderStatus] = Query(None),
    type: Optional[WorkOrderType] = Query(None),
    assignedToId: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    _: User = Depends(require_permission(Permission.VIEW_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Get work orders ordered by start date"""
    work_orders = service.list_work_orders(
        status=status.value if status else None,
        work_order_type=type.value if type else None,
        assigned_to_id=assignedToId,
        start=start,
        end=end,
    )
    return [work_order_response(wo) for wo in work_orders]


@router.get("/events", response_model=list[CalendarEvent])
async def get_calendar_events(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    tzOffset: Optional[int] = Query(None),
    _: User = Depends(require_permission(Permission.VIEW_CALENDAR)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Calendar events for the visible range"""
    # Naive range bounds are local wall time; events themselves are UTC instants
    if tzOffset is not None:
        offset = resolve_tz_offset(tzOffset)
        if start is not None and start.tzinfo is None:
            start = from_local(start, offset)
        if end is not None and end.tzinfo is None:
            end = from_local(end, offset)
    return service.get_calendar_events(start=start, end=end)


@router.get("/{work_order_id}", response_model=WorkOrderDetailResponse)
async def get_work_order(
    work_order_id: str,
    _: User = Depends(require_permission(Permission.VIEW_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Get a specific work order"""
    return work_order_detail_response(service.get_work_order(work_order_id))


@router.get("/{work_order_id}/form", response_model=WorkOrderFormData)
async def get_work_order_form(
    work_order_id: str,
    tzOffset: Optional[int] = Query(None),
    _: User = Depends(require_permission(Permission.VIEW_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Work order formatted for the edit form"""
    return service.get_form_data(work_order_id, tzOffset)


@router.post("", response_model=WorkOrderDetailResponse, status_code=201)
async def create_work_order(
    data: WorkOrderCreate,
    current_user: User = Depends(require_permission(Permission.CREATE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Create a new work order"""
    return work_order_detail_response(service.create_work_order(data, current_user))


@router.put("/{work_order_id}", response_model=WorkOrderUpdateResponse)
async def update_work_order(
    work_order_id: str,
    data: WorkOrderUpdate,
    _: User = Depends(require_permission(Permission.EDIT_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Update a work order"""
    work_order = service.update_work_order(work_order_id, data)
    return WorkOrderUpdateResponse(data=work_order_detail_response(work_order), success=True)


@router.put("/{work_order_id}/assignment", response_model=WorkOrderDetailResponse)
async def update_assignment(
    work_order_id: str,
    data: AssignmentUpdate,
    _: User = Depends(require_permission(Permission.ASSIGN_TECHNICIANS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Assign crew and equipment to a work order"""
    return work_order_detail_response(service.update_assignment(work_order_id, data))


@router.delete("/{work_order_id}", response_model=MessageResponse)
async def delete_work_order(
    work_order_id: str,
    current_user: User = Depends(require_permission(Permission.EDIT_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Delete a work order"""
    service.delete_work_order(work_order_id)
    logger.info(f"🗑️ Work order {work_order_id} deleted by {current_user.email}")
    return {"message": "Work order deleted successfully"}
