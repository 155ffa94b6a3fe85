"""Work order service - Business logic for work order operations"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import config
from ...models import Equipment, User, UserRole, WorkOrder
from .calendar import to_calendar_events
from .repository import WorkOrderRepository
from .schemas import (
    AssignmentUpdate,
    CalendarEvent,
    WorkOrderCreate,
    WorkOrderFormData,
    WorkOrderUpdate,
)
from .time_calculator import (
    format_date_for_input,
    reconcile_schedule,
    to_naive_utc,
    validate_tz_offset,
)

logger = logging.getLogger(__name__)

MISSING_REFERENCE_DETAIL = "One or more referenced items (location or user) do not exist"
DUPLICATE_FAME_DETAIL = "A work order with this FAME number already exists"

SCHEDULE_FIELDS = {"startDate", "endDate", "startHour", "endHour"}


def resolve_tz_offset(tz_offset: Optional[int]) -> int:
    """Caller's offset or the configured default; out of range offsets are a 400"""
    if tz_offset is None:
        tz_offset = config.DEFAULT_TZ_OFFSET_MINUTES
    try:
        return validate_tz_offset(tz_offset)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored naive UTC -> aware UTC so it is treated as an instant when reconciling"""
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def _enum_value(value):
    return getattr(value, "value", value)


class WorkOrderService:
    """Service layer for work order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WorkOrderRepository()

    def list_work_orders(
        self,
        status: Optional[str] = None,
        work_order_type: Optional[str] = None,
        assigned_to_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[WorkOrder]:
        return self.repo.list_work_orders(
            self.db,
            status=status,
            work_order_type=work_order_type,
            assigned_to_id=assigned_to_id,
            window_start=to_naive_utc(start),
            window_end=to_naive_utc(end),
        )

    def get_work_order(self, work_order_id: str) -> WorkOrder:
        work_order = self.repo.get_by_id(self.db, work_order_id)
        if not work_order:
            raise HTTPException(status_code=404, detail="Work order not found")
        return work_order

    def get_calendar_events(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[CalendarEvent]:
        """Calendar feed for the visible range"""
        work_orders = self.list_work_orders(start=start, end=end)
        return to_calendar_events(work_orders)

    def get_form_data(self, work_order_id: str, tz_offset: Optional[int]) -> WorkOrderFormData:
        """Work order shaped for the edit form in the caller's local time"""
        work_order = self.get_work_order(work_order_id)
        offset = resolve_tz_offset(tz_offset)

        return WorkOrderFormData(
            id=work_order.id,
            title=work_order.title or "",
            fameNumber=work_order.fame_number,
            type=work_order.type,
            status=work_order.status,
            startDate=format_date_for_input(work_order.start_date, offset),
            endDate=format_date_for_input(work_order.end_date, offset),
            startHour=work_order.start_hour or "",
            endHour=work_order.end_hour or "",
            clientName=work_order.client_name,
            clientContactName=work_order.client_contact_name or "",
            clientEmail=work_order.client_email or "",
            clientPhone=work_order.client_phone or "",
            location=work_order.location or "",
            noteText=work_order.note_text or "",
            pickupLocationId=work_order.pickup_location_id or "",
            deliveryLocationId=work_order.delivery_location_id or "",
            assignedToId=work_order.assigned_to_id,
            supervisorId=work_order.supervisor_id or "",
        )

    def create_work_order(self, data: WorkOrderCreate, user: User) -> WorkOrder:
        """Create a work order; the creator is always the authenticated user"""
        logger.info(f"📥 Creating work order {data.fameNumber} for user_id: {user.id}")

        offset = resolve_tz_offset(data.tzOffset)
        window = self._reconcile(data.startDate, data.endDate, data.startHour, data.endHour, offset)

        if self.repo.get_by_fame_number(self.db, data.fameNumber):
            raise HTTPException(status_code=409, detail=DUPLICATE_FAME_DETAIL)

        self._check_references(
            user_ids=[data.assignedToId, data.supervisorId],
            location_ids=[data.pickupLocationId, data.deliveryLocationId],
        )
        equipment = self._load_equipment(data.equipmentIds)

        work_order_data = {
            "title": data.title,
            "fame_number": data.fameNumber,
            "type": _enum_value(data.type),
            "status": _enum_value(data.status),
            "client_name": data.clientName,
            "client_contact_name": data.clientContactName,
            "client_email": data.clientEmail,
            "client_phone": data.clientPhone,
            "start_date": window.start,
            "end_date": window.end,
            "start_hour": window.start_hour,
            "end_hour": window.end_hour,
            "location": data.location,
            "note_text": data.noteText,
            "pickup_location_id": data.pickupLocationId,
            "delivery_location_id": data.deliveryLocationId,
            "assigned_to_id": data.assignedToId,
            "supervisor_id": data.supervisorId,
            "created_by_id": user.id,
        }

        try:
            work_order = self.repo.create(self.db, equipment, **work_order_data)
        except IntegrityError as e:
            self._handle_integrity_error(e)

        logger.info(f"✅ Work order {work_order.fame_number} created: {work_order.id}")
        return self.get_work_order(work_order.id)

    def update_work_order(self, work_order_id: str, data: WorkOrderUpdate) -> WorkOrder:
        """Partial update: only fields present in the payload change"""
        work_order = self.get_work_order(work_order_id)
        supplied = data.model_fields_set

        updates = {}
        if data.type is not None:
            updates["type"] = _enum_value(data.type)
        if data.status is not None:
            updates["status"] = _enum_value(data.status)
        if data.fameNumber is not None and data.fameNumber != work_order.fame_number:
            existing = self.repo.get_by_fame_number(self.db, data.fameNumber)
            if existing and existing.id != work_order.id:
                raise HTTPException(status_code=409, detail=DUPLICATE_FAME_DETAIL)
            updates["fame_number"] = data.fameNumber
        if data.clientName is not None:
            updates["client_name"] = data.clientName

        # Nullable fields can be cleared by sending null
        optional_fields = {
            "title": "title",
            "clientContactName": "client_contact_name",
            "clientEmail": "client_email",
            "clientPhone": "client_phone",
            "location": "location",
            "noteText": "note_text",
        }
        for field, column in optional_fields.items():
            if field in supplied:
                updates[column] = getattr(data, field)

        # References connect only when an id is supplied
        if data.assignedToId is not None:
            self._check_references(user_ids=[data.assignedToId])
            updates["assigned_to_id"] = data.assignedToId
        for field, column in (
            ("supervisorId", "supervisor_id"),
            ("pickupLocationId", "pickup_location_id"),
            ("deliveryLocationId", "delivery_location_id"),
        ):
            value = getattr(data, field)
            if value is None:
                continue
            if field == "supervisorId":
                self._check_references(user_ids=[value])
            else:
                self._check_references(location_ids=[value])
            updates[column] = value

        if supplied & SCHEDULE_FIELDS:
            updates.update(self._merge_schedule(work_order, data))

        if data.equipmentIds is not None:
            work_order.equipment = self._load_equipment(data.equipmentIds)

        try:
            self.repo.update(self.db, work_order, **updates)
        except IntegrityError as e:
            self._handle_integrity_error(e)

        logger.info(f"✏️ Work order {work_order_id} updated: {sorted(updates)}")
        return self.get_work_order(work_order_id)

    def update_assignment(self, work_order_id: str, data: AssignmentUpdate) -> WorkOrder:
        """Assign a technician, a supervisor and equipment to a work order"""
        work_order = self.get_work_order(work_order_id)
        updates = {}

        if data.assignedToId:
            assignee = self.repo.get_user(self.db, data.assignedToId)
            if not assignee:
                raise HTTPException(status_code=400, detail=MISSING_REFERENCE_DETAIL)
            if assignee.role != UserRole.TECHNICIAN.value:
                raise HTTPException(status_code=400, detail="Assigned user must be a technician")
            updates["assigned_to_id"] = assignee.id

        if data.supervisorId:
            supervisor = self.repo.get_user(self.db, data.supervisorId)
            if not supervisor:
                raise HTTPException(status_code=400, detail=MISSING_REFERENCE_DETAIL)
            if supervisor.role not in (UserRole.SUPERVISOR.value, UserRole.ADMIN.value):
                raise HTTPException(
                    status_code=400, detail="Supervisor must have the supervisor or admin role"
                )
            updates["supervisor_id"] = supervisor.id

        if data.equipmentIds is not None:
            work_order.equipment = self._load_equipment(data.equipmentIds)

        self.repo.update(self.db, work_order, **updates)
        logger.info(f"👷 Work order {work_order_id} assignment updated")
        return self.get_work_order(work_order_id)

    def delete_work_order(self, work_order_id: str) -> None:
        work_order = self.get_work_order(work_order_id)
        self.repo.delete(self.db, work_order)

    # ------------------------------------------------------------------

    def _reconcile(self, start_date, end_date, start_hour, end_hour, tz_offset):
        try:
            return reconcile_schedule(start_date, end_date, start_hour, end_hour, tz_offset)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    def _merge_schedule(self, work_order: WorkOrder, data: WorkOrderUpdate) -> dict:
        """Reconcile supplied schedule fields against the stored ones"""
        supplied = data.model_fields_set
        offset = resolve_tz_offset(data.tzOffset)

        start_date = data.startDate if data.startDate is not None else _as_utc(work_order.start_date)

        # A moved order keeps its hours only when they are resent
        start_hour = data.startHour if "startHour" in supplied else None
        end_hour = data.endHour if "endHour" in supplied else None

        if "endDate" in supplied:
            end_date = data.endDate
        elif end_hour and end_hour.strip():
            # New end hour without an end date counts from the start day, as on create
            end_date = None
        else:
            end_date = _as_utc(work_order.end_date)

        window = self._reconcile(start_date, end_date, start_hour, end_hour, offset)
        updates = {"start_date": window.start, "end_date": window.end}

        # Untouched ends keep the hour string they were entered with
        if supplied & {"startDate", "startHour"}:
            updates["start_hour"] = window.start_hour
        if supplied & {"endDate", "endHour"}:
            updates["end_hour"] = window.end_hour
        return updates

    def _check_references(
        self,
        user_ids: Optional[list[Optional[str]]] = None,
        location_ids: Optional[list[Optional[str]]] = None,
    ) -> None:
        for user_id in user_ids or []:
            if user_id and not self.repo.get_user(self.db, user_id):
                logger.warning(f"⚠️ Unknown user reference: {user_id}")
                raise HTTPException(status_code=400, detail=MISSING_REFERENCE_DETAIL)
        for location_id in location_ids or []:
            if location_id and not self.repo.location_exists(self.db, location_id):
                logger.warning(f"⚠️ Unknown location reference: {location_id}")
                raise HTTPException(status_code=400, detail=MISSING_REFERENCE_DETAIL)

    def _load_equipment(self, equipment_ids: list[str]) -> list[Equipment]:
        unique_ids = list(dict.fromkeys(equipment_ids))
        equipment = self.repo.get_equipment(self.db, unique_ids)
        if len(equipment) != len(unique_ids):
            raise HTTPException(status_code=400, detail="One or more equipment items do not exist")
        return equipment

    def _handle_integrity_error(self, error: IntegrityError):
        self.db.rollback()
        message = str(error.orig).lower()
        logger.error(f"❌ Integrity error on work order: {error.orig}")
        if "fame_number" in message or "unique" in message:
            raise HTTPException(status_code=409, detail=DUPLICATE_FAME_DETAIL)
        raise HTTPException(status_code=400, detail=MISSING_REFERENCE_DETAIL)
