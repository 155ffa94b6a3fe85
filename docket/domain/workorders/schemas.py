"""Work order domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ...models import WorkOrderStatus, WorkOrderType
from ...schemas import UserSummary, UTCDateTime
from ...shared.validators import blank_to_none, validate_email, validate_phone
from ..locations.schemas import LocationResponse


def _empty_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class WorkOrderFields(BaseModel):
    """Validators shared by create and update payloads"""

    @field_validator(
        "endDate",
        "pickupLocationId",
        "deliveryLocationId",
        "supervisorId",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def blank_optional(cls, v):
        return _empty_to_none(v)

    @field_validator("clientEmail", check_fields=False)
    @classmethod
    def check_email(cls, v):
        return validate_email(blank_to_none(v))

    @field_validator("clientPhone", check_fields=False)
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator(
        "title", "clientContactName", "location", "noteText", check_fields=False
    )
    @classmethod
    def blank_text(cls, v):
        return blank_to_none(v)


class WorkOrderCreate(WorkOrderFields):
    """Schema for creating a new work order"""

    type: WorkOrderType
    fameNumber: str
    clientName: str
    title: Optional[str] = None
    status: WorkOrderStatus = WorkOrderStatus.PENDING
    clientContactName: Optional[str] = None
    clientEmail: Optional[str] = None
    clientPhone: Optional[str] = None
    startDate: datetime
    endDate: Optional[datetime] = None
    startHour: Optional[str] = None
    endHour: Optional[str] = None
    tzOffset: Optional[int] = None
    location: Optional[str] = None
    noteText: Optional[str] = None
    assignedToId: str
    supervisorId: Optional[str] = None
    pickupLocationId: Optional[str] = None
    deliveryLocationId: Optional[str] = None
    equipmentIds: list[str] = []

    @field_validator("fameNumber", "clientName")
    @classmethod
    def required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v


class WorkOrderUpdate(WorkOrderFields):
    """Schema for updating a work order; omitted fields are left untouched"""

    type: Optional[WorkOrderType] = None
    status: Optional[WorkOrderStatus] = None
    fameNumber: Optional[str] = None
    title: Optional[str] = None
    clientName: Optional[str] = None
    clientContactName: Optional[str] = None
    clientEmail: Optional[str] = None
    clientPhone: Optional[str] = None
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None
    startHour: Optional[str] = None
    endHour: Optional[str] = None
    tzOffset: Optional[int] = None
    location: Optional[str] = None
    noteText: Optional[str] = None
    assignedToId: Optional[str] = None
    supervisorId: Optional[str] = None
    pickupLocationId: Optional[str] = None
    deliveryLocationId: Optional[str] = None
    equipmentIds: Optional[list[str]] = None

    @field_validator("startDate", "assignedToId", "fameNumber", "clientName", mode="before")
    @classmethod
    def blank_means_unchanged(cls, v):
        return _empty_to_none(v)


class AssignmentUpdate(BaseModel):
    """Supervisor assignment of crew and equipment"""

    assignedToId: Optional[str] = None
    supervisorId: Optional[str] = None
    equipmentIds: Optional[list[str]] = None


class EquipmentSummary(BaseModel):
    id: str
    name: str
    type: str
    status: str
    licensePlate: Optional[str] = None


class WorkOrderResponse(BaseModel):
    """Schema for work order response"""

    id: str
    title: Optional[str] = None
    fameNumber: str
    type: str
    status: str
    clientName: str
    clientContactName: Optional[str] = None
    clientEmail: Optional[str] = None
    clientPhone: Optional[str] = None
    startDate: UTCDateTime
    endDate: Optional[UTCDateTime] = None
    startHour: Optional[str] = None
    endHour: Optional[str] = None
    location: Optional[str] = None
    noteText: Optional[str] = None
    assignedToId: str
    supervisorId: Optional[str] = None
    createdById: str
    pickupLocationId: Optional[str] = None
    deliveryLocationId: Optional[str] = None
    assignedTo: Optional[UserSummary] = None
    supervisor: Optional[UserSummary] = None
    createdAt: Optional[UTCDateTime] = None
    updatedAt: Optional[UTCDateTime] = None


class WorkOrderDetailResponse(WorkOrderResponse):
    pickupLocation: Optional[LocationResponse] = None
    deliveryLocation: Optional[LocationResponse] = None
    equipment: list[EquipmentSummary] = []


class WorkOrderUpdateResponse(BaseModel):
    data: WorkOrderDetailResponse
    success: bool = True


class WorkOrderFormData(BaseModel):
    """Work order as the edit form expects it: local-time strings, empty for missing values"""

    id: str
    title: str
    fameNumber: str
    type: str
    status: str
    startDate: str
    endDate: str
    startHour: str
    endHour: str
    clientName: str
    clientContactName: str
    clientEmail: str
    clientPhone: str
    location: str
    noteText: str
    pickupLocationId: str
    deliveryLocationId: str
    assignedToId: str
    supervisorId: str


class CalendarEventProps(BaseModel):
    type: str
    status: str
    fameNumber: str
    clientName: str
    clientEmail: Optional[str] = None
    clientPhone: Optional[str] = None
    assignedTo: str
    supervisor: str
    assignedToId: str
    supervisorId: Optional[str] = None
    startHour: Optional[str] = None
    endHour: Optional[str] = None


class CalendarEvent(BaseModel):
    id: str
    title: str
    start: UTCDateTime
    end: UTCDateTime
    backgroundColor: str
    borderColor: str
    extendedProps: CalendarEventProps
