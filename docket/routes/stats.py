import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..domain.workorders.service import resolve_tz_offset
from ..domain.workorders.time_calculator import hours_between, local_day_start
from ..models import Equipment, EquipmentStatus, EquipmentType, User, UserRole, WorkOrder, WorkOrderStatus
from ..schemas import CountSummary, StatsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["Stats"])

CLOSED_STATUSES = (WorkOrderStatus.COMPLETED.value, WorkOrderStatus.CANCELLED.value)


def truck_counts(db: Session) -> CountSummary:
    total = db.query(func.count(Equipment.id)).filter(Equipment.type == EquipmentType.TRUCK.value).scalar()
    assigned = (
        db.query(func.count(Equipment.id))
        .filter(
            Equipment.type == EquipmentType.TRUCK.value,
            Equipment.status == EquipmentStatus.IN_USE.value,
        )
        .scalar()
    )
    return CountSummary(total=total, assigned=assigned, available=total - assigned)


def technician_counts(db: Session) -> CountSummary:
    total = db.query(func.count(User.id)).filter(User.role == UserRole.TECHNICIAN.value).scalar()
    assigned = (
        db.query(func.count(func.distinct(WorkOrder.assigned_to_id)))
        .join(User, User.id == WorkOrder.assigned_to_id)
        .filter(
            User.role == UserRole.TECHNICIAN.value,
            WorkOrder.status.notin_(CLOSED_STATUSES),
        )
        .scalar()
    )
    return CountSummary(total=total, assigned=assigned, available=total - assigned)


def hours_worked_since(db: Session, since: datetime) -> float:
    completed = (
        db.query(WorkOrder.start_date, WorkOrder.end_date)
        .filter(
            WorkOrder.status == WorkOrderStatus.COMPLETED.value,
            WorkOrder.end_date.isnot(None),
            WorkOrder.end_date >= since,
        )
        .all()
    )
    return round(sum(hours_between(start, end) for start, end in completed), 1)


@router.get("", response_model=StatsResponse)
async def get_stats(
    tzOffset: Optional[int] = Query(None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Dashboard counters for trucks, technicians and today's completed hours"""
    offset = resolve_tz_offset(tzOffset)
    today = local_day_start(datetime.now(timezone.utc), offset)

    return StatsResponse(
        trucks=truck_counts(db),
        technicians=technician_counts(db),
        hoursWorked=hours_worked_since(db, today),
    )
