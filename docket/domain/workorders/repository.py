"""Work order repository - Database operations for work orders"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Equipment, Location, User, WorkOrder


class WorkOrderRepository:
    """Repository for work order database operations"""

    @staticmethod
    def list_work_orders(
        db: Session,
        status: Optional[str] = None,
        work_order_type: Optional[str] = None,
        assigned_to_id: Optional[str] = None,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> list[WorkOrder]:
        """List work orders ordered by start date, optionally overlapping a time window"""
        query = db.query(WorkOrder).options(
            joinedload(WorkOrder.assigned_to), joinedload(WorkOrder.supervisor)
        )

        if status:
            query = query.filter(WorkOrder.status == status)
        if work_order_type:
            query = query.filter(WorkOrder.type == work_order_type)
        if assigned_to_id:
            query = query.filter(WorkOrder.assigned_to_id == assigned_to_id)
        if window_end is not None:
            query = query.filter(WorkOrder.start_date < window_end)
        if window_start is not None:
            query = query.filter(
                func.coalesce(WorkOrder.end_date, WorkOrder.start_date) >= window_start
            )

        return query.order_by(WorkOrder.start_date.asc()).all()

    @staticmethod
    def get_by_id(db: Session, work_order_id: str) -> Optional[WorkOrder]:
        """Get a work order with its people, locations and equipment"""
        return (
            db.query(WorkOrder)
            .options(
                joinedload(WorkOrder.assigned_to),
                joinedload(WorkOrder.supervisor),
                joinedload(WorkOrder.pickup_location),
                joinedload(WorkOrder.delivery_location),
                selectinload(WorkOrder.equipment),
            )
            .filter(WorkOrder.id == work_order_id)
            .first()
        )

    @staticmethod
    def get_by_fame_number(db: Session, fame_number: str) -> Optional[WorkOrder]:
        return db.query(WorkOrder).filter(WorkOrder.fame_number == fame_number).first()

    @staticmethod
    def create(db: Session, equipment: list[Equipment], **work_order_data) -> WorkOrder:
        work_order = WorkOrder(**work_order_data)
        work_order.equipment = equipment
        db.add(work_order)
        db.commit()
        db.refresh(work_order)
        return work_order

    @staticmethod
    def update(db: Session, work_order: WorkOrder, **updates) -> WorkOrder:
        """Apply updates; a None value clears the column"""
        for key, value in updates.items():
            if hasattr(work_order, key):
                setattr(work_order, key, value)

        db.commit()
        db.refresh(work_order)
        return work_order

    @staticmethod
    def delete(db: Session, work_order: WorkOrder) -> None:
        db.delete(work_order)
        db.commit()

    # Reference lookups
    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def location_exists(db: Session, location_id: str) -> bool:
        return db.query(Location.id).filter(Location.id == location_id).first() is not None

    @staticmethod
    def get_equipment(db: Session, equipment_ids: list[str]) -> list[Equipment]:
        if not equipment_ids:
            return []
        return db.query(Equipment).filter(Equipment.id.in_(equipment_ids)).all()
