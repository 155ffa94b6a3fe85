"""
Demo data for local development

Users are upserted by email and work orders by FAME number, so running the
seed twice refreshes the same rows instead of duplicating them.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from .config import DEFAULT_TZ_OFFSET_MINUTES
from .database import Base, SessionLocal, engine
from .domain.workorders.time_calculator import format_local_hour, from_local, to_local
from .models import (
    Equipment,
    EquipmentStatus,
    EquipmentType,
    Location,
    User,
    UserRole,
    WorkOrder,
    WorkOrderStatus,
    WorkOrderType,
)
from .security_utils import hash_password

logger = logging.getLogger(__name__)

# (email, password, first name, last name, role, phone)
USERS = [
    ("admin@example.com", "admin123", "Admin", "User", UserRole.ADMIN, "123-456-7890"),
    ("supervisor@example.com", "super1234", "Super", "Visor", UserRole.SUPERVISOR, "123-456-7891"),
    ("supervisor2@example.com", "super1234", "Robert", "Martinez", UserRole.SUPERVISOR, "123-456-7898"),
    ("supervisor3@example.com", "super1234", "Jennifer", "Taylor", UserRole.SUPERVISOR, "123-456-7899"),
    ("tech@example.com", "tech1234", "Tech", "Nician", UserRole.TECHNICIAN, "123-456-7892"),
    ("tech2@example.com", "tech1234", "Sarah", "Johnson", UserRole.TECHNICIAN, "123-456-7893"),
    ("tech3@example.com", "tech1234", "Michael", "Chen", UserRole.TECHNICIAN, "123-456-7894"),
    ("tech4@example.com", "tech1234", "Emily", "Davis", UserRole.TECHNICIAN, "123-456-7895"),
    ("tech5@example.com", "tech1234", "James", "Wilson", UserRole.TECHNICIAN, "123-456-7896"),
    ("tech6@example.com", "tech1234", "Lisa", "Brown", UserRole.TECHNICIAN, "123-456-7897"),
]

# (name, address, city, state, zip)
LOCATIONS = [
    ("Main Warehouse", "123 Warehouse St", "San Francisco", "CA", "94105"),
    ("Convention Center", "456 Event Ave", "San Francisco", "CA", "94111"),
    ("South Warehouse", "456 Industrial Blvd", "San Jose", "CA", "95110"),
    ("East Warehouse", "789 Distribution Way", "Oakland", "CA", "94601"),
    ("North Warehouse", "321 Logistics Ave", "Sacramento", "CA", "95814"),
]

# (name, type, status, license plate, serial number)
EQUIPMENT = [
    ("Box Truck 1", EquipmentType.TRUCK, EquipmentStatus.IN_USE, "7ABC123", "TRK-0001"),
    ("Box Truck 2", EquipmentType.TRUCK, EquipmentStatus.AVAILABLE, "7ABC124", "TRK-0002"),
    ("Flatbed Truck", EquipmentType.TRUCK, EquipmentStatus.MAINTENANCE, "7ABC125", "TRK-0003"),
    ("Stage Trailer", EquipmentType.TRAILER, EquipmentStatus.AVAILABLE, "4TRL001", "TRL-0001"),
    ("20kW Generator", EquipmentType.GENERATOR, EquipmentStatus.AVAILABLE, None, "GEN-0001"),
]

# (fame number, type, status, client, phone, email, (day, hour) start, (day, hour) end)
WORK_ORDERS = [
    ("WO-2024-001", WorkOrderType.PICKUP, WorkOrderStatus.PENDING, "John Smith", "555-0101", "john@example.com", (0, 8), (0, 12)),
    ("WO-2024-002", WorkOrderType.SETUP, WorkOrderStatus.IN_PROGRESS, "Jane Doe", "555-0102", "jane@example.com", (0, 13), (0, 17)),
    ("WO-2024-003", WorkOrderType.DELIVERY, WorkOrderStatus.PENDING, "Bob Wilson", "555-0103", "bob@example.com", (1, 9), (1, 15)),
    ("WO-2024-004", WorkOrderType.ACTIVATION, WorkOrderStatus.PENDING, "Alice Johnson", "555-0104", "alice@example.com", (2, 10), (2, 16)),
    ("WO-2024-005", WorkOrderType.TEARDOWN, WorkOrderStatus.PENDING, "Charlie Brown", "555-0105", "charlie@example.com", (2, 14), (2, 20)),
    ("WO-2024-006", WorkOrderType.PICKUP, WorkOrderStatus.PENDING, "David Miller", "555-0106", "david@example.com", (3, 8), (3, 14)),
    ("WO-2024-007", WorkOrderType.SETUP, WorkOrderStatus.PENDING, "Eva White", "555-0107", "eva@example.com", (3, 15), (3, 21)),
    ("WO-2024-008", WorkOrderType.DELIVERY, WorkOrderStatus.PENDING, "Frank Thomas", "555-0108", "frank@example.com", (4, 9), (4, 15)),
    ("WO-2024-009", WorkOrderType.ACTIVATION, WorkOrderStatus.PENDING, "Grace Lee", "555-0109", "grace@example.com", (4, 16), (4, 22)),
    ("WO-2024-010", WorkOrderType.TEARDOWN, WorkOrderStatus.PENDING, "Henry Wilson", "555-0110", "henry@example.com", (5, 10), (5, 16)),
]


def create_date_time(days_from_now: int, hour: int, tz_offset: int, now: datetime) -> datetime:
    """Naive UTC for `hour` o'clock local time, `days_from_now` days ahead"""
    local_now = to_local(now.astimezone(timezone.utc).replace(tzinfo=None), tz_offset)
    local = (local_now + timedelta(days=days_from_now)).replace(hour=hour, minute=0, second=0, microsecond=0)
    return from_local(local, tz_offset)


def upsert_user(db: Session, email, password, first_name, last_name, role, phone) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email)
        db.add(user)
    user.password_hash = hash_password(password)
    user.first_name = first_name
    user.last_name = last_name
    user.role = role.value
    user.phone = phone
    return user


def get_or_create_location(db: Session, name, address, city, state, zip_code) -> Location:
    location = db.query(Location).filter(Location.name == name).first()
    if location is None:
        location = Location(name=name, address=address, city=city, state=state, zip_code=zip_code)
        db.add(location)
    return location


def get_or_create_equipment(db: Session, name, equipment_type, status, plate, serial, location) -> Equipment:
    equipment = db.query(Equipment).filter(Equipment.serial_number == serial).first()
    if equipment is None:
        equipment = Equipment(
            name=name,
            type=equipment_type.value,
            status=status.value,
            license_plate=plate,
            serial_number=serial,
            current_location=location,
        )
        db.add(equipment)
    return equipment


def seed(db: Session, tz_offset: int = DEFAULT_TZ_OFFSET_MINUTES, now: Optional[datetime] = None) -> None:
    now = now or datetime.now(timezone.utc)

    users = {row[0]: upsert_user(db, *row) for row in USERS}
    locations = {row[0]: get_or_create_location(db, *row) for row in LOCATIONS}
    db.flush()

    warehouse = locations["Main Warehouse"]
    venue = locations["Convention Center"]
    fleet = [get_or_create_equipment(db, *row, location=warehouse) for row in EQUIPMENT]
    db.flush()

    admin = users["admin@example.com"]
    supervisor = users["supervisor@example.com"]
    technician = users["tech@example.com"]

    for fame_number, wo_type, status, client, phone, email, start, end in WORK_ORDERS:
        start_date = create_date_time(*start, tz_offset, now)
        end_date = create_date_time(*end, tz_offset, now)

        work_order = db.query(WorkOrder).filter(WorkOrder.fame_number == fame_number).first()
        if work_order is None:
            work_order = WorkOrder(fame_number=fame_number)
            db.add(work_order)

        work_order.type = wo_type.value
        work_order.status = status.value
        work_order.client_name = client
        work_order.client_phone = phone
        work_order.client_email = email
        work_order.start_date = start_date
        work_order.end_date = end_date
        work_order.start_hour = format_local_hour(start_date, tz_offset)
        work_order.end_hour = format_local_hour(end_date, tz_offset)
        work_order.pickup_location_id = warehouse.id
        work_order.delivery_location_id = venue.id
        work_order.assigned_to_id = technician.id
        work_order.supervisor_id = supervisor.id
        work_order.created_by_id = admin.id

        if fame_number == "WO-2024-002":
            work_order.equipment = [fleet[0]]

    db.commit()
    logger.info(
        f"🌱 Seeded {len(USERS)} users, {len(LOCATIONS)} locations, "
        f"{len(EQUIPMENT)} equipment items and {len(WORK_ORDERS)} work orders"
    )


def run_seed() -> None:
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        seed(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
