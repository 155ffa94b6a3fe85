import enum
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate a unique string primary key"""
    return str(uuid.uuid4())


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    TECHNICIAN = "TECHNICIAN"


class WorkOrderType(str, enum.Enum):
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"
    SETUP = "SETUP"
    TEARDOWN = "TEARDOWN"
    ACTIVATION = "ACTIVATION"


class WorkOrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class EquipmentType(str, enum.Enum):
    TRUCK = "TRUCK"
    TRAILER = "TRAILER"
    GENERATOR = "GENERATOR"
    TOOL = "TOOL"
    OTHER = "OTHER"


class EquipmentStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    IN_USE = "IN_USE"
    MAINTENANCE = "MAINTENANCE"
    RETIRED = "RETIRED"


work_order_equipment = Table(
    "work_order_equipment",
    Base.metadata,
    Column(
        "work_order_id",
        String(36),
        ForeignKey("work_orders.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "equipment_id",
        String(36),
        ForeignKey("equipment.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(20), default=UserRole.TECHNICIAN.value, nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    assigned_orders = relationship(
        "WorkOrder", back_populates="assigned_to", foreign_keys="WorkOrder.assigned_to_id"
    )
    supervised_orders = relationship(
        "WorkOrder", back_populates="supervisor", foreign_keys="WorkOrder.supervisor_id"
    )
    created_orders = relationship(
        "WorkOrder", back_populates="created_by", foreign_keys="WorkOrder.created_by_id"
    )
    notes = relationship("Note", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Location(Base):
    __tablename__ = "locations"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(50), nullable=True)
    zip_code = Column(String(20), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    equipment = relationship("Equipment", back_populates="current_location")


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, index=True)  # TRUCK, TRAILER, ...
    status = Column(String(20), default=EquipmentStatus.AVAILABLE.value, nullable=False, index=True)
    license_plate = Column(String(50), nullable=True)
    serial_number = Column(String(100), unique=True, nullable=True)
    description = Column(Text, nullable=True)
    location_id = Column(String(36), ForeignKey("locations.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    current_location = relationship("Location", back_populates="equipment")
    work_orders = relationship(
        "WorkOrder", secondary=work_order_equipment, back_populates="equipment"
    )
    notes = relationship(
        "Note", back_populates="equipment", cascade="all, delete-orphan", order_by="Note.created_at"
    )
    documents = relationship("Document", back_populates="equipment", cascade="all, delete-orphan")


class WorkOrder(Base):
    __tablename__ = "work_orders"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(255), nullable=True)
    fame_number = Column(String(100), unique=True, index=True, nullable=False)  # FAME system reference
    type = Column(String(20), nullable=False)
    status = Column(String(20), default=WorkOrderStatus.PENDING.value, nullable=False, index=True)

    # Client
    client_name = Column(String(255), nullable=False)
    client_contact_name = Column(String(255), nullable=True)
    client_email = Column(String(255), nullable=True)
    client_phone = Column(String(50), nullable=True)

    # Scheduling: stored as naive UTC, hours as local "HH:MM"
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=True)
    start_hour = Column(String(10), nullable=True)
    end_hour = Column(String(10), nullable=True)

    location = Column(String(500), nullable=True)
    note_text = Column(Text, nullable=True)

    pickup_location_id = Column(String(36), ForeignKey("locations.id"), nullable=True)
    delivery_location_id = Column(String(36), ForeignKey("locations.id"), nullable=True)
    assigned_to_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    supervisor_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    assigned_to = relationship("User", back_populates="assigned_orders", foreign_keys=[assigned_to_id])
    supervisor = relationship("User", back_populates="supervised_orders", foreign_keys=[supervisor_id])
    created_by = relationship("User", back_populates="created_orders", foreign_keys=[created_by_id])
    pickup_location = relationship("Location", foreign_keys=[pickup_location_id])
    delivery_location = relationship("Location", foreign_keys=[delivery_location_id])
    equipment = relationship(
        "Equipment", secondary=work_order_equipment, back_populates="work_orders"
    )


class Note(Base):
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=generate_id)
    content = Column(Text, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    equipment_id = Column(String(36), ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="notes")
    equipment = relationship("Equipment", back_populates="notes")


class Document(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    url = Column(String(1000), nullable=False)
    equipment_id = Column(String(36), ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False)
    uploaded_at = Column(DateTime, server_default=func.now())

    equipment = relationship("Equipment", back_populates="documents")
