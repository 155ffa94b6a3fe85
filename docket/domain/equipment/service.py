"""Equipment service - Business logic for the fleet"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Document, Equipment, Note, User
from .repository import EquipmentRepository
from .schemas import DocumentCreate, EquipmentCreate, EquipmentUpdate, NoteCreate

logger = logging.getLogger(__name__)

DUPLICATE_SERIAL_DETAIL = "Equipment with this serial number already exists"


class EquipmentService:
    """Service layer for equipment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EquipmentRepository()

    def get_equipment_list(self, equipment_type=None, status=None) -> list[Equipment]:
        return self.repo.get_equipment_list(self.db, equipment_type, status)

    def get_equipment(self, equipment_id: str) -> Equipment:
        equipment = self.repo.get_equipment_by_id(self.db, equipment_id)
        if not equipment:
            raise HTTPException(status_code=404, detail="Equipment not found")
        return equipment

    def create_equipment(self, data: EquipmentCreate, user: User) -> Equipment:
        logger.info(f"📥 Creating equipment '{data.name}' for user_id: {user.id}")

        if data.serialNumber and self.repo.get_by_serial_number(self.db, data.serialNumber):
            raise HTTPException(status_code=409, detail=DUPLICATE_SERIAL_DETAIL)
        self._check_location(data.locationId)

        equipment_data = {
            "name": data.name,
            "type": data.type.value,
            "status": data.status.value,
            "license_plate": data.licensePlate,
            "serial_number": data.serialNumber,
            "description": data.description,
            "location_id": data.locationId,
        }
        try:
            equipment = self.repo.create_equipment(self.db, **equipment_data)
        except IntegrityError as e:
            self._handle_integrity_error(e)

        return self.get_equipment(equipment.id)

    def update_equipment(self, equipment_id: str, data: EquipmentUpdate) -> Equipment:
        equipment = self.get_equipment(equipment_id)
        supplied = data.model_fields_set

        updates = {}
        if data.name is not None:
            updates["name"] = data.name
        if data.type is not None:
            updates["type"] = data.type.value
        if data.status is not None:
            updates["status"] = data.status.value
        if data.serialNumber is not None and data.serialNumber != equipment.serial_number:
            if self.repo.get_by_serial_number(self.db, data.serialNumber):
                raise HTTPException(status_code=409, detail=DUPLICATE_SERIAL_DETAIL)
        if "locationId" in supplied:
            self._check_location(data.locationId)

        # Nullable fields can be cleared by sending null
        for field, column in (
            ("licensePlate", "license_plate"),
            ("serialNumber", "serial_number"),
            ("description", "description"),
            ("locationId", "location_id"),
        ):
            if field in supplied:
                updates[column] = getattr(data, field)

        try:
            self.repo.update_equipment(self.db, equipment, **updates)
        except IntegrityError as e:
            self._handle_integrity_error(e)

        logger.info(f"✏️ Equipment {equipment_id} updated: {sorted(updates)}")
        return self.get_equipment(equipment_id)

    def delete_equipment(self, equipment_id: str) -> None:
        equipment = self.get_equipment(equipment_id)
        self.repo.delete_equipment(self.db, equipment)

    def add_note(self, equipment_id: str, data: NoteCreate, user: User) -> Note:
        self.get_equipment(equipment_id)
        note = self.repo.add_note(self.db, equipment_id, user.id, data.content)
        logger.info(f"📝 Note added to equipment {equipment_id} by {user.email}")
        return note

    def add_document(self, equipment_id: str, data: DocumentCreate) -> Document:
        self.get_equipment(equipment_id)
        document = self.repo.add_document(self.db, equipment_id, data.name, data.url)
        logger.info(f"📎 Document '{data.name}' attached to equipment {equipment_id}")
        return document

    def _check_location(self, location_id):
        if location_id and not self.repo.location_exists(self.db, location_id):
            raise HTTPException(status_code=400, detail="Location not found")

    def _handle_integrity_error(self, error: IntegrityError):
        self.db.rollback()
        logger.error(f"❌ Integrity error on equipment: {error.orig}")
        if "serial_number" in str(error.orig).lower():
            raise HTTPException(status_code=409, detail=DUPLICATE_SERIAL_DETAIL)
        raise HTTPException(status_code=400, detail="Referenced location does not exist")
