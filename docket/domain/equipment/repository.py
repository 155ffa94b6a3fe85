"""Equipment repository - Database operations for equipment"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Document, Equipment, Location, Note


class EquipmentRepository:
    """Repository for equipment database operations"""

    @staticmethod
    def get_equipment_list(
        db: Session, equipment_type: Optional[str] = None, status: Optional[str] = None
    ) -> list[Equipment]:
        """Get all equipment, optionally filtered by type and status"""
        query = db.query(Equipment).options(
            joinedload(Equipment.current_location), selectinload(Equipment.work_orders)
        )

        if equipment_type:
            query = query.filter(Equipment.type == equipment_type)
        if status:
            query = query.filter(Equipment.status == status)

        return query.order_by(Equipment.name.asc()).all()

    @staticmethod
    def get_equipment_by_id(db: Session, equipment_id: str) -> Optional[Equipment]:
        """Get equipment with notes (and their authors) and documents"""
        return (
            db.query(Equipment)
            .options(
                joinedload(Equipment.current_location),
                selectinload(Equipment.work_orders),
                selectinload(Equipment.notes).joinedload(Note.user),
                selectinload(Equipment.documents),
            )
            .filter(Equipment.id == equipment_id)
            .first()
        )

    @staticmethod
    def get_by_serial_number(db: Session, serial_number: str) -> Optional[Equipment]:
        return db.query(Equipment).filter(Equipment.serial_number == serial_number).first()

    @staticmethod
    def location_exists(db: Session, location_id: str) -> bool:
        return db.query(Location.id).filter(Location.id == location_id).first() is not None

    @staticmethod
    def create_equipment(db: Session, **equipment_data) -> Equipment:
        equipment = Equipment(**equipment_data)
        db.add(equipment)
        db.commit()
        db.refresh(equipment)
        return equipment

    @staticmethod
    def update_equipment(db: Session, equipment: Equipment, **updates) -> Equipment:
        for key, value in updates.items():
            if hasattr(equipment, key):
                setattr(equipment, key, value)

        db.commit()
        db.refresh(equipment)
        return equipment

    @staticmethod
    def delete_equipment(db: Session, equipment: Equipment) -> None:
        db.delete(equipment)
        db.commit()

    @staticmethod
    def add_note(db: Session, equipment_id: str, user_id: str, content: str) -> Note:
        note = Note(equipment_id=equipment_id, user_id=user_id, content=content)
        db.add(note)
        db.commit()
        db.refresh(note)
        return note

    @staticmethod
    def add_document(db: Session, equipment_id: str, name: str, url: str) -> Document:
        document = Document(equipment_id=equipment_id, name=name, url=url)
        db.add(document)
        db.commit()
        db.refresh(document)
        return document
