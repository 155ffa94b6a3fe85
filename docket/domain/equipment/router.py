"""Equipment router - FastAPI endpoints for trucks, trailers and tools"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_permission
from ...database import get_db
from ...models import Document, Equipment, EquipmentStatus, EquipmentType, Note, User
from ...permissions import Permission
from ...schemas import MessageResponse
from ..locations.schemas import LocationResponse
from .schemas import (
    DocumentCreate,
    DocumentResponse,
    EquipmentCreate,
    EquipmentDetailResponse,
    EquipmentResponse,
    EquipmentUpdate,
    NoteCreate,
    NoteResponse,
)
from .service import EquipmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/equipments", tags=["Equipment"])


def get_equipment_service(db: Session = Depends(get_db)) -> EquipmentService:
    """Dependency injection for EquipmentService"""
    return EquipmentService(db)


def _note_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        content=note.content,
        userId=note.user_id,
        authorName=note.user.full_name if note.user else "",
        createdAt=note.created_at,
    )


def _document_response(document: Document) -> DocumentResponse:
    return DocumentResponse(
        id=document.id, name=document.name, url=document.url, uploadedAt=document.uploaded_at
    )


def _base_fields(e: Equipment) -> dict:
    return dict(
        id=e.id,
        name=e.name,
        type=e.type,
        status=e.status,
        licensePlate=e.license_plate,
        serialNumber=e.serial_number,
        description=e.description,
        locationId=e.location_id,
        currentLocation=LocationResponse.from_location(e.current_location) if e.current_location else None,
        workOrderIds=[wo.id for wo in e.work_orders],
        createdAt=e.created_at,
        updatedAt=e.updated_at,
    )


def _detail_response(e: Equipment) -> EquipmentDetailResponse:
    return EquipmentDetailResponse(
        **_base_fields(e),
        notes=[_note_response(n) for n in e.notes],
        documents=[_document_response(d) for d in e.documents],
    )


@router.get("", response_model=list[EquipmentResponse])
async def get_equipment_list(
    type: Optional[EquipmentType] = Query(None),
    status: Optional[EquipmentStatus] = Query(None),
    _: User = Depends(get_current_user),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Get all equipment ordered by name"""
    equipment = service.get_equipment_list(
        equipment_type=type.value if type else None,
        status=status.value if status else None,
    )
    return [EquipmentResponse(**_base_fields(e)) for e in equipment]


@router.get("/{equipment_id}", response_model=EquipmentDetailResponse)
async def get_equipment(
    equipment_id: str,
    _: User = Depends(get_current_user),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Get equipment with notes and documents"""
    return _detail_response(service.get_equipment(equipment_id))


@router.post("", response_model=EquipmentDetailResponse, status_code=201)
async def create_equipment(
    data: EquipmentCreate,
    current_user: User = Depends(require_permission(Permission.MANAGE_EQUIPMENT)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Create new equipment"""
    return _detail_response(service.create_equipment(data, current_user))


@router.put("/{equipment_id}", response_model=EquipmentDetailResponse)
async def update_equipment(
    equipment_id: str,
    data: EquipmentUpdate,
    _: User = Depends(require_permission(Permission.MANAGE_EQUIPMENT)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Update equipment"""
    return _detail_response(service.update_equipment(equipment_id, data))


@router.delete("/{equipment_id}", response_model=MessageResponse)
async def delete_equipment(
    equipment_id: str,
    current_user: User = Depends(require_permission(Permission.MANAGE_EQUIPMENT)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Delete equipment along with its notes and documents"""
    service.delete_equipment(equipment_id)
    logger.info(f"🗑️ Equipment {equipment_id} deleted by {current_user.email}")
    return {"message": "Equipment deleted successfully"}


@router.post("/{equipment_id}/notes", response_model=NoteResponse, status_code=201)
async def add_note(
    equipment_id: str,
    data: NoteCreate,
    current_user: User = Depends(get_current_user),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Add a note to equipment"""
    return _note_response(service.add_note(equipment_id, data, current_user))


@router.post("/{equipment_id}/documents", response_model=DocumentResponse, status_code=201)
async def add_document(
    equipment_id: str,
    data: DocumentCreate,
    _: User = Depends(require_permission(Permission.MANAGE_EQUIPMENT)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Attach a document link to equipment"""
    return _document_response(service.add_document(equipment_id, data))
