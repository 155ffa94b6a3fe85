"""Equipment domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import EquipmentStatus, EquipmentType
from ...schemas import UTCDateTime
from ...shared.validators import blank_to_none
from ..locations.schemas import LocationResponse


class EquipmentCreate(BaseModel):
    """Schema for creating equipment"""

    name: str
    type: EquipmentType
    status: EquipmentStatus = EquipmentStatus.AVAILABLE
    licensePlate: Optional[str] = None
    serialNumber: Optional[str] = None
    description: Optional[str] = None
    locationId: Optional[str] = None

    @field_validator("name")
    @classmethod
    def required_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Equipment name cannot be empty")
        return v

    @field_validator("licensePlate", "serialNumber", "description", "locationId")
    @classmethod
    def blank_text(cls, v):
        return blank_to_none(v)


class EquipmentUpdate(BaseModel):
    """Schema for updating equipment; omitted fields are left untouched"""

    name: Optional[str] = None
    type: Optional[EquipmentType] = None
    status: Optional[EquipmentStatus] = None
    licensePlate: Optional[str] = None
    serialNumber: Optional[str] = None
    description: Optional[str] = None
    locationId: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Equipment name cannot be empty")
        return v

    @field_validator("licensePlate", "serialNumber", "description", "locationId")
    @classmethod
    def blank_text(cls, v):
        return blank_to_none(v)


class NoteCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def required_content(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Note cannot be empty")
        return v


class DocumentCreate(BaseModel):
    name: str
    url: str

    @field_validator("name")
    @classmethod
    def required_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Document name cannot be empty")
        return v

    @field_validator("url")
    @classmethod
    def check_url(cls, v):
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Document URL must start with http:// or https://")
        return v


class NoteResponse(BaseModel):
    id: str
    content: str
    userId: str
    authorName: str
    createdAt: Optional[UTCDateTime] = None


class DocumentResponse(BaseModel):
    id: str
    name: str
    url: str
    uploadedAt: Optional[UTCDateTime] = None


class EquipmentResponse(BaseModel):
    """Schema for equipment response"""

    id: str
    name: str
    type: str
    status: str
    licensePlate: Optional[str] = None
    serialNumber: Optional[str] = None
    description: Optional[str] = None
    locationId: Optional[str] = None
    currentLocation: Optional[LocationResponse] = None
    workOrderIds: list[str] = []
    createdAt: Optional[UTCDateTime] = None
    updatedAt: Optional[UTCDateTime] = None


class EquipmentDetailResponse(EquipmentResponse):
    notes: list[NoteResponse] = []
    documents: list[DocumentResponse] = []
