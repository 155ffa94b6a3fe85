"""Location schemas"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import blank_to_none


class LocationCreate(BaseModel):
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None

    @field_validator("name")
    @classmethod
    def required_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Location name cannot be empty")
        return v

    @field_validator("address", "city", "state", "zipCode")
    @classmethod
    def blank_text(cls, v):
        return blank_to_none(v)


class LocationResponse(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None

    @classmethod
    def from_location(cls, location) -> "LocationResponse":
        return cls(
            id=location.id,
            name=location.name,
            address=location.address,
            city=location.city,
            state=location.state,
            zipCode=location.zip_code,
        )
