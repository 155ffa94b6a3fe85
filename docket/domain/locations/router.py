"""Location router - pickup/delivery sites and equipment yards"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_permission
from ...database import get_db
from ...models import Location, User
from ...permissions import Permission
from .schemas import LocationCreate, LocationResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("", response_model=list[LocationResponse])
async def get_locations(
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get all locations ordered by name"""
    locations = db.query(Location).order_by(Location.name.asc()).all()
    return [LocationResponse.from_location(loc) for loc in locations]


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: str,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    location = db.query(Location).filter(Location.id == location_id).first()
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return LocationResponse.from_location(location)


@router.post("", response_model=LocationResponse, status_code=201)
async def create_location(
    data: LocationCreate,
    current_user: User = Depends(require_permission(Permission.MANAGE_EQUIPMENT)),
    db: Session = Depends(get_db),
):
    """Create a new location"""
    location = Location(
        name=data.name,
        address=data.address,
        city=data.city,
        state=data.state,
        zip_code=data.zipCode,
    )
    db.add(location)
    db.commit()
    db.refresh(location)
    logger.info(f"📍 Location '{location.name}' created by {current_user.email}")
    return LocationResponse.from_location(location)
