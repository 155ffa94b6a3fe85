import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_permission
from ..database import get_db
from ..models import User, UserRole, WorkOrder
from ..permissions import Permission
from ..schemas import MessageResponse, UserListItem, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

ROLE_FILTERS = {
    "technicians": UserRole.TECHNICIAN,
    "technician": UserRole.TECHNICIAN,
    "supervisors": UserRole.SUPERVISOR,
    "supervisor": UserRole.SUPERVISOR,
    "admins": UserRole.ADMIN,
    "admin": UserRole.ADMIN,
}


def parse_role_filter(role: Optional[str]) -> Optional[UserRole]:
    """Map the dashboard's role filter to a role; anything unrecognised means no filter"""
    if not role:
        return None
    return ROLE_FILTERS.get(role.strip().lower())


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=list[UserListItem])
async def get_users(
    role: Optional[str] = Query(None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List users for pickers, optionally only one role"""
    query = db.query(User)
    role_filter = parse_role_filter(role)
    if role_filter:
        query = query.filter(User.role == role_filter.value)

    users = query.order_by(User.first_name.asc()).all()
    return [UserListItem(id=u.id, name=u.full_name, role=u.role) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserResponse.from_user(get_user_or_404(db, user_id))


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(require_permission(Permission.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """Update name, phone or role"""
    user = get_user_or_404(db, user_id)

    if data.firstName is not None:
        user.first_name = data.firstName
    if data.lastName is not None:
        user.last_name = data.lastName
    if "phone" in data.model_fields_set:
        user.phone = data.phone
    if data.role is not None and data.role.value != user.role:
        logger.info(f"🔑 {current_user.email} changed role of {user.email}: {user.role} -> {data.role.value}")
        user.role = data.role.value

    db.commit()
    db.refresh(user)
    return UserResponse.from_user(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_permission(Permission.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    user = get_user_or_404(db, user_id)

    referenced = (
        db.query(WorkOrder.id)
        .filter(
            or_(
                WorkOrder.assigned_to_id == user.id,
                WorkOrder.supervisor_id == user.id,
                WorkOrder.created_by_id == user.id,
            )
        )
        .first()
    )
    if referenced:
        raise HTTPException(
            status_code=409,
            detail="User is still referenced by work orders. Reassign them before deleting.",
        )

    db.delete(user)
    db.commit()
    logger.info(f"🗑️ User {user.email} deleted by {current_user.email}")
    return {"message": "User deleted successfully"}
