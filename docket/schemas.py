from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer, field_validator

from .models import UserRole
from .security_utils import MIN_PASSWORD_LENGTH
from .shared.validators import blank_to_none, validate_email, validate_phone


def _serialize_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# Stored datetimes are naive UTC; say so on the wire
UTCDateTime = Annotated[datetime, PlainSerializer(_serialize_utc, return_type=str, when_used="json")]


class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    id: str
    firstName: str
    lastName: str


class UserListItem(BaseModel):
    id: str
    name: str
    role: str


class UserResponse(BaseModel):
    id: str
    email: str
    firstName: str
    lastName: str
    role: str
    phone: Optional[str] = None
    createdAt: Optional[UTCDateTime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            firstName=user.first_name,
            lastName=user.last_name,
            role=user.role,
            phone=user.phone,
            createdAt=user.created_at,
        )


class RegisterRequest(BaseModel):
    email: str
    password: str
    firstName: str
    lastName: str
    role: UserRole
    phone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return v

    @field_validator("firstName", "lastName")
    @classmethod
    def check_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    accessToken: str
    tokenType: str = "bearer"
    expiresIn: int
    user: UserResponse


class SessionResponse(BaseModel):
    user: UserResponse
    permissions: list[str]


class UserUpdate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("firstName", "lastName")
    @classmethod
    def check_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(blank_to_none(v))


class RegisterResponse(BaseModel):
    user: UserResponse


class CountSummary(BaseModel):
    total: int
    assigned: int
    available: int


class StatsResponse(BaseModel):
    trucks: CountSummary
    technicians: CountSummary
    hoursWorked: float
