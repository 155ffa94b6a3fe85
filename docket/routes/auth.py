import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_permission
from ..config import ACCESS_TOKEN_EXPIRE_MINUTES, LOGIN_RATE_LIMIT, LOGIN_RATE_WINDOW_SECONDS
from ..database import get_db
from ..models import User
from ..permissions import Permission, permissions_for
from ..rate_limiter import create_rate_limiter
from ..schemas import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    TokenResponse,
    UserResponse,
)
from ..security_utils import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

login_rate_limit = create_rate_limiter(
    limit=LOGIN_RATE_LIMIT, window_seconds=LOGIN_RATE_WINDOW_SECONDS, key_prefix="login"
)

INVALID_CREDENTIALS = "Invalid email or password"


def issue_token(user: User) -> str:
    return create_access_token(
        {
            "sub": user.id,
            "role": user.role,
            "firstName": user.first_name,
            "lastName": user.last_name,
        }
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(login_rate_limit),
    db: Session = Depends(get_db),
):
    """Exchange email and password for a bearer token"""
    email = data.email.strip().lower()
    user = db.query(User).filter(func.lower(User.email) == email).first()

    # Same answer for unknown email and wrong password
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning(f"🔐 Failed login attempt for {email}")
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    logger.info(f"✅ {user.email} signed in ({user.role})")
    return TokenResponse(
        accessToken=issue_token(user),
        expiresIn=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.from_user(user),
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    data: RegisterRequest,
    current_user: User = Depends(require_permission(Permission.MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """Create an account for a new admin, supervisor or technician"""
    if db.query(User).filter(func.lower(User.email) == data.email).first():
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
        first_name=data.firstName,
        last_name=data.lastName,
        role=data.role.value,
        phone=data.phone,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"👤 {current_user.email} registered {user.email} as {user.role}")
    return RegisterResponse(user=UserResponse.from_user(user))


@router.get("/session", response_model=SessionResponse)
async def get_session(current_user: User = Depends(get_current_user)):
    """Current user and the permissions their role grants"""
    return SessionResponse(
        user=UserResponse.from_user(current_user),
        permissions=[p.value for p in permissions_for(current_user.role)],
    )
