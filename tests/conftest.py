import os
import tempfile

# Configure the app before it is imported
_tmp_dir = tempfile.mkdtemp(prefix="docket-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_tmp_dir}/test.db"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEFAULT_TZ_OFFSET_MINUTES"] = "0"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from docket.database import Base, SessionLocal, engine
from docket.main import app
from docket.models import Location, User, UserRole
from docket.routes.auth import issue_token
from docket.security_utils import hash_password

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def make_user(db, email, role, first_name="Test", last_name="User", phone=None) -> User:
    user = User(
        email=email,
        password_hash=hash_password(PASSWORD),
        first_name=first_name,
        last_name=last_name,
        role=role.value,
        phone=phone,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def admin(db) -> User:
    return make_user(db, "admin@example.com", UserRole.ADMIN, "Admin", "User")


@pytest.fixture
def supervisor(db) -> User:
    return make_user(db, "supervisor@example.com", UserRole.SUPERVISOR, "Super", "Visor")


@pytest.fixture
def technician(db) -> User:
    return make_user(db, "tech@example.com", UserRole.TECHNICIAN, "Tech", "Nician")


@pytest.fixture
def admin_headers(admin) -> dict:
    return headers_for(admin)


@pytest.fixture
def supervisor_headers(supervisor) -> dict:
    return headers_for(supervisor)


@pytest.fixture
def technician_headers(technician) -> dict:
    return headers_for(technician)


@pytest.fixture
def warehouse(db) -> Location:
    location = Location(name="Main Warehouse", city="San Francisco", state="CA")
    db.add(location)
    db.commit()
    db.refresh(location)
    return location


@pytest.fixture
def work_order_payload(technician, supervisor):
    """A day job on 10 March 2024, 09:00-17:00 at UTC-5"""

    def build(**overrides):
        payload = {
            "type": "PICKUP",
            "fameNumber": "WO-2024-001",
            "clientName": "John Smith",
            "clientEmail": "john@example.com",
            "clientPhone": "555-0101",
            "startDate": "2024-03-10T00:00:00",
            "startHour": "09:00",
            "endHour": "17:00",
            "tzOffset": 300,
            "assignedToId": technician.id,
            "supervisorId": supervisor.id,
        }
        payload.update(overrides)
        return payload

    return build
