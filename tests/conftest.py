import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-session-tokens-0123456789"
os.environ["PAYMENT_SIMULATION_DELAY_SECONDS"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from haven.api.deps import get_db
from haven.config.settings import Settings, get_settings
from haven.main import create_app
from haven.models import Base, FeeStatus, PaymentType, Profile, Room, RoomStatus, Student, UserRole
from haven.repositories import FeeRepository, ProfileRepository, RoomRepository, StudentRepository
from haven.services.auth import TokenService
from haven.services.common.permissions import Principal

get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.close()


class Factory:
    """Seeds rows directly through the repositories."""

    def __init__(self, session: Session):
        self.session = session
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def profile(
        self,
        role: UserRole = UserRole.STUDENT,
        assigned_block: Optional[str] = None,
        user_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Profile:
        n = self._next()
        profile = ProfileRepository(self.session).insert({
            "id": user_id or f"user-{n}",
            "name": name or f"{role.value.title()} {n}",
            "email": f"{role.value}{n}@haven.test",
            "role": role,
            "assigned_block": assigned_block,
        })
        self.session.commit()
        return profile

    def student(self, name: Optional[str] = None, room: Optional[Room] = None) -> Student:
        """Resident with a linked profile; seating goes through ``occupied`` too."""
        profile = self.profile(UserRole.STUDENT, name=name)
        student = StudentRepository(self.session).insert({
            "user_id": profile.id,
            "name": profile.name,
            "course": "B.Tech",
            "email": profile.email,
        })
        if room is not None:
            student.room_id = room.id
            room.occupied += 1
            if room.occupied == room.capacity and room.status is RoomStatus.AVAILABLE:
                room.status = RoomStatus.FILLED
        self.session.commit()
        return student

    def room(
        self,
        room_no: Optional[str] = None,
        block: str = "A",
        capacity: int = 2,
        status: RoomStatus = RoomStatus.AVAILABLE,
    ) -> Room:
        room = RoomRepository(self.session).insert({
            "room_no": room_no or str(100 + self._next()),
            "block": block,
            "capacity": capacity,
            "occupied": 0,
            "status": status,
        })
        self.session.commit()
        return room

    def fee(
        self,
        student: Student,
        amount: str = "8500",
        status: FeeStatus = FeeStatus.PENDING,
        due_date: Optional[date] = None,
    ):
        fee = FeeRepository(self.session).insert({
            "student_id": student.id,
            "amount": Decimal(amount),
            "payment_type": PaymentType.SEMI_ANNUAL,
            "due_date": due_date or date.today() + timedelta(days=30),
            "status": status,
        })
        self.session.commit()
        return fee


@pytest.fixture
def factory(db) -> Factory:
    return Factory(db)


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id="admin-1", role=UserRole.ADMIN)


@pytest.fixture
def warden() -> Principal:
    return Principal(user_id="warden-1", role=UserRole.WARDEN, assigned_block="A")


@pytest.fixture
def as_student():
    def build(student: Student) -> Principal:
        return Principal(user_id=student.user_id, role=UserRole.STUDENT)

    return build


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
@pytest.fixture
def client(session_factory, settings):
    app = create_app(settings)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(settings=settings)


@pytest.fixture
def auth_headers(tokens):
    def build(user_id: str, role: Optional[UserRole]) -> dict:
        return {"Authorization": f"Bearer {tokens.create_session_token(user_id, role)}"}

    return build
