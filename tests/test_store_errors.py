from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from haven.core.exceptions import (
    ConflictError,
    ErrorCode,
    RelationMissing,
    ResourceNotFoundError,
    ValidationError,
)
from haven.models import AttendanceRecord, AttendanceStatus, UserRole
from haven.repositories import AttendanceRepository, ProfileRepository, RoomRepository
from haven.services.room import RoomOccupancyService


@pytest.fixture
def bare_session():
    """A session against a store where no tables were ever created."""
    engine = create_engine("sqlite://")
    session = Session(engine)
    yield session
    session.close()
    engine.dispose()


def test_missing_relation_is_reported_as_such(bare_session):
    with pytest.raises(RelationMissing) as exc_info:
        RoomRepository(bare_session).select()

    assert exc_info.value.collection == "rooms"
    assert exc_info.value.error_code is ErrorCode.RELATION_MISSING


def test_service_reports_missing_relation_as_failure(bare_session):
    result = RoomOccupancyService(bare_session).list_rooms()

    assert not result.is_success
    assert result.error_code is ErrorCode.RELATION_MISSING
    assert result.error.status_code == 503


def test_empty_select_is_not_an_error(db):
    assert RoomRepository(db).select({"block": "A"}) == []


def test_unknown_filter_field_is_rejected(db):
    with pytest.raises(ValidationError):
        RoomRepository(db).select({"floor": 3})


def test_unique_violation_becomes_conflict(db, factory):
    profile = factory.profile(UserRole.STUDENT)

    with pytest.raises(ConflictError):
        ProfileRepository(db).insert({"name": "Dup", "email": profile.email, "role": UserRole.STUDENT})
    db.rollback()


def test_missing_foreign_record_becomes_not_found(db):
    with pytest.raises(ResourceNotFoundError):
        AttendanceRepository(db).insert({
            "student_id": "ghost",
            "date": date(2024, 1, 1),
            "status": AttendanceStatus.PRESENT,
        })
    db.rollback()


def test_upsert_overwrites_on_conflict_keys(db, factory):
    student = factory.student()
    repo = AttendanceRepository(db)
    day = date(2024, 3, 11)

    first = repo.upsert_marks([student.id], day, AttendanceStatus.PRESENT)[0]
    second = repo.upsert_marks([student.id], day, AttendanceStatus.ABSENT)[0]
    db.commit()

    assert first.id == second.id
    rows = db.query(AttendanceRecord).all()
    assert [(r.student_id, r.status) for r in rows] == [(student.id, AttendanceStatus.ABSENT)]


def test_get_or_raise(db):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        RoomRepository(db).get_or_raise("nope", "Room")
    assert exc_info.value.status_code == 404
