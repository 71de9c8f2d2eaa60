import pytest
from sqlalchemy import text

from haven.core.exceptions import ErrorCode
from haven.models import Room, RoomStatus, Student
from haven.services.room import RoomOccupancyService, derive_status


@pytest.fixture
def ledger(db):
    return RoomOccupancyService(db)


def reload_room(db, room_id) -> Room:
    db.expire_all()
    return db.get(Room, room_id)


def test_scenario_fill_room_then_reject_third_resident(db, factory, ledger, admin):
    room = factory.room(capacity=2)
    s1, s2, s3 = factory.student(), factory.student(), factory.student()

    assert ledger.assign_student(admin, s1.id, room.id).is_success
    r = reload_room(db, room.id)
    assert (r.occupied, r.status) == (1, RoomStatus.AVAILABLE)

    assert ledger.assign_student(admin, s2.id, room.id).is_success
    r = reload_room(db, room.id)
    assert (r.occupied, r.status) == (2, RoomStatus.FILLED)

    result = ledger.assign_student(admin, s3.id, room.id)
    assert not result.is_success
    assert result.error_code is ErrorCode.CAPACITY_EXCEEDED
    assert reload_room(db, room.id).occupied == 2
    assert db.get(Student, s3.id).room_id is None


def test_moving_releases_previous_room(db, factory, ledger, admin):
    r1 = factory.room(capacity=1)
    r2 = factory.room(capacity=2)
    student = factory.student(room=r1)
    assert reload_room(db, r1.id).status is RoomStatus.FILLED

    assert ledger.assign_student(admin, student.id, r2.id).is_success

    old, new = reload_room(db, r1.id), db.get(Room, r2.id)
    assert (old.occupied, old.status) == (0, RoomStatus.AVAILABLE)
    assert (new.occupied, new.status) == (1, RoomStatus.AVAILABLE)
    assert db.get(Student, student.id).room_id == r2.id


def test_reassigning_to_current_room_is_a_noop_even_when_full(db, factory, ledger, admin):
    room = factory.room(capacity=1)
    student = factory.student(room=room)

    result = ledger.assign_student(admin, student.id, room.id)

    assert result.is_success
    assert reload_room(db, room.id).occupied == 1


def test_unassigning_vacates_seat(db, factory, ledger, admin):
    room = factory.room(capacity=2)
    student = factory.student(room=room)

    assert ledger.assign_student(admin, student.id, None).is_success
    assert reload_room(db, room.id).occupied == 0
    assert db.get(Student, student.id).room_id is None


def test_maintenance_room_rejects_new_residents(db, factory, ledger, admin):
    room = factory.room(status=RoomStatus.MAINTENANCE)
    student = factory.student()

    result = ledger.assign_student(admin, student.id, room.id)

    assert result.error_code is ErrorCode.ROOM_UNDER_MAINTENANCE
    assert reload_room(db, room.id).occupied == 0


def test_maintenance_is_not_cleared_when_room_empties(db, factory, ledger, admin):
    room = factory.room(capacity=2)
    student = factory.student(room=room)
    assert ledger.update_room(admin, room.id, {"status": RoomStatus.MAINTENANCE}).is_success

    assert ledger.assign_student(admin, student.id, None).is_success

    r = reload_room(db, room.id)
    assert (r.occupied, r.status) == (0, RoomStatus.MAINTENANCE)


def test_clearing_maintenance_rederives_status(db, factory, ledger, admin):
    room = factory.room(capacity=1)
    factory.student(room=room)
    ledger.update_room(admin, room.id, {"status": RoomStatus.MAINTENANCE})

    result = ledger.update_room(admin, room.id, {"status": RoomStatus.AVAILABLE})

    assert result.is_success
    assert reload_room(db, room.id).status is RoomStatus.FILLED


def test_store_guard_rejects_increment_on_stale_view(db, factory, ledger, admin):
    room = factory.room(capacity=2)
    factory.student(room=room)
    newcomer = factory.student()
    # Another session takes the last bed; this session's Room object is stale.
    assert db.get(Room, room.id).occupied == 1
    db.execute(text("UPDATE rooms SET occupied = 2 WHERE id = :id"), {"id": room.id})

    result = ledger.assign_student(admin, newcomer.id, room.id)

    assert result.error_code is ErrorCode.CAPACITY_EXCEEDED


def test_assignment_requires_admin(factory, ledger, warden):
    room = factory.room()
    student = factory.student()
    assert ledger.assign_student(warden, student.id, room.id).error_code is ErrorCode.FORBIDDEN


def test_assigning_unknown_room_is_not_found(factory, ledger, admin):
    student = factory.student()
    assert ledger.assign_student(admin, student.id, "missing").error_code is ErrorCode.RESOURCE_NOT_FOUND


def test_occupancy_matches_referencing_students(db, factory, ledger, admin):
    rooms = [factory.room(capacity=2) for _ in range(3)]
    students = [factory.student() for _ in range(5)]
    moves = [(0, 0), (1, 0), (2, 1), (3, 1), (4, 0), (0, 2), (1, None), (4, 0), (2, 2)]

    for s_idx, r_idx in moves:
        ledger.assign_student(admin, students[s_idx].id, rooms[r_idx].id if r_idx is not None else None)

    db.expire_all()
    for room in rooms:
        r = db.get(Room, room.id)
        residents = db.query(Student).filter(Student.room_id == r.id).count()
        assert r.occupied == residents
        assert 0 <= r.occupied <= r.capacity
        assert r.status is derive_status(r)


# ---------------------------------------------------------------------------
# Room CRUD
# ---------------------------------------------------------------------------
def test_create_room(ledger, admin):
    result = ledger.create_room(admin, "101", "a", capacity=3)
    assert result.is_success
    room = result.data
    assert (room.block, room.occupied, room.status) == ("A", 0, RoomStatus.AVAILABLE)


def test_create_room_under_maintenance(ledger, admin):
    room = ledger.create_room(admin, "102", "A", under_maintenance=True).data
    assert room.status is RoomStatus.MAINTENANCE


@pytest.mark.parametrize(
    "kwargs, code",
    [
        ({"room_no": "1", "block": "A", "capacity": 0}, ErrorCode.VALIDATION_ERROR),
        ({"room_no": "1", "block": "A", "capacity": -2}, ErrorCode.VALIDATION_ERROR),
        ({"room_no": "1", "block": "Z", "capacity": 2}, ErrorCode.VALIDATION_ERROR),
    ],
)
def test_create_room_validation(ledger, admin, kwargs, code):
    assert ledger.create_room(admin, **kwargs).error_code is code


def test_duplicate_room_number_in_block(ledger, admin):
    assert ledger.create_room(admin, "101", "A").is_success
    assert ledger.create_room(admin, "101", "A").error_code is ErrorCode.ALREADY_EXISTS
    assert ledger.create_room(admin, "101", "B").is_success


def test_create_room_requires_admin(ledger, warden):
    assert ledger.create_room(warden, "101", "A").error_code is ErrorCode.FORBIDDEN


def test_shrinking_capacity_below_occupancy_fails(db, factory, ledger, admin):
    room = factory.room(capacity=3)
    factory.student(room=room)
    factory.student(room=room)

    result = ledger.update_room(admin, room.id, {"capacity": 1})

    assert result.error_code is ErrorCode.CAPACITY_BELOW_OCCUPANCY
    assert reload_room(db, room.id).capacity == 3


def test_shrinking_capacity_to_occupancy_fills_room(db, factory, ledger, admin):
    room = factory.room(capacity=3)
    factory.student(room=room)

    assert ledger.update_room(admin, room.id, {"capacity": 1}).is_success
    r = reload_room(db, room.id)
    assert (r.capacity, r.status) == (1, RoomStatus.FILLED)


def test_occupied_is_not_editable(factory, ledger, admin):
    room = factory.room()
    assert ledger.update_room(admin, room.id, {"occupied": 1}).error_code is ErrorCode.VALIDATION_ERROR


def test_delete_occupied_room_fails(db, factory, ledger, admin):
    room = factory.room(capacity=2)
    factory.student(room=room)

    result = ledger.delete_room(admin, room.id)

    assert result.error_code is ErrorCode.ROOM_NOT_EMPTY
    assert reload_room(db, room.id) is not None


def test_delete_empty_room(db, factory, ledger, admin):
    room = factory.room()
    assert ledger.delete_room(admin, room.id).is_success
    assert reload_room(db, room.id) is None


def test_vacancy_count_by_block(factory, ledger):
    a1 = factory.room(block="A", capacity=3)
    factory.room(block="A", capacity=2)
    factory.room(block="B", capacity=4)
    factory.student(room=a1)

    assert ledger.vacancy_count("A").data == 4
    assert ledger.vacancy_count("B").data == 4
    assert ledger.vacancy_count("C").data == 0
    assert ledger.vacancy_count().data == 8
