from datetime import date

import pytest

from haven.core.exceptions import ErrorCode
from haven.models import (
    AttendanceRecord,
    AttendanceStatus,
    Complaint,
    ComplaintStatus,
    FeeRecord,
    Profile,
    Room,
    Student,
    UserRole,
)
from haven.schemas import SignupRequest
from haven.services.auth import ProfileService, RegistrationService
from haven.services.common.permissions import Principal
from haven.services.student import StudentService


@pytest.fixture
def students(db):
    return StudentService(db)


@pytest.fixture
def registration(db):
    return RegistrationService(db)


@pytest.fixture
def profiles(db, settings):
    return ProfileService(db, settings)


def signup_request(**overrides) -> SignupRequest:
    data = {
        "name": "Meera Iyer",
        "email": "Meera@Example.com",
        "phone": "9876543210",
        "course": "B.Sc",
    }
    data.update(overrides)
    return SignupRequest(**data)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
def test_signup_creates_student_profile_and_record(db, registration):
    result = registration.signup(signup_request(user_id="auth-42"))

    assert result.is_success
    profile = result.data
    assert (profile.id, profile.role, profile.email) == ("auth-42", UserRole.STUDENT, "meera@example.com")

    student = db.query(Student).filter(Student.user_id == "auth-42").one()
    assert student.course == "B.Sc"
    assert student.room_id is None


def test_signup_rejects_duplicate_email(db, registration):
    assert registration.signup(signup_request()).is_success

    result = registration.signup(signup_request(email="meera@example.com"))

    assert result.error_code is ErrorCode.ALREADY_EXISTS
    assert db.query(Profile).count() == 1


def test_signup_rejects_duplicate_user_id(registration):
    registration.signup(signup_request(user_id="auth-1"))
    result = registration.signup(signup_request(user_id="auth-1", email="other@example.com"))
    assert result.error_code is ErrorCode.ALREADY_EXISTS


# ---------------------------------------------------------------------------
# Roles and blocks
# ---------------------------------------------------------------------------
def test_promote_to_warden_and_assign_block(profiles, factory, admin):
    profile = factory.profile(UserRole.STUDENT)

    assert profiles.change_role(admin, profile.id, UserRole.WARDEN).is_success
    result = profiles.assign_block(admin, profile.id, " b ")

    assert result.is_success
    assert (result.data.role, result.data.assigned_block) == (UserRole.WARDEN, "B")


def test_demotion_clears_block(profiles, factory, admin):
    profile = factory.profile(UserRole.WARDEN, assigned_block="A")

    result = profiles.change_role(admin, profile.id, UserRole.STUDENT)

    assert result.data.assigned_block is None


def test_block_assignment_rules(profiles, factory, admin):
    student_profile = factory.profile(UserRole.STUDENT)
    warden_profile = factory.profile(UserRole.WARDEN)

    assert profiles.assign_block(admin, student_profile.id, "A").error_code is ErrorCode.VALIDATION_ERROR
    assert profiles.assign_block(admin, warden_profile.id, "Q").error_code is ErrorCode.VALIDATION_ERROR


def test_only_admin_changes_roles(profiles, factory, warden):
    profile = factory.profile(UserRole.STUDENT)
    assert profiles.change_role(warden, profile.id, UserRole.ADMIN).error_code is ErrorCode.FORBIDDEN


def test_list_profiles_by_role(profiles, factory, admin):
    factory.profile(UserRole.WARDEN, assigned_block="A")
    factory.profile(UserRole.STUDENT)

    wardens = profiles.list_profiles(admin, UserRole.WARDEN).data

    assert [p.role for p in wardens] == [UserRole.WARDEN]
    assert len(profiles.list_profiles(admin).data) == 2


# ---------------------------------------------------------------------------
# Student records
# ---------------------------------------------------------------------------
def test_self_update_of_contact_fields(db, factory, students, as_student):
    me = factory.student()

    result = students.update_self(as_student(me), {"phone": "111", "blood_group": "O+"})

    assert result.is_success
    db.expire_all()
    stored = db.get(Student, me.id)
    assert (stored.phone, stored.blood_group) == ("111", "O+")


@pytest.mark.parametrize("field", ["room_id", "name", "course"])
def test_self_update_rejects_restricted_fields(factory, students, as_student, field):
    me = factory.student()
    assert students.update_self(as_student(me), {field: "x"}).error_code is ErrorCode.VALIDATION_ERROR


def test_admin_cannot_edit_room_directly(factory, students, admin):
    me = factory.student()
    assert students.update_student(admin, me.id, {"room_id": "r1"}).error_code is ErrorCode.VALIDATION_ERROR
    assert students.update_student(admin, me.id, {"course": "MBA"}).data.course == "MBA"


def test_get_own_without_record_is_not_found(factory, students):
    orphan = factory.profile(UserRole.STUDENT)
    result = students.get_own(Principal(orphan.id, UserRole.STUDENT))
    assert result.error_code is ErrorCode.RESOURCE_NOT_FOUND


def test_delete_student_releases_seat_and_removes_dependents(db, factory, students, admin, warden, as_student):
    room = factory.room(capacity=2)
    me = factory.student(room=room)
    factory.fee(me)
    db.add(AttendanceRecord(student_id=me.id, date=date(2024, 3, 11), status=AttendanceStatus.PRESENT))
    db.add(Complaint(student_id=me.id, title="t", description="d", status=ComplaintStatus.PENDING))
    db.commit()

    result = students.delete_student(admin, me.id)

    assert result.is_success
    db.expire_all()
    assert db.get(Room, room.id).occupied == 0
    assert db.get(Student, me.id) is None
    assert db.query(FeeRecord).count() == 0
    assert db.query(AttendanceRecord).count() == 0
    assert db.query(Complaint).count() == 0


def test_list_students_is_admin_only(factory, students, admin, warden):
    factory.student()
    assert len(students.list_students(admin).data) == 1
    assert students.list_students(warden).error_code is ErrorCode.FORBIDDEN
