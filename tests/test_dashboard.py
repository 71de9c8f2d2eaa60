from datetime import date

import pytest

from haven.core.exceptions import ErrorCode
from haven.models import AttendanceRecord, AttendanceStatus, Complaint, ComplaintStatus, FeeStatus, UserRole
from haven.services.dashboard import DashboardService

DAY = date(2024, 3, 11)


@pytest.fixture
def dashboard(db):
    return DashboardService(db)


@pytest.fixture
def hostel(db, factory):
    a_room = factory.room(block="A", capacity=3)
    b_room = factory.room(block="B", capacity=2)
    a1, a2 = factory.student(room=a_room), factory.student(room=a_room)
    b1 = factory.student(room=b_room)
    factory.profile(UserRole.WARDEN, assigned_block="A")
    factory.fee(a1, status=FeeStatus.PAID)
    factory.fee(b1)

    db.add_all([
        AttendanceRecord(student_id=a1.id, date=DAY, status=AttendanceStatus.PRESENT),
        AttendanceRecord(student_id=a2.id, date=DAY, status=AttendanceStatus.ABSENT),
        AttendanceRecord(student_id=b1.id, date=DAY, status=AttendanceStatus.PRESENT),
        Complaint(student_id=a2.id, title="Fan", description="Broken", status=ComplaintStatus.PENDING),
        Complaint(student_id=b1.id, title="Tap", description="Leak", status=ComplaintStatus.PENDING),
    ])
    db.commit()
    return {"a1": a1, "a2": a2, "b1": b1}


def test_admin_overview(dashboard, hostel, admin):
    overview = dashboard.admin_overview(admin).data

    assert overview.total_students == 3
    assert overview.total_rooms == 2
    assert overview.vacant_beds == 2
    assert overview.total_wardens == 1
    assert overview.pending_fees == 1
    assert overview.fee_breakdown[FeeStatus.PAID] == 1


def test_warden_overview_is_scoped_to_own_block(dashboard, hostel, warden):
    overview = dashboard.warden_overview(warden, DAY, block="B").data

    assert overview.block == "A"
    assert overview.present_count == 1
    assert overview.vacant_beds == 1
    assert overview.pending_complaints == 1


def test_admin_sees_all_blocks_without_filter(dashboard, hostel, admin):
    overview = dashboard.warden_overview(admin, DAY).data

    assert overview.block is None
    assert overview.present_count == 2
    assert overview.pending_complaints == 2


def test_block_students_default_fee_status(dashboard, hostel, warden):
    rows = {row.student_id: row.fee_status for row in dashboard.block_students(warden).data}

    assert rows == {hostel["a1"].id: FeeStatus.PAID, hostel["a2"].id: FeeStatus.PENDING}


def test_block_students_requires_block_for_admin(dashboard, hostel, admin):
    assert dashboard.block_students(admin).error_code is ErrorCode.VALIDATION_ERROR
    assert len(dashboard.block_students(admin, "B").data) == 1


def test_students_cannot_see_dashboards(dashboard, hostel, as_student):
    principal = as_student(hostel["a1"])
    assert dashboard.admin_overview(principal).error_code is ErrorCode.FORBIDDEN
    assert dashboard.warden_overview(principal).error_code is ErrorCode.FORBIDDEN
