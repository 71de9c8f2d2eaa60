"""
Read-only summaries for the admin and warden dashboards.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from haven.core.exceptions import ValidationError
from haven.models.enums import AttendanceStatus, ComplaintStatus, FeeStatus, UserRole
from haven.repositories.attendance_repository import AttendanceRepository
from haven.repositories.complaint_repository import ComplaintRepository
from haven.repositories.fee_repository import FeeRepository
from haven.repositories.profile_repository import ProfileRepository
from haven.repositories.room_repository import RoomRepository
from haven.repositories.student_repository import StudentRepository
from haven.schemas.dashboard import AdminOverview, WardenOverview
from haven.schemas.student import BlockStudentEntry
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_admin, require_staff


class DashboardService(BaseService):

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.profiles = ProfileRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.students = StudentRepository(db_session)
        self.attendance = AttendanceRepository(db_session)
        self.fees = FeeRepository(db_session)
        self.complaints = ComplaintRepository(db_session)

    def admin_overview(self, principal: Principal) -> ServiceResult[AdminOverview]:
        try:
            require_admin(principal, action="view the admin overview")
            breakdown = self.fees.status_counts()
            overview = AdminOverview(
                total_students=self.students.count(),
                total_rooms=self.rooms.count(),
                vacant_beds=self.rooms.vacancy_sum(),
                total_wardens=self.profiles.count({"role": UserRole.WARDEN}),
                pending_fees=breakdown[FeeStatus.PENDING],
                fee_breakdown=breakdown,
            )
            return ServiceResult.success(overview)
        except Exception as e:
            return self._handle_exception(e, "build admin overview")

    def warden_overview(
        self,
        principal: Principal,
        on_date: Optional[date] = None,
        block: Optional[str] = None,
    ) -> ServiceResult[WardenOverview]:
        """
        Present count for the day, free beds and open complaints, scoped to
        the warden's block (admins may pass any block, or none for all).
        """
        try:
            require_staff(principal, action="view the warden overview")
            on_date = on_date or date.today()
            block = self._scope_block(principal, block)

            residents = self.students.list_in_block(block) if block else self.students.select()
            resident_ids = [s.id for s in residents]
            marks = self.attendance.statuses_for_date(on_date, resident_ids)
            present = sum(1 for status in marks.values() if status is AttendanceStatus.PRESENT)

            pending = self.complaints.list_recent(status=ComplaintStatus.PENDING)
            if block:
                pending = [
                    c for c in pending
                    if c.student.room is not None and c.student.room.block == block
                ]

            overview = WardenOverview(
                block=block,
                date=on_date,
                present_count=present,
                vacant_beds=self.rooms.vacancy_sum(block),
                pending_complaints=len(pending),
            )
            return ServiceResult.success(overview)

        except Exception as e:
            return self._handle_exception(e, "build warden overview", block)

    def block_students(
        self,
        principal: Principal,
        block: Optional[str] = None,
    ) -> ServiceResult[List[BlockStudentEntry]]:
        """Residents of the block with their fee status (``pending`` when no fee exists)."""
        try:
            require_staff(principal, action="list block residents")
            block = self._scope_block(principal, block)
            if not block:
                raise ValidationError("A block is required", field="block")

            fee_status = self.fees.status_by_student()
            rows = [
                BlockStudentEntry(
                    student_id=s.id,
                    name=s.name,
                    course=s.course,
                    phone=s.phone,
                    room_no=s.room.room_no if s.room else None,
                    fee_status=fee_status.get(s.id, FeeStatus.PENDING),
                )
                for s in self.students.list_in_block(block)
            ]
            return ServiceResult.success(rows, metadata={"block": block, "count": len(rows)})

        except Exception as e:
            return self._handle_exception(e, "list block residents", block)

    @staticmethod
    def _scope_block(principal: Principal, block: Optional[str]) -> Optional[str]:
        if principal.role is UserRole.WARDEN and principal.assigned_block:
            return principal.assigned_block
        return block
