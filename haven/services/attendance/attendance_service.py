"""
Attendance recorder.

One record per (student, date); marking the same pair again overwrites
the stored status. Batch marking is a single transaction.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from haven.core.exceptions import (
    AttendanceConflict,
    ConflictError,
    ForbiddenError,
    ResourceNotFoundError,
    ValidationError,
)
from haven.models.attendance import AttendanceRecord
from haven.models.enums import AttendanceStatus, RosterStatus, UserRole
from haven.models.student import Student
from haven.repositories.attendance_repository import AttendanceRepository
from haven.repositories.student_repository import StudentRepository
from haven.schemas.attendance import RosterEntry
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_staff


class AttendanceService(BaseService):
    """
    Per-day presence marks for residents.

    Wardens with an assigned block may only mark and read rosters for
    residents seated in that block.
    """

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.attendance = AttendanceRepository(db_session)
        self.students = StudentRepository(db_session)

    # -------------------------------------------------------------------------
    # Marking
    # -------------------------------------------------------------------------

    def mark_attendance(
        self,
        principal: Principal,
        student_id: str,
        on_date: date,
        status: AttendanceStatus,
    ) -> ServiceResult[AttendanceRecord]:
        """
        Upsert one mark keyed by (student, date).

        Returns:
            ServiceResult containing the stored AttendanceRecord
        """
        try:
            require_staff(principal, action="mark attendance")
            status = AttendanceStatus(status)

            with self.transaction():
                students = self._load_students(principal, [student_id])
                record = self._upsert(students, on_date, status)[0]

            self._log_operation(
                "mark_attendance",
                student_id,
                {"date": on_date.isoformat(), "status": status.value},
            )
            return ServiceResult.success(record, message=f"Marked {status.value}")

        except Exception as e:
            return self._handle_exception(e, "mark attendance", student_id, {"date": str(on_date)})

    def mark_all_present(
        self,
        principal: Principal,
        student_ids: Sequence[str],
        on_date: date,
    ) -> ServiceResult[List[AttendanceRecord]]:
        """
        Mark every listed student present for ``on_date``.

        All-or-nothing: an unknown or out-of-scope student, or any store
        failure, leaves no mark written and fails the whole batch.
        """
        try:
            require_staff(principal, action="mark attendance")
            ids = list(dict.fromkeys(student_ids))
            if not ids:
                raise ValidationError("No students to mark", field="student_ids")

            with self.transaction():
                students = self._load_students(principal, ids)
                records = self._upsert(students, on_date, AttendanceStatus.PRESENT)

            self._log_operation(
                "mark_all_present",
                on_date.isoformat(),
                {"count": len(records)},
            )
            return ServiceResult.success(
                records,
                message=f"Marked {len(records)} students present",
                metadata={"count": len(records), "date": on_date.isoformat()},
            )

        except Exception as e:
            return self._handle_exception(
                e, "mark all present", on_date, {"count": len(student_ids)}
            )

    def _upsert(
        self,
        students: List[Student],
        on_date: date,
        status: AttendanceStatus,
    ) -> List[AttendanceRecord]:
        try:
            return self.attendance.upsert_marks([s.id for s in students], on_date, status)
        except AttendanceConflict:
            raise
        except ConflictError as e:
            raise AttendanceConflict() from e

    def _load_students(self, principal: Principal, student_ids: Iterable[str]) -> List[Student]:
        ids = list(student_ids)
        found = {s.id: s for s in self.students.select({"id": ids})}
        missing = [sid for sid in ids if sid not in found]
        if missing:
            raise ResourceNotFoundError("Student", missing[0])

        students = [found[sid] for sid in ids]
        block = self._warden_block(principal)
        if block is not None:
            outside = [s.id for s in students if s.room is None or s.room.block != block]
            if outside:
                raise ForbiddenError(
                    f"Student {outside[0]} is not a resident of block {block}",
                    role=principal.role.value,
                )
        return students

    @staticmethod
    def _warden_block(principal: Principal) -> Optional[str]:
        if principal.role is UserRole.WARDEN:
            return principal.assigned_block
        return None

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def history_for(
        self,
        principal: Principal,
        student_id: str,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[AttendanceRecord]]:
        """Records for one student, newest date first."""
        try:
            student = self.students.get_or_raise(student_id, "Student")
            if not principal.is_staff and student.user_id != principal.user_id:
                raise ForbiddenError("Residents can only view their own attendance", role=principal.role.value)

            rows = self.attendance.history(student_id, limit)
            return ServiceResult.success(rows, metadata={"count": len(rows)})

        except Exception as e:
            return self._handle_exception(e, "get attendance history", student_id)

    def day_roster_for(
        self,
        principal: Principal,
        block: str,
        on_date: date,
    ) -> ServiceResult[List[RosterEntry]]:
        """
        One row per resident of ``block`` for ``on_date``.

        Residents without a record for the day are ``unmarked``, which is
        distinct from ``absent``.
        """
        try:
            require_staff(principal, action="view attendance rosters")
            scoped = self._warden_block(principal)
            if scoped is not None and scoped != block:
                raise ForbiddenError(
                    f"Warden of block {scoped} cannot view block {block}",
                    role=principal.role.value,
                )

            residents = self.students.list_in_block(block)
            marks = self.attendance.statuses_for_date(on_date, [s.id for s in residents])
            roster = [
                RosterEntry(
                    student_id=s.id,
                    name=s.name,
                    room_no=s.room.room_no if s.room else None,
                    status=RosterStatus(marks[s.id].value) if s.id in marks else RosterStatus.UNMARKED,
                )
                for s in residents
            ]
            return ServiceResult.success(
                roster,
                metadata={"block": block, "date": on_date.isoformat(), "count": len(roster)},
            )

        except Exception as e:
            return self._handle_exception(e, "build day roster", block, {"date": str(on_date)})
