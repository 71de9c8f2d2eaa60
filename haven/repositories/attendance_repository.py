# haven/repositories/attendance_repository.py
from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from haven.models.attendance import AttendanceRecord
from haven.models.enums import AttendanceStatus
from haven.repositories.base import BaseRepository

ATTENDANCE_CONFLICT_KEYS = ("student_id", "date")


class AttendanceRepository(BaseRepository[AttendanceRecord]):
    def __init__(self, session: Session):
        super().__init__(session, AttendanceRecord)

    def upsert_marks(
        self,
        student_ids: Iterable[str],
        on_date: date,
        status: AttendanceStatus,
    ) -> List[AttendanceRecord]:
        rows = [
            {"student_id": student_id, "date": on_date, "status": status}
            for student_id in student_ids
        ]
        return self.upsert(rows, ATTENDANCE_CONFLICT_KEYS)

    def history(self, student_id: str, limit: Optional[int] = None) -> List[AttendanceRecord]:
        return self.select({"student_id": student_id}, order_by=["-date"], limit=limit)

    def statuses_for_date(
        self,
        on_date: date,
        student_ids: Optional[Iterable[str]] = None,
    ) -> Dict[str, AttendanceStatus]:
        stmt = select(AttendanceRecord.student_id, AttendanceRecord.status).where(
            AttendanceRecord.date == on_date
        )
        if student_ids is not None:
            stmt = stmt.where(AttendanceRecord.student_id.in_(list(student_ids)))
        with self._store_call():
            return {student_id: status for student_id, status in self.session.execute(stmt).all()}
