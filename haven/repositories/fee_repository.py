# haven/repositories/fee_repository.py
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from haven.models.enums import FeeStatus
from haven.models.fee import FeeRecord
from haven.repositories.base import BaseRepository


class FeeRepository(BaseRepository[FeeRecord]):
    def __init__(self, session: Session):
        super().__init__(session, FeeRecord)

    def get_by_student(self, student_id: str) -> Optional[FeeRecord]:
        rows = self.select({"student_id": student_id}, limit=1)
        return rows[0] if rows else None

    def list_with_students(self) -> List[FeeRecord]:
        stmt = (
            select(FeeRecord)
            .options(joinedload(FeeRecord.student))
            .order_by(FeeRecord.due_date)
        )
        with self._store_call():
            return list(self.session.execute(stmt).scalars().unique().all())

    def status_by_student(self) -> Dict[str, FeeStatus]:
        stmt = select(FeeRecord.student_id, FeeRecord.status)
        with self._store_call():
            return {student_id: status for student_id, status in self.session.execute(stmt).all()}

    def status_counts(self) -> Dict[FeeStatus, int]:
        stmt = select(FeeRecord.status, func.count()).group_by(FeeRecord.status)
        with self._store_call():
            counts = {status: count for status, count in self.session.execute(stmt).all()}
        return {status: counts.get(status, 0) for status in FeeStatus}
