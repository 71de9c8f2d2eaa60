# haven/repositories/complaint_repository.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from haven.models.complaint import Complaint
from haven.models.enums import ComplaintStatus
from haven.models.student import Student
from haven.repositories.base import BaseRepository


class ComplaintRepository(BaseRepository[Complaint]):
    def __init__(self, session: Session):
        super().__init__(session, Complaint)

    def list_recent(
        self,
        student_id: Optional[str] = None,
        status: Optional[ComplaintStatus] = None,
    ) -> List[Complaint]:
        stmt = (
            select(Complaint)
            .options(joinedload(Complaint.student).joinedload(Student.room))
            .order_by(Complaint.created_at.desc())
        )
        if student_id:
            stmt = stmt.where(Complaint.student_id == student_id)
        if status:
            stmt = stmt.where(Complaint.status == status)
        with self._store_call():
            return list(self.session.execute(stmt).scalars().unique().all())
