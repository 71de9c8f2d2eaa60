# haven/repositories/notice_repository.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from haven.models.inquiry import AdmissionQuery
from haven.models.notice import Notice
from haven.repositories.base import BaseRepository


class NoticeRepository(BaseRepository[Notice]):
    def __init__(self, session: Session):
        super().__init__(session, Notice)

    def list_recent(self, limit: Optional[int] = None) -> List[Notice]:
        return self.select(order_by=["-created_at"], limit=limit)


class AdmissionQueryRepository(BaseRepository[AdmissionQuery]):
    def __init__(self, session: Session):
        super().__init__(session, AdmissionQuery)

    def list_recent(self, limit: Optional[int] = None) -> List[AdmissionQuery]:
        return self.select(order_by=["-created_at"], limit=limit)
