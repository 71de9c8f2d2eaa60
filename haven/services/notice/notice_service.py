"""
Notice board: staff announcements, newest first.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from haven.config.settings import Settings, get_settings
from haven.core.exceptions import ValidationError
from haven.models.notice import Notice
from haven.repositories.notice_repository import NoticeRepository
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_staff


class NoticeService(BaseService):

    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        super().__init__(db_session)
        self.settings = settings or get_settings()
        self.notices = NoticeRepository(db_session)

    def post(self, principal: Principal, title: str, message: str) -> ServiceResult[Notice]:
        try:
            require_staff(principal, action="post notices")
            title = (title or "").strip()
            message = (message or "").strip()
            if not title or not message:
                raise ValidationError(
                    "Title and message are required",
                    field="title" if not title else "message",
                )

            with self.transaction():
                notice = self.notices.insert({"title": title, "message": message})

            self._log_operation("post_notice", notice.id, {"user_id": principal.user_id})
            return ServiceResult.success(notice, message="Notice posted")

        except Exception as e:
            return self._handle_exception(e, "post notice")

    def delete(self, principal: Principal, notice_id: str) -> ServiceResult[None]:
        try:
            require_staff(principal, action="delete notices")
            with self.transaction():
                self.notices.delete(notice_id)

            self._log_operation("delete_notice", notice_id, {"user_id": principal.user_id})
            return ServiceResult.success(None, message="Notice deleted")

        except Exception as e:
            return self._handle_exception(e, "delete notice", notice_id)

    def list_notices(self, limit: Optional[int] = None) -> ServiceResult[List[Notice]]:
        """All notices newest first, or the latest ``limit``."""
        try:
            rows = self.notices.list_recent(limit)
            return ServiceResult.success(rows, metadata={"count": len(rows)})
        except Exception as e:
            return self._handle_exception(e, "list notices")

    def preview(self) -> ServiceResult[List[Notice]]:
        return self.list_notices(self.settings.NOTICE_PREVIEW_LIMIT)
