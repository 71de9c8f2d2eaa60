"""
Admission query intake.

Anonymous visitors submit inquiries; staff review and delete them.
"""

from typing import List, Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from haven.core.exceptions import ValidationError
from haven.models.enums import RoomType
from haven.models.inquiry import AdmissionQuery
from haven.repositories.notice_repository import AdmissionQueryRepository
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_staff


class AdmissionQueryService(BaseService):

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.queries = AdmissionQueryRepository(db_session)

    def submit(
        self,
        full_name: str,
        email: str,
        room_type: RoomType = RoomType.SINGLE_SEATER,
        message: Optional[str] = None,
    ) -> ServiceResult[AdmissionQuery]:
        """Record an inquiry; no session is required."""
        try:
            full_name = (full_name or "").strip()
            email = (email or "").strip()
            if not full_name:
                raise ValidationError("Full name is required", field="full_name")
            try:
                email = validate_email(email, check_deliverability=False).normalized
            except EmailNotValidError as e:
                raise ValidationError(
                    "A valid email is required",
                    field="email",
                    field_errors={"email": [str(e)]},
                )

            with self.transaction():
                query = self.queries.insert({
                    "full_name": full_name,
                    "email": email,
                    "room_type": RoomType(room_type).value,
                    "message": message,
                })

            self._log_operation("submit_query", query.id)
            return ServiceResult.success(query, message="Inquiry received")

        except Exception as e:
            return self._handle_exception(e, "submit admission query", email)

    def list_queries(
        self,
        principal: Principal,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[AdmissionQuery]]:
        try:
            require_staff(principal, action="review admission queries")
            rows = self.queries.list_recent(limit)
            return ServiceResult.success(rows, metadata={"count": len(rows)})
        except Exception as e:
            return self._handle_exception(e, "list admission queries")

    def delete(self, principal: Principal, query_id: str) -> ServiceResult[None]:
        try:
            require_staff(principal, action="delete admission queries")
            with self.transaction():
                self.queries.delete(query_id)

            self._log_operation("delete_query", query_id, {"user_id": principal.user_id})
            return ServiceResult.success(None, message="Inquiry deleted")

        except Exception as e:
            return self._handle_exception(e, "delete admission query", query_id)
