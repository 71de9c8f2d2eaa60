"""
Complaint workflow: ``pending -> resolved`` (terminal).
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from haven.core.exceptions import ForbiddenError, ValidationError
from haven.models.complaint import Complaint
from haven.models.enums import ComplaintStatus, UserRole
from haven.models.student import Student
from haven.repositories.complaint_repository import ComplaintRepository
from haven.repositories.student_repository import StudentRepository
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_staff

ROOM_CHANGE_TITLE = "Room Change Request - {name}"
ROOM_CHANGE_DESCRIPTION = "Preferred Block: {block}. Reason: {reason}"


class ComplaintService(BaseService):
    """
    Residents file complaints; staff resolve them.

    The owning student never changes after filing. Deletion is allowed to
    the owner and to staff.
    """

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.complaints = ComplaintRepository(db_session)
        self.students = StudentRepository(db_session)

    # -------------------------------------------------------------------------
    # Filing
    # -------------------------------------------------------------------------

    def file(
        self,
        principal: Principal,
        student_id: str,
        title: str,
        description: str,
    ) -> ServiceResult[Complaint]:
        try:
            title = (title or "").strip()
            description = (description or "").strip()
            if not title:
                raise ValidationError("Title is required", field="title")
            if not description:
                raise ValidationError("Description is required", field="description")

            with self.transaction():
                self._owned_student(principal, student_id)
                complaint = self.complaints.insert({
                    "student_id": student_id,
                    "title": title,
                    "description": description,
                    "status": ComplaintStatus.PENDING,
                })

            self._log_operation("file_complaint", complaint.id, {"student_id": student_id})
            return ServiceResult.success(complaint, message="Complaint filed")

        except Exception as e:
            return self._handle_exception(e, "file complaint", student_id)

    def file_room_change_request(
        self,
        principal: Principal,
        student_id: str,
        preferred_block: str,
        reason: str,
    ) -> ServiceResult[Complaint]:
        """Room change requests are ordinary complaints with a fixed wording."""
        try:
            student = self.students.get_or_raise(student_id, "Student")
        except Exception as e:
            return self._handle_exception(e, "file room change request", student_id)

        return self.file(
            principal,
            student_id,
            ROOM_CHANGE_TITLE.format(name=student.name),
            ROOM_CHANGE_DESCRIPTION.format(block=preferred_block, reason=reason),
        )

    def _owned_student(self, principal: Principal, student_id: str) -> Student:
        student = self.students.get_or_raise(student_id, "Student")
        if principal.role is not UserRole.ADMIN and student.user_id != principal.user_id:
            raise ForbiddenError("Complaints can only be filed for yourself", role=principal.role.value)
        return student

    # -------------------------------------------------------------------------
    # Staff actions
    # -------------------------------------------------------------------------

    def resolve(self, principal: Principal, complaint_id: str) -> ServiceResult[Complaint]:
        """Mark resolved; resolving twice is a no-op success."""
        try:
            require_staff(principal, action="resolve complaints")
            with self.transaction():
                complaint = self.complaints.get_or_raise(complaint_id, "Complaint")
                changed = complaint.status is not ComplaintStatus.RESOLVED
                if changed:
                    complaint = self.complaints.update({"status": ComplaintStatus.RESOLVED}, complaint_id)

            if changed:
                self._log_operation("resolve_complaint", complaint_id, {"user_id": principal.user_id})
            return ServiceResult.success(
                complaint,
                message="Complaint resolved" if changed else "Complaint already resolved",
                metadata={"changed": changed},
            )

        except Exception as e:
            return self._handle_exception(e, "resolve complaint", complaint_id)

    def delete(self, principal: Principal, complaint_id: str) -> ServiceResult[None]:
        """
        Remove a complaint.

        Failure codes:
            FORBIDDEN when the requester neither owns it nor is staff
        """
        try:
            with self.transaction():
                complaint = self.complaints.get_or_raise(complaint_id, "Complaint")
                if not principal.is_staff:
                    owner = self.students.get(complaint.student_id)
                    if owner is None or owner.user_id != principal.user_id:
                        raise ForbiddenError(
                            "Only the owner or staff may delete this complaint",
                            role=principal.role.value,
                        )
                self.complaints.delete(complaint_id)

            self._log_operation("delete_complaint", complaint_id, {"user_id": principal.user_id})
            return ServiceResult.success(None, message="Complaint deleted")

        except Exception as e:
            return self._handle_exception(e, "delete complaint", complaint_id)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_complaints(
        self,
        principal: Principal,
        status: Optional[ComplaintStatus] = None,
    ) -> ServiceResult[List[Complaint]]:
        """
        Newest first. Wardens with a block only see complaints from
        residents seated in it.
        """
        try:
            require_staff(principal, action="list complaints")
            rows = self.complaints.list_recent(status=status)
            if principal.role is UserRole.WARDEN and principal.assigned_block:
                rows = [
                    c for c in rows
                    if c.student.room is not None and c.student.room.block == principal.assigned_block
                ]
            return ServiceResult.success(rows, metadata={"count": len(rows)})
        except Exception as e:
            return self._handle_exception(e, "list complaints")

    def list_for_student(self, principal: Principal, student_id: str) -> ServiceResult[List[Complaint]]:
        try:
            student = self.students.get_or_raise(student_id, "Student")
            if not principal.is_staff and student.user_id != principal.user_id:
                raise ForbiddenError("Residents can only view their own complaints", role=principal.role.value)
            rows = self.complaints.list_recent(student_id=student_id)
            return ServiceResult.success(rows, metadata={"count": len(rows)})
        except Exception as e:
            return self._handle_exception(e, "list student complaints", student_id)
