"""
Resident records: self-service contact edits and admin management.
"""

from typing import Any, Dict, FrozenSet, List

from sqlalchemy.orm import Session

from haven.core.exceptions import ResourceNotFoundError, ValidationError
from haven.models.student import Student
from haven.repositories.student_repository import StudentRepository
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_admin
from haven.services.room.room_occupancy_service import RoomOccupancyService

SELF_EDITABLE_FIELDS: FrozenSet[str] = frozenset(
    {"email", "phone", "parent_phone", "blood_group", "address"}
)
ADMIN_EDITABLE_FIELDS: FrozenSet[str] = SELF_EDITABLE_FIELDS | {"name", "course"}


class StudentService(BaseService):
    """
    ``room_id`` is deliberately absent from both editable sets; seats move
    only through ``RoomOccupancyService.assign_student``.
    """

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.students = StudentRepository(db_session)
        self.ledger = RoomOccupancyService(db_session)

    # -------------------------------------------------------------------------
    # Self service
    # -------------------------------------------------------------------------

    def get_own(self, principal: Principal) -> ServiceResult[Student]:
        try:
            return ServiceResult.success(self._own_record(principal))
        except Exception as e:
            return self._handle_exception(e, "get own student record", principal.user_id)

    def update_self(self, principal: Principal, patch: Dict[str, Any]) -> ServiceResult[Student]:
        try:
            self._check_fields(patch, SELF_EDITABLE_FIELDS)
            with self.transaction():
                student = self._own_record(principal)
                student = self.students.update(patch, student.id)

            self._log_operation("update_self", student.id, {"fields": sorted(patch)})
            return ServiceResult.success(student, message="Profile updated")

        except Exception as e:
            return self._handle_exception(e, "update own profile", principal.user_id)

    def _own_record(self, principal: Principal) -> Student:
        student = self.students.get_by_user_id(principal.user_id)
        if student is None:
            raise ResourceNotFoundError(
                "Student",
                message=f"No student record is linked to user {principal.user_id}",
            )
        return student

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    def list_students(self, principal: Principal) -> ServiceResult[List[Student]]:
        try:
            require_admin(principal, action="list students")
            rows = self.students.list_with_rooms()
            return ServiceResult.success(rows, metadata={"count": len(rows)})
        except Exception as e:
            return self._handle_exception(e, "list students")

    def update_student(
        self,
        principal: Principal,
        student_id: str,
        patch: Dict[str, Any],
    ) -> ServiceResult[Student]:
        try:
            require_admin(principal, action="edit students")
            self._check_fields(patch, ADMIN_EDITABLE_FIELDS)
            with self.transaction():
                student = self.students.update(patch, student_id)

            self._log_operation("update_student", student_id, {"fields": sorted(patch)})
            return ServiceResult.success(student, message="Student updated")

        except Exception as e:
            return self._handle_exception(e, "update student", student_id)

    def delete_student(self, principal: Principal, student_id: str) -> ServiceResult[None]:
        """
        Delete a resident; attendance, fees and complaints go with it.

        The seat is released through the ledger first so the room's
        counter stays equal to its residents.
        """
        try:
            require_admin(principal, action="delete students")
            with self.transaction():
                student = self.students.get_or_raise(student_id, "Student")
                self.ledger.release_seat(student)
                self.students.delete(student_id)

            self._log_operation("delete_student", student_id, {"user_id": principal.user_id})
            return ServiceResult.success(None, message="Student deleted")

        except Exception as e:
            return self._handle_exception(e, "delete student", student_id)

    @staticmethod
    def _check_fields(patch: Dict[str, Any], allowed: FrozenSet[str]) -> None:
        if not patch:
            raise ValidationError("Nothing to update")
        rejected = sorted(set(patch) - allowed)
        if rejected:
            raise ValidationError(
                f"Fields not editable: {', '.join(rejected)}",
                field=rejected[0],
            )
