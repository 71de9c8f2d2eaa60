"""
Room occupancy ledger.

Sole writer of ``Room.occupied``/``Room.capacity`` and of
``Student.room_id``. Every seat change goes through ``assign_student`` (or
``release_seat`` on student deletion) so a room's counter always equals the
number of students referencing it.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from haven.config.settings import Settings, get_settings
from haven.core.exceptions import (
    AlreadyExistsError,
    CapacityBelowOccupancy,
    CapacityExceeded,
    OperationError,
    RoomNotEmpty,
    RoomUnderMaintenance,
    ValidationError,
)
from haven.models.enums import RoomStatus
from haven.models.room import Room
from haven.models.student import Student
from haven.repositories.room_repository import RoomRepository
from haven.repositories.student_repository import StudentRepository
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_admin

EDITABLE_ROOM_FIELDS = frozenset({"room_no", "block", "capacity", "status"})


def derive_status(room: Room) -> RoomStatus:
    """
    Status implied by occupancy.

    ``maintenance`` is a manual override and is returned unchanged; the
    ledger never clears it on its own.
    """
    if room.status is RoomStatus.MAINTENANCE:
        return RoomStatus.MAINTENANCE
    if room.occupied >= room.capacity:
        return RoomStatus.FILLED
    return RoomStatus.AVAILABLE


class RoomOccupancyService(BaseService):
    """
    Capacity, occupancy and status bookkeeping for rooms.

    Invariants kept here:
    - ``0 <= occupied <= capacity`` for every room
    - ``occupied`` equals the number of students whose ``room_id`` points
      at the room
    """

    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        super().__init__(db_session)
        self.settings = settings or get_settings()
        self.rooms = RoomRepository(db_session)
        self.students = StudentRepository(db_session)

    # -------------------------------------------------------------------------
    # Assignment
    # -------------------------------------------------------------------------

    def assign_student(
        self,
        principal: Principal,
        student_id: str,
        room_id: Optional[str],
    ) -> ServiceResult[Student]:
        """
        Move a student into ``room_id`` (or out of any room when None).

        Returns:
            ServiceResult containing the updated Student

        Failure codes:
            CAPACITY_EXCEEDED, ROOM_UNDER_MAINTENANCE, RESOURCE_NOT_FOUND
        """
        try:
            require_admin(principal, action="assign rooms")
            with self.transaction():
                student = self._move(student_id, room_id)

            self._log_operation(
                "assign_student",
                student_id,
                {"room_id": room_id, "user_id": principal.user_id},
            )
            message = "Room assigned" if room_id else "Room vacated"
            return ServiceResult.success(student, message=message)

        except Exception as e:
            return self._handle_exception(e, "assign student", student_id, {"room_id": room_id})

    def release_seat(self, student: Student) -> None:
        """
        Vacate the student's seat inside the caller's transaction.

        Used by student deletion so the counter is decremented before the
        student row disappears.
        """
        if student.room_id is not None:
            self._move(student.id, None)

    def _move(self, student_id: str, room_id: Optional[str]) -> Student:
        student = self.students.get_or_raise(student_id, "Student")
        previous_id = student.room_id

        if room_id == previous_id:
            # Already seated there (or already unassigned); nothing moves.
            return student

        target: Optional[Room] = None
        if room_id is not None:
            target = self.rooms.get_or_raise(room_id, "Room")
            if target.status is RoomStatus.MAINTENANCE:
                raise RoomUnderMaintenance(room_id)
            if not self.rooms.try_increment_occupancy(room_id):
                self.rooms.refresh(target)
                raise CapacityExceeded(room_id, target.capacity)

        if previous_id is not None:
            if not self.rooms.try_decrement_occupancy(previous_id):
                raise OperationError(
                    f"Occupancy counter for room {previous_id} is already zero",
                    {"room_id": previous_id, "student_id": student_id},
                )

        self.students.update({"room_id": room_id}, student_id)

        for touched_id in (previous_id, room_id):
            if touched_id is not None:
                self._sync_status(self.rooms.refresh(self.rooms.get_or_raise(touched_id, "Room")))
        return student

    def _sync_status(self, room: Room) -> Room:
        status = derive_status(room)
        if room.status is not status:
            self.rooms.update({"status": status}, room.id)
        return room

    # -------------------------------------------------------------------------
    # Room CRUD (admin)
    # -------------------------------------------------------------------------

    def list_rooms(self, block: Optional[str] = None) -> ServiceResult[List[Room]]:
        try:
            rows = self.rooms.list_rooms(block)
            return ServiceResult.success(rows, metadata={"count": len(rows)})
        except Exception as e:
            return self._handle_exception(e, "list rooms", block)

    def create_room(
        self,
        principal: Principal,
        room_no: str,
        block: str,
        capacity: int = 2,
        under_maintenance: bool = False,
    ) -> ServiceResult[Room]:
        try:
            require_admin(principal, action="create rooms")
            block = self._validate_block(block)
            self._validate_capacity(capacity)

            with self.transaction():
                if self.rooms.get_by_number(block, room_no) is not None:
                    raise AlreadyExistsError("Room", "room_no", f"{block}-{room_no}")
                room = self.rooms.insert({
                    "room_no": room_no,
                    "block": block,
                    "capacity": capacity,
                    "occupied": 0,
                    "status": RoomStatus.MAINTENANCE if under_maintenance else RoomStatus.AVAILABLE,
                })

            self._log_operation("create_room", room.id, {"block": block, "room_no": room_no})
            return ServiceResult.success(room, message="Room created")

        except Exception as e:
            return self._handle_exception(e, "create room", f"{block}-{room_no}")

    def update_room(
        self,
        principal: Principal,
        room_id: str,
        patch: Dict[str, Any],
    ) -> ServiceResult[Room]:
        """
        Edit room attributes.

        ``occupied`` is never accepted here. Setting ``status`` to
        ``maintenance`` applies the override; any other status value clears
        it and the status is re-derived from occupancy.
        """
        try:
            require_admin(principal, action="edit rooms")
            unknown = set(patch) - EDITABLE_ROOM_FIELDS
            if unknown:
                raise ValidationError(
                    f"Fields not editable: {', '.join(sorted(unknown))}",
                    field=sorted(unknown)[0],
                )

            with self.transaction():
                room = self.rooms.get_or_raise(room_id, "Room")
                changes: Dict[str, Any] = {}

                if "block" in patch and patch["block"] is not None:
                    changes["block"] = self._validate_block(patch["block"])
                if "room_no" in patch and patch["room_no"] is not None:
                    changes["room_no"] = patch["room_no"]
                if {"block", "room_no"} & set(changes):
                    block = changes.get("block", room.block)
                    room_no = changes.get("room_no", room.room_no)
                    existing = self.rooms.get_by_number(block, room_no)
                    if existing is not None and existing.id != room.id:
                        raise AlreadyExistsError("Room", "room_no", f"{block}-{room_no}")

                if "capacity" in patch and patch["capacity"] is not None:
                    capacity = patch["capacity"]
                    self._validate_capacity(capacity)
                    if capacity < room.occupied:
                        raise CapacityBelowOccupancy(room_id, capacity, room.occupied)
                    changes["capacity"] = capacity

                if "status" in patch and patch["status"] is not None:
                    wanted = RoomStatus(patch["status"])
                    changes["status"] = (
                        RoomStatus.MAINTENANCE if wanted is RoomStatus.MAINTENANCE else RoomStatus.AVAILABLE
                    )

                room = self.rooms.update(changes, room_id)
                self._sync_status(room)

            self._log_operation("update_room", room_id, {"fields": sorted(changes)})
            return ServiceResult.success(room, message="Room updated")

        except Exception as e:
            return self._handle_exception(e, "update room", room_id)

    def delete_room(self, principal: Principal, room_id: str) -> ServiceResult[None]:
        try:
            require_admin(principal, action="delete rooms")
            with self.transaction():
                room = self.rooms.get_or_raise(room_id, "Room")
                occupied = max(room.occupied, self.students.count_in_room(room_id))
                if occupied > 0:
                    raise RoomNotEmpty(room_id, occupied)
                self.rooms.delete(room_id)

            self._log_operation("delete_room", room_id)
            return ServiceResult.success(None, message="Room deleted")

        except Exception as e:
            return self._handle_exception(e, "delete room", room_id)

    # -------------------------------------------------------------------------
    # Summaries
    # -------------------------------------------------------------------------

    def vacancy_count(self, block: Optional[str] = None) -> ServiceResult[int]:
        """Sum of ``capacity - occupied`` over the block (all rooms if None)."""
        try:
            return ServiceResult.success(self.rooms.vacancy_sum(block), metadata={"block": block})
        except Exception as e:
            return self._handle_exception(e, "count vacancies", block)

    # -------------------------------------------------------------------------
    # Validation helpers
    # -------------------------------------------------------------------------

    def _validate_block(self, block: str) -> str:
        block = (block or "").strip().upper()
        if block not in self.settings.HOSTEL_BLOCKS:
            raise ValidationError(
                f"Unknown block '{block}'",
                field="block",
                field_errors={"block": [f"must be one of {', '.join(self.settings.HOSTEL_BLOCKS)}"]},
            )
        return block

    @staticmethod
    def _validate_capacity(capacity: Any) -> None:
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            raise ValidationError("Capacity must be a positive integer", field="capacity")
