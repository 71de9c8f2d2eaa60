# haven/repositories/student_repository.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from haven.models.room import Room
from haven.models.student import Student
from haven.repositories.base import BaseRepository


class StudentRepository(BaseRepository[Student]):
    def __init__(self, session: Session):
        super().__init__(session, Student)

    def get_by_user_id(self, user_id: str) -> Optional[Student]:
        rows = self.select({"user_id": user_id}, limit=1)
        return rows[0] if rows else None

    def list_with_rooms(self) -> List[Student]:
        stmt = (
            select(Student)
            .options(joinedload(Student.room))
            .order_by(Student.created_at.desc())
        )
        with self._store_call():
            return list(self.session.execute(stmt).scalars().unique().all())

    def list_in_block(self, block: str) -> List[Student]:
        stmt = (
            select(Student)
            .join(Room, Student.room_id == Room.id)
            .where(Room.block == block)
            .options(joinedload(Student.room))
            .order_by(Room.room_no, Student.name)
        )
        with self._store_call():
            return list(self.session.execute(stmt).scalars().unique().all())

    def count_in_room(self, room_id: str) -> int:
        stmt = select(func.count()).select_from(Student).where(Student.room_id == room_id)
        with self._store_call():
            return self.session.execute(stmt).scalar_one()
