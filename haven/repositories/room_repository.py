# haven/repositories/room_repository.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from haven.models.room import Room
from haven.repositories.base import BaseRepository


class RoomRepository(BaseRepository[Room]):
    """
    Room access including the guarded occupancy counter updates.

    The counter statements are conditional so the store itself refuses to
    move ``occupied`` outside ``[0, capacity]`` even when two sessions race
    for the last bed.
    """

    def __init__(self, session: Session):
        super().__init__(session, Room)

    def list_rooms(self, block: Optional[str] = None) -> List[Room]:
        filters = {"block": block} if block else None
        return self.select(filters, order_by=["block", "room_no"])

    def get_by_number(self, block: str, room_no: str) -> Optional[Room]:
        rows = self.select({"block": block, "room_no": room_no}, limit=1)
        return rows[0] if rows else None

    def try_increment_occupancy(self, room_id: str) -> bool:
        stmt = (
            update(Room)
            .where(Room.id == room_id, Room.occupied < Room.capacity)
            .values(occupied=Room.occupied + 1)
            .execution_options(synchronize_session=False)
        )
        with self._store_call():
            result = self.session.execute(stmt)
        return (result.rowcount or 0) == 1

    def try_decrement_occupancy(self, room_id: str) -> bool:
        stmt = (
            update(Room)
            .where(Room.id == room_id, Room.occupied > 0)
            .values(occupied=Room.occupied - 1)
            .execution_options(synchronize_session=False)
        )
        with self._store_call():
            result = self.session.execute(stmt)
        return (result.rowcount or 0) == 1

    def refresh(self, room: Room) -> Room:
        with self._store_call():
            self.session.refresh(room)
        return room

    def vacancy_sum(self, block: Optional[str] = None) -> int:
        stmt = select(func.coalesce(func.sum(Room.capacity - Room.occupied), 0))
        if block:
            stmt = stmt.where(Room.block == block)
        with self._store_call():
            return int(self.session.execute(stmt).scalar_one())
