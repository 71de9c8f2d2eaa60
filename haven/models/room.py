# haven/models/room.py
"""
Room entity with the occupancy counters owned by the occupancy ledger.
"""

from typing import List, TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from haven.models.base import BaseModel, TimestampMixin, enum_column
from haven.models.enums import RoomStatus

if TYPE_CHECKING:
    from haven.models.student import Student

__all__ = ["Room"]


class Room(BaseModel, TimestampMixin):
    """
    Physical room within a block.

    ``occupied`` and ``capacity`` are only written through the room
    occupancy service; the CHECK constraints below back that up at the
    store level.
    """

    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("block", "room_no", name="uq_rooms_block_room_no"),
        CheckConstraint("capacity > 0", name="ck_rooms_capacity_positive"),
        CheckConstraint("occupied >= 0", name="ck_rooms_occupied_non_negative"),
        CheckConstraint("occupied <= capacity", name="ck_rooms_occupied_within_capacity"),
    )

    room_no: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    block: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    occupied: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[RoomStatus] = mapped_column(
        enum_column(RoomStatus),
        nullable=False,
        default=RoomStatus.AVAILABLE,
    )

    students: Mapped[List["Student"]] = relationship(back_populates="room")

    @property
    def vacancy(self) -> int:
        return self.capacity - self.occupied
