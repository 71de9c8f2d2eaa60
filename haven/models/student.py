# haven/models/student.py
"""
Resident record and its room reference.
"""

from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from haven.models.base import BaseModel, TimestampMixin

if TYPE_CHECKING:
    from haven.models.attendance import AttendanceRecord
    from haven.models.complaint import Complaint
    from haven.models.fee import FeeRecord
    from haven.models.room import Room

__all__ = ["Student"]


class Student(BaseModel, TimestampMixin):
    """
    Resident record created at signup.

    ``room_id`` is only changed through the occupancy ledger so that the
    referenced room's ``occupied`` counter always includes this student.
    """

    __tablename__ = "students"

    user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    course: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    parent_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    blood_group: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    room_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    room: Mapped[Optional["Room"]] = relationship(back_populates="students")
    attendance: Mapped[List["AttendanceRecord"]] = relationship(
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    fees: Mapped[List["FeeRecord"]] = relationship(
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    complaints: Mapped[List["Complaint"]] = relationship(
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
