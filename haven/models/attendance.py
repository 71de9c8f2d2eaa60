# haven/models/attendance.py
import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from haven.models.base import BaseModel, TimestampMixin, enum_column
from haven.models.enums import AttendanceStatus

if TYPE_CHECKING:
    from haven.models.student import Student

__all__ = ["AttendanceRecord"]


class AttendanceRecord(BaseModel, TimestampMixin):
    """One presence mark per student per day; overwritten, never deleted."""

    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("student_id", "date", name="uq_attendance_student_date"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[AttendanceStatus] = mapped_column(
        enum_column(AttendanceStatus),
        nullable=False,
    )

    student: Mapped["Student"] = relationship(back_populates="attendance")
