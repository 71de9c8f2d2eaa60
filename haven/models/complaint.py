# haven/models/complaint.py
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from haven.models.base import BaseModel, TimestampMixin, enum_column
from haven.models.enums import ComplaintStatus

if TYPE_CHECKING:
    from haven.models.student import Student

__all__ = ["Complaint"]


class Complaint(BaseModel, TimestampMixin):
    """Resident-filed issue. ``student_id`` is the owner and never changes."""

    __tablename__ = "complaints"

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ComplaintStatus] = mapped_column(
        enum_column(ComplaintStatus),
        nullable=False,
        default=ComplaintStatus.PENDING,
        index=True,
    )

    student: Mapped["Student"] = relationship(back_populates="complaints")
