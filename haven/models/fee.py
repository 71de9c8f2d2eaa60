# haven/models/fee.py
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from haven.models.base import BaseModel, TimestampMixin, enum_column
from haven.models.enums import FeeStatus, PaymentType

if TYPE_CHECKING:
    from haven.models.student import Student

__all__ = ["FeeRecord"]


class FeeRecord(BaseModel, TimestampMixin):
    """
    Billing record for the current cycle of a single student.

    ``payment_date`` is stamped once, on the transition into ``paid``.
    """

    __tablename__ = "fees"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_fees_amount_non_negative"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_type: Mapped[PaymentType] = mapped_column(
        enum_column(PaymentType),
        nullable=False,
        default=PaymentType.SEMI_ANNUAL,
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[FeeStatus] = mapped_column(
        enum_column(FeeStatus),
        nullable=False,
        default=FeeStatus.PENDING,
        index=True,
    )
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    student: Mapped["Student"] = relationship(back_populates="fees")
