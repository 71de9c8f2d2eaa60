"""
Fee schemas.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import Field

from haven.models.enums import FeeStatus, PaymentType
from haven.schemas.base import BaseCreateSchema, BaseSchema, TimestampedResponseSchema

__all__ = ["FeeCreate", "FeeResponse", "FeeBreakdown"]


class FeeCreate(BaseCreateSchema):
    student_id: str
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    payment_type: PaymentType = PaymentType.SEMI_ANNUAL
    due_date: date


class FeeResponse(TimestampedResponseSchema):
    student_id: str
    amount: Decimal
    payment_type: PaymentType
    due_date: date
    status: FeeStatus
    display_status: Optional[FeeStatus] = Field(
        default=None,
        description="Status as shown today; pending fees past due read as overdue",
    )
    payment_date: Optional[datetime] = None


class FeeBreakdown(BaseSchema):
    counts: Dict[FeeStatus, int]
    total_amount: Decimal
    collected_amount: Decimal
