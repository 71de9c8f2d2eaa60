"""
Complaint schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from haven.models.enums import ComplaintStatus
from haven.schemas.base import BaseCreateSchema, TimestampedResponseSchema

__all__ = ["ComplaintCreate", "RoomChangeRequest", "ComplaintResponse"]


class ComplaintCreate(BaseCreateSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class RoomChangeRequest(BaseCreateSchema):
    preferred_block: str = Field(..., min_length=1, max_length=10)
    reason: str = Field(..., min_length=1)


class ComplaintResponse(TimestampedResponseSchema):
    student_id: str
    title: str
    description: str
    status: ComplaintStatus
    student_name: Optional[str] = None
    room_no: Optional[str] = None
