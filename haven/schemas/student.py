"""
Student schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from haven.models.enums import FeeStatus
from haven.schemas.base import BaseSchema, BaseUpdateSchema, TimestampedResponseSchema

__all__ = [
    "StudentResponse",
    "StudentSelfUpdate",
    "StudentAdminUpdate",
    "BlockStudentEntry",
]


class StudentResponse(TimestampedResponseSchema):
    user_id: Optional[str] = None
    name: str
    course: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    parent_phone: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[str] = None
    room_id: Optional[str] = None


class StudentSelfUpdate(BaseUpdateSchema):
    """Fields a resident may edit on their own record."""

    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=32)
    parent_phone: Optional[str] = Field(default=None, max_length=32)
    blood_group: Optional[str] = Field(default=None, max_length=5)
    address: Optional[str] = None


class StudentAdminUpdate(StudentSelfUpdate):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    course: Optional[str] = Field(default=None, max_length=255)


class BlockStudentEntry(BaseSchema):
    """Warden's block listing row."""

    student_id: str
    name: str
    course: Optional[str] = None
    phone: Optional[str] = None
    room_no: Optional[str] = None
    fee_status: FeeStatus = FeeStatus.PENDING
