"""
Attendance schemas.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import Field, field_validator

from haven.models.enums import AttendanceStatus, RosterStatus
from haven.schemas.base import BaseSchema, TimestampedResponseSchema

__all__ = [
    "AttendanceMark",
    "BulkPresentRequest",
    "AttendanceResponse",
    "RosterEntry",
]


class AttendanceMark(BaseSchema):
    student_id: str
    date: dt.date
    status: AttendanceStatus


class BulkPresentRequest(BaseSchema):
    student_ids: List[str] = Field(..., min_length=1)
    date: dt.date

    @field_validator("student_ids")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))


class AttendanceResponse(TimestampedResponseSchema):
    student_id: str
    date: dt.date
    status: AttendanceStatus


class RosterEntry(BaseSchema):
    """One resident on a day roster; ``unmarked`` means no record exists."""

    student_id: str
    name: str
    room_no: Optional[str] = None
    status: RosterStatus = RosterStatus.UNMARKED
