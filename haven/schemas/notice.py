"""
Notice board and admission inquiry schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from haven.models.enums import RoomType
from haven.schemas.base import BaseCreateSchema, TimestampedResponseSchema

__all__ = ["NoticeCreate", "NoticeResponse", "AdmissionQueryCreate", "AdmissionQueryResponse"]


class NoticeCreate(BaseCreateSchema):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)


class NoticeResponse(TimestampedResponseSchema):
    title: str
    message: str


class AdmissionQueryCreate(BaseCreateSchema):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    room_type: RoomType = RoomType.SINGLE_SEATER
    message: Optional[str] = None


class AdmissionQueryResponse(TimestampedResponseSchema):
    full_name: str
    email: str
    room_type: str
    message: Optional[str] = None
