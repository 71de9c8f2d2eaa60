"""
Room schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from haven.models.enums import RoomStatus
from haven.schemas.base import BaseCreateSchema, BaseUpdateSchema, TimestampedResponseSchema

__all__ = ["RoomCreate", "RoomUpdate", "RoomResponse", "RoomAssignment"]


class RoomCreate(BaseCreateSchema):
    room_no: str = Field(..., min_length=1, max_length=50)
    block: str = Field(..., min_length=1, max_length=10)
    capacity: int = Field(default=2, gt=0, description="Number of beds")
    under_maintenance: bool = False


class RoomUpdate(BaseUpdateSchema):
    """
    Editable room attributes.

    ``status`` may only be used to set or clear ``maintenance``; any other
    value clears the override and lets the status follow occupancy.
    """

    room_no: Optional[str] = Field(default=None, min_length=1, max_length=50)
    block: Optional[str] = Field(default=None, min_length=1, max_length=10)
    capacity: Optional[int] = Field(default=None, gt=0)
    status: Optional[RoomStatus] = None


class RoomResponse(TimestampedResponseSchema):
    room_no: str
    block: str
    capacity: int
    occupied: int
    status: RoomStatus
    vacancy: int


class RoomAssignment(BaseUpdateSchema):
    room_id: Optional[str] = Field(default=None, description="Target room; null vacates")
