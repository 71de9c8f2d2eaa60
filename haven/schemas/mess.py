"""
Mess menu schemas.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from haven.models.enums import DayOfWeek
from haven.schemas.base import BaseResponseSchema, BaseSchema

__all__ = ["MenuDayUpdate", "WeeklyMenuUpdate", "MenuDayResponse"]


class MenuDayUpdate(BaseSchema):
    day_of_week: DayOfWeek
    breakfast: Optional[str] = Field(default=None, max_length=255)
    lunch: Optional[str] = Field(default=None, max_length=255)
    snacks: Optional[str] = Field(default=None, max_length=255)
    dinner: Optional[str] = Field(default=None, max_length=255)


class WeeklyMenuUpdate(BaseSchema):
    days: List[MenuDayUpdate] = Field(..., min_length=1, max_length=7)


class MenuDayResponse(BaseResponseSchema):
    day_of_week: DayOfWeek
    breakfast: Optional[str] = None
    lunch: Optional[str] = None
    snacks: Optional[str] = None
    dinner: Optional[str] = None
