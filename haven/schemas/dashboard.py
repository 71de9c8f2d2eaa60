"""
Dashboard summary schemas.
"""

from __future__ import annotations

import datetime as dt
from typing import Dict, Optional

from haven.models.enums import FeeStatus
from haven.schemas.base import BaseSchema

__all__ = ["AdminOverview", "WardenOverview"]


class AdminOverview(BaseSchema):
    total_students: int
    total_rooms: int
    vacant_beds: int
    total_wardens: int
    pending_fees: int
    fee_breakdown: Dict[FeeStatus, int]


class WardenOverview(BaseSchema):
    block: Optional[str] = None
    date: dt.date
    present_count: int
    vacant_beds: int
    pending_complaints: int
