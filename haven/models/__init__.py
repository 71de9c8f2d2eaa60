"""
Models package.

Importing this package registers every table on ``Base.metadata``.
"""

from haven.models.base import Base, BaseModel, TimestampMixin
from haven.models.enums import (
    UserRole,
    RoomStatus,
    AttendanceStatus,
    RosterStatus,
    FeeStatus,
    PaymentType,
    ComplaintStatus,
    RoomType,
    DayOfWeek,
)
from haven.models.profile import Profile
from haven.models.room import Room
from haven.models.student import Student
from haven.models.attendance import AttendanceRecord
from haven.models.fee import FeeRecord
from haven.models.complaint import Complaint
from haven.models.notice import Notice
from haven.models.inquiry import AdmissionQuery
from haven.models.mess_menu import MessMenuDay

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "UserRole",
    "RoomStatus",
    "AttendanceStatus",
    "RosterStatus",
    "FeeStatus",
    "PaymentType",
    "ComplaintStatus",
    "RoomType",
    "DayOfWeek",
    "Profile",
    "Room",
    "Student",
    "AttendanceRecord",
    "FeeRecord",
    "Complaint",
    "Notice",
    "AdmissionQuery",
    "MessMenuDay",
]
