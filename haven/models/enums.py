"""
Database enums mirroring schema enums.

Provides the closed value sets used by models, schemas and services.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "admin"
    WARDEN = "warden"
    STUDENT = "student"

    @classmethod
    def from_claim(cls, claim) -> "UserRole":
        """Resolve a raw role claim; anything missing or unknown is a student."""
        if isinstance(claim, cls):
            return claim
        try:
            return cls(str(claim).strip().lower())
        except (ValueError, AttributeError):
            return cls.STUDENT

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.WARDEN)


class RoomStatus(str, enum.Enum):
    """Room availability status."""
    AVAILABLE = "available"
    FILLED = "filled"
    MAINTENANCE = "maintenance"


class AttendanceStatus(str, enum.Enum):
    """Stored attendance state."""
    PRESENT = "present"
    ABSENT = "absent"


class RosterStatus(str, enum.Enum):
    """Attendance state as shown on a day roster; UNMARKED means no record."""
    PRESENT = "present"
    ABSENT = "absent"
    UNMARKED = "unmarked"


class FeeStatus(str, enum.Enum):
    """Fee record lifecycle state."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class PaymentType(str, enum.Enum):
    """Billing cycle of a fee record."""
    SEMI_ANNUAL = "semi-annual"
    YEARLY = "yearly"


class ComplaintStatus(str, enum.Enum):
    """Complaint lifecycle state."""
    PENDING = "pending"
    RESOLVED = "resolved"


class RoomType(str, enum.Enum):
    """Room types offered on the admission inquiry form."""
    SINGLE_SEATER = "Single Seater"
    PREMIUM_SINGLE = "Premium Single"
    DOUBLE_SEATER = "Double Seater"


class DayOfWeek(str, enum.Enum):
    """Weekday names in menu order."""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def order(self) -> int:
        return list(DayOfWeek).index(self)

    @classmethod
    def for_date(cls, value) -> "DayOfWeek":
        return list(cls)[value.weekday()]
