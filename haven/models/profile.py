# haven/models/profile.py
"""
Identity profile linked one-to-one with a session user id.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from haven.models.base import BaseModel, TimestampMixin, enum_column
from haven.models.enums import UserRole

__all__ = ["Profile"]


class Profile(BaseModel, TimestampMixin):
    """
    Account profile for admins, wardens and residents.

    ``id`` equals the identity provider's user id. Only an administrator
    changes ``role``; ``assigned_block`` is meaningful for wardens only.
    """

    __tablename__ = "profiles"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole),
        nullable=False,
        default=UserRole.STUDENT,
        index=True,
    )
    assigned_block: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
