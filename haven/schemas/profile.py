"""
Profile, signup and principal schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from haven.models.enums import UserRole
from haven.schemas.base import BaseCreateSchema, BaseSchema, TimestampedResponseSchema

__all__ = [
    "SignupRequest",
    "ProfileResponse",
    "RoleChangeRequest",
    "BlockAssignmentRequest",
    "PrincipalResponse",
]


class SignupRequest(BaseCreateSchema):
    """Account creation payload; residents also get a student record."""

    user_id: Optional[str] = Field(
        default=None,
        max_length=36,
        description="Identity provider user id; generated when omitted",
    )
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=32)
    course: Optional[str] = Field(default=None, max_length=255)
    parent_phone: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = None
    blood_group: Optional[str] = Field(default=None, max_length=5)


class ProfileResponse(TimestampedResponseSchema):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    assigned_block: Optional[str] = None


class RoleChangeRequest(BaseSchema):
    role: UserRole


class BlockAssignmentRequest(BaseSchema):
    block: str = Field(..., min_length=1, max_length=10)


class PrincipalResponse(BaseSchema):
    """Resolved identity of the caller and where their dashboard lives."""

    user_id: str
    role: UserRole
    assigned_block: Optional[str] = None
    landing_view: str
    access_token: Optional[str] = None
