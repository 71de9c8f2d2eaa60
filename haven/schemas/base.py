"""
Base schema classes with common fields and configurations.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All application-facing schemas inherit from this so ORM rows can be
    validated directly (``from_attributes``).
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class BaseCreateSchema(BaseSchema):
    """Base schema for create operations."""
    pass


class BaseUpdateSchema(BaseSchema):
    """
    Base schema for partial updates.

    Subclasses declare every field Optional; only fields the caller set are
    applied (see ``model_dump(exclude_unset=True)``).
    """
    pass


class BaseResponseSchema(BaseSchema):
    """Base schema for API responses of stored records."""

    id: str = Field(..., description="Unique identifier")


class TimestampedResponseSchema(BaseResponseSchema):
    created_at: datetime = Field(..., description="Creation timestamp")
