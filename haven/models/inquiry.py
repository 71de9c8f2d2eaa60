# haven/models/inquiry.py
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from haven.models.base import BaseModel, TimestampMixin

__all__ = ["AdmissionQuery"]


class AdmissionQuery(BaseModel, TimestampMixin):
    """Anonymous admission inquiry captured from the public site."""

    __tablename__ = "queries"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    room_type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
