# haven/models/notice.py
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from haven.models.base import BaseModel, TimestampMixin

__all__ = ["Notice"]


class Notice(BaseModel, TimestampMixin):
    """Staff announcement; immutable once posted."""

    __tablename__ = "notices"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
