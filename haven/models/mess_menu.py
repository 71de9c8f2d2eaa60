# haven/models/mess_menu.py
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from haven.models.base import BaseModel, enum_column
from haven.models.enums import DayOfWeek

__all__ = ["MessMenuDay"]


class MessMenuDay(BaseModel):
    """Meals served on one weekday."""

    __tablename__ = "mess_menu"

    day_of_week: Mapped[DayOfWeek] = mapped_column(
        enum_column(DayOfWeek),
        nullable=False,
        unique=True,
    )
    breakfast: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    lunch: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    snacks: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    dinner: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
