# haven/models/base.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type
from uuid import uuid4
import enum

from sqlalchemy import DateTime, Enum as SAEnum, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


def enum_column(enum_cls: Type[enum.Enum], length: int = 20) -> SAEnum:
    """Store enum *values* (e.g. 'semi-annual') as constrained strings."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=length,
        validate_strings=True,
        values_callable=lambda members: [m.value for m in members],
    )


class Base(DeclarativeBase):
    """Root SQLAlchemy base class."""
    pass


class BaseModel(Base):
    """
    Abstract base model with a string UUID primary key.

    Every collection in the record store is keyed by an opaque string id
    so that ids coming from the session provider can be reused as-is.
    """
    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
        nullable=False,
    )

    def to_dict(self, exclude: Optional[List[str]] = None) -> Dict[str, Any]:
        exclude = exclude or []
        result: Dict[str, Any] = {}
        for column in self.__table__.columns:
            if column.name in exclude:
                continue
            value = getattr(self, column.name)
            if isinstance(value, enum.Enum):
                value = value.value
            result[column.name] = value
        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"


class TimestampMixin:
    """Creation timestamp used for newest-first listings."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
