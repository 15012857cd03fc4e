"""
Shared Model Base

Abstract base carrying the surrogate key and audit timestamps that every
table in the portal shares.
"""

import enum
from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from placement.core.database import Base


def utcnow() -> datetime:
    return datetime.now(UTC)


def enum_values(enum_class: type[enum.Enum]) -> list[str]:
    """Persist enum members by value ('pending') rather than by name."""
    return [member.value for member in enum_class]


class BaseModel(Base):
    """
    Abstract base model.

    Ids are opaque auto-increment integers assigned by the store at creation.
    Timestamps are set on the Python side so they are available on the
    instance right after a flush.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )
