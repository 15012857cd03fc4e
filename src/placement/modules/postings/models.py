"""
Posting Models

Job postings published by organizations. A posting becomes visible to
applicants only after an administrator approves it.
"""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, CheckConstraint, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from placement.modules.shared import BaseModel, enum_values

if TYPE_CHECKING:
    from placement.modules.accounts.models import Organization


class PostingStatus(str, enum.Enum):
    """Review status of a posting."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class Posting(BaseModel):
    """
    A job posting.

    The owning organization is fixed at creation. Any edit by the owner
    sends the posting back to PENDING for re-review.
    """

    __tablename__ = "postings"

    # ON DELETE CASCADE: deleting an organization removes its postings
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    required_skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    compensation: Mapped[str] = mapped_column(String(100), nullable=False, default="Negotiable")
    location: Mapped[str] = mapped_column(String(100), nullable=False, default="Remote")
    vacancies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    status: Mapped[PostingStatus] = mapped_column(
        Enum(PostingStatus, name="posting_status", values_callable=enum_values),
        nullable=False,
        default=PostingStatus.PENDING,
    )

    organization: Mapped["Organization"] = relationship("Organization", lazy="selectin")

    __table_args__ = (
        CheckConstraint("vacancies > 0", name="ck_postings_vacancies_positive"),
        Index("ix_postings_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Posting(id={self.id}, title={self.title}, status={self.status.value})>"
