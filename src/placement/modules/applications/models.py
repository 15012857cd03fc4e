"""
Application Models

An application links one applicant to one posting. At most one
application may exist per (applicant, posting) pair; the unique
constraint below is what enforces it under concurrent requests.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from placement.modules.shared import BaseModel, enum_values, utcnow

if TYPE_CHECKING:
    from placement.modules.accounts.models import Applicant
    from placement.modules.postings.models import Posting


class ApplicationStatus(str, enum.Enum):
    """Review outcome of an application."""

    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    SELECTED = "selected"


class Application(BaseModel):
    """An applicant's application to a posting."""

    __tablename__ = "applications"

    # ON DELETE CASCADE on both sides: applications never outlive either party
    applicant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applicants.id", ondelete="CASCADE"),
        nullable=False,
    )
    posting_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("postings.id", ondelete="CASCADE"),
        nullable=False,
    )

    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(ApplicationStatus, name="application_status", values_callable=enum_values),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    applicant: Mapped["Applicant"] = relationship("Applicant", lazy="selectin")
    posting: Mapped["Posting"] = relationship("Posting", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("applicant_id", "posting_id", name="uq_applications_applicant_posting"),
        Index("ix_applications_posting_id", "posting_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, applicant={self.applicant_id}, "
            f"posting={self.posting_id}, status={self.status.value})>"
        )
