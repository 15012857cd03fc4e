"""
Account Models

Identity records for the three account kinds. Each kind lives in its own
table and has its own email namespace.
"""

import enum

from sqlalchemy import JSON, Enum, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from placement.modules.shared import BaseModel, enum_values


class AccountRole(str, enum.Enum):
    """Account kinds. The value is the role claim carried in session tokens."""

    APPLICANT = "applicant"
    ORGANIZATION = "organization"
    ADMINISTRATOR = "administrator"


class AccountStatus(str, enum.Enum):
    """Approval status shared by applicants and organizations."""

    PENDING = "pending"
    APPROVED = "approved"
    BLOCKED = "blocked"


class Applicant(BaseModel):
    """
    A student looking for placement.

    New applicants start in PENDING and must be approved by an
    administrator before they can log in or apply.
    """

    __tablename__ = "applicants"

    role = AccountRole.APPLICANT

    # Identity
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    # Profile
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    batch: Mapped[int] = mapped_column(Integer, nullable=False)
    cgpa: Mapped[float | None] = mapped_column(Float, nullable=True)
    skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    resume_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    status: Mapped[AccountStatus] = mapped_column(
        Enum(AccountStatus, name="account_status", values_callable=enum_values),
        nullable=False,
        default=AccountStatus.PENDING,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Applicant(id={self.id}, email={self.email}, status={self.status.value})>"


class Organization(BaseModel):
    """
    A company publishing postings.

    Approval state is a single status rather than separate approved/blocked
    flags, so "approved and blocked at once" cannot be represented.
    """

    __tablename__ = "organizations"

    role = AccountRole.ORGANIZATION

    # Identity
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    # Profile
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    contact_name: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    status: Mapped[AccountStatus] = mapped_column(
        Enum(AccountStatus, name="account_status", values_callable=enum_values),
        nullable=False,
        default=AccountStatus.PENDING,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, email={self.email}, status={self.status.value})>"


class Administrator(BaseModel):
    """Platform administrator. Identity only, always fully privileged."""

    __tablename__ = "administrators"

    role = AccountRole.ADMINISTRATOR

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Administrator(id={self.id}, email={self.email})>"


Account = Applicant | Organization | Administrator

ACCOUNT_MODELS: dict[AccountRole, type[Applicant] | type[Organization] | type[Administrator]] = {
    AccountRole.APPLICANT: Applicant,
    AccountRole.ORGANIZATION: Organization,
    AccountRole.ADMINISTRATOR: Administrator,
}
