"""
Account Schemas

Pydantic schemas for registration, login, profiles and admin account views.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from placement.modules.accounts.models import AccountRole, AccountStatus

# bcrypt only looks at the first 72 bytes of a password
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return value


def normalize_skills(skills: list[str] | None) -> list[str]:
    """Strip, drop empties and de-duplicate (case-insensitive), keeping first-seen order."""
    if not skills:
        return []
    seen: set[str] = set()
    result = []
    for skill in skills:
        cleaned = skill.strip()
        key = cleaned.lower()
        if cleaned and key not in seen:
            seen.add(key)
            result.append(cleaned)
    return result


# ============================================
# Registration
# ============================================


class ApplicantRegister(BaseModel):
    """Request body for POST /auth/register/applicant."""

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    phone: str | None = Field(None, max_length=20)
    department: str = Field(..., min_length=1, max_length=100)
    batch: int = Field(..., ge=1950, le=2100, description="Graduation cohort year")
    cgpa: float | None = Field(None, ge=0, le=10)
    skills: list[str] = Field(default_factory=list)
    resume_url: str | None = Field(None, max_length=500)

    @field_validator("password")
    @classmethod
    def password_bytes(cls, v: str) -> str:
        return _check_password_bytes(v)

    @field_validator("name", "department")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: list[str]) -> list[str]:
        return normalize_skills(v)


class OrganizationRegister(BaseModel):
    """Request body for POST /auth/register/organization."""

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    website: str | None = Field(None, max_length=255)
    description: str | None = None
    industry: str | None = Field(None, max_length=100)
    contact_name: str = Field(..., min_length=2, max_length=100)
    contact_phone: str | None = Field(None, max_length=20)

    @field_validator("password")
    @classmethod
    def password_bytes(cls, v: str) -> str:
        return _check_password_bytes(v)

    @field_validator("name", "contact_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


# ============================================
# Login
# ============================================


class LoginRequest(BaseModel):
    """Login request schema. The role selects which namespace the email is looked up in."""

    email: EmailStr
    password: str = Field(..., min_length=1)
    role: AccountRole


# ============================================
# Responses
# ============================================


class ApplicantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: AccountRole = AccountRole.APPLICANT
    name: str
    email: str
    phone: str | None = None
    department: str
    batch: int
    cgpa: float | None = None
    skills: list[str]
    resume_url: str | None = None
    status: AccountStatus
    created_at: datetime


class OrganizationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: AccountRole = AccountRole.ORGANIZATION
    name: str
    email: str
    website: str | None = None
    description: str | None = None
    industry: str | None = None
    contact_name: str
    contact_phone: str | None = None
    status: AccountStatus
    created_at: datetime


class AdministratorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: AccountRole = AccountRole.ADMINISTRATOR
    name: str
    email: str
    created_at: datetime


AccountResponse = ApplicantResponse | OrganizationResponse | AdministratorResponse

_RESPONSE_SCHEMAS: dict[AccountRole, type[BaseModel]] = {
    AccountRole.APPLICANT: ApplicantResponse,
    AccountRole.ORGANIZATION: OrganizationResponse,
    AccountRole.ADMINISTRATOR: AdministratorResponse,
}


def to_account_response(account) -> AccountResponse:
    """Serialize an account with the schema of its role."""
    return _RESPONSE_SCHEMAS[account.role].model_validate(account)


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    token_type: str = "bearer"
    account: AccountResponse


class AccountActionResponse(BaseModel):
    """Response for admin approve/block actions."""

    message: str
    account: ApplicantResponse | OrganizationResponse


class MessageResponse(BaseModel):
    message: str


# ============================================
# Profile
# ============================================


class ApplicantProfileUpdate(BaseModel):
    """Fields an applicant may change on its own profile. Email and status are not editable."""

    name: str | None = Field(None, min_length=2, max_length=100)
    phone: str | None = Field(None, max_length=20)
    department: str | None = Field(None, min_length=1, max_length=100)
    batch: int | None = Field(None, ge=1950, le=2100)
    cgpa: float | None = Field(None, ge=0, le=10)
    skills: list[str] | None = None
    resume_url: str | None = Field(None, max_length=500)

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: list[str] | None) -> list[str] | None:
        return normalize_skills(v) if v is not None else None


class OrganizationProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    website: str | None = Field(None, max_length=255)
    description: str | None = None
    industry: str | None = Field(None, max_length=100)
    contact_name: str | None = Field(None, min_length=2, max_length=100)
    contact_phone: str | None = Field(None, max_length=20)


class AdministratorProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)


class ProfileUpdate(
    ApplicantProfileUpdate, OrganizationProfileUpdate, AdministratorProfileUpdate
):
    """
    Request body for PUT /profile.

    Accepts the union of all editable fields; the service keeps only those
    that belong to the caller's role.
    """


PROFILE_FIELDS: dict[AccountRole, frozenset[str]] = {
    AccountRole.APPLICANT: frozenset(ApplicantProfileUpdate.model_fields),
    AccountRole.ORGANIZATION: frozenset(OrganizationProfileUpdate.model_fields),
    AccountRole.ADMINISTRATOR: frozenset(AdministratorProfileUpdate.model_fields),
}


class PasswordChange(BaseModel):
    """Request body for PUT /profile/password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)

    @field_validator("new_password")
    @classmethod
    def password_bytes(cls, v: str) -> str:
        return _check_password_bytes(v)
