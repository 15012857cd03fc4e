"""
Postings Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from placement.modules.accounts.schemas import normalize_skills
from placement.modules.postings.models import Posting, PostingStatus


class PostingCreate(BaseModel):
    """Request body for POST /postings."""

    title: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=50, description="e.g. Full-time, Internship")
    description: str = Field(..., min_length=1)
    required_skills: list[str] = Field(default_factory=list)
    compensation: str = Field("Negotiable", min_length=1, max_length=100)
    location: str = Field("Remote", min_length=1, max_length=100)
    vacancies: int = Field(1, ge=1)

    @field_validator("required_skills")
    @classmethod
    def clean_skills(cls, v: list[str]) -> list[str]:
        return normalize_skills(v)


class PostingUpdate(BaseModel):
    """
    Request body for PUT /postings/{id}.

    Only the fields sent are changed. Any accepted edit sends the posting
    back to pending review.
    """

    title: str | None = Field(None, min_length=1, max_length=200)
    category: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, min_length=1)
    required_skills: list[str] | None = None
    compensation: str | None = Field(None, min_length=1, max_length=100)
    location: str | None = Field(None, min_length=1, max_length=100)
    vacancies: int | None = Field(None, ge=1)

    @field_validator("required_skills")
    @classmethod
    def clean_skills(cls, v: list[str] | None) -> list[str] | None:
        return normalize_skills(v) if v is not None else None


class PostingResponse(BaseModel):
    id: int
    organization_id: int
    organization_name: str | None = None
    title: str
    category: str
    description: str
    required_skills: list[str]
    compensation: str
    location: str
    vacancies: int
    status: PostingStatus
    created_at: datetime
    updated_at: datetime


class OrganizationPostingResponse(PostingResponse):
    """A posting as seen by its owner, with the number of applications received."""

    application_count: int


class RecommendedPostingResponse(PostingResponse):
    """An active posting ranked against the applicant's skills."""

    skill_match: int
    match_percentage: float


class PostingActionResponse(BaseModel):
    """Response for admin approve/reject actions."""

    message: str
    posting: PostingResponse


class MessageResponse(BaseModel):
    message: str


def posting_fields(posting: Posting) -> dict:
    """Flatten a posting (and its organization's name) into response fields."""
    organization = posting.organization
    return {
        "id": posting.id,
        "organization_id": posting.organization_id,
        "organization_name": organization.name if organization is not None else None,
        "title": posting.title,
        "category": posting.category,
        "description": posting.description,
        "required_skills": list(posting.required_skills or []),
        "compensation": posting.compensation,
        "location": posting.location,
        "vacancies": posting.vacancies,
        "status": posting.status,
        "created_at": posting.created_at,
        "updated_at": posting.updated_at,
    }


def to_posting_response(posting: Posting) -> PostingResponse:
    return PostingResponse(**posting_fields(posting))
