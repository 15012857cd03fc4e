"""
Applications Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from placement.modules.applications.models import Application, ApplicationStatus


class ApplicationCreate(BaseModel):
    """Request body for POST /applications."""

    posting_id: int = Field(..., ge=1)


class ApplicationStatusUpdate(BaseModel):
    """
    Request body for setting an application's status.

    Kept as a plain string so an unknown value is reported as INVALID_STATUS
    with the list of allowed values.
    """

    status: str = Field(..., min_length=1, max_length=20)


class ApplicationResponse(BaseModel):
    id: int
    applicant_id: int
    posting_id: int
    status: ApplicationStatus
    applied_at: datetime
    posting_title: str | None = None
    organization_name: str | None = None
    applicant_name: str | None = None
    applicant_email: str | None = None


class ReceivedApplicationResponse(ApplicationResponse):
    """An application as seen by the organization that received it."""

    applicant_department: str | None = None
    applicant_batch: int | None = None
    applicant_skills: list[str] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str


def to_application_response(application: Application) -> ApplicationResponse:
    posting = application.posting
    applicant = application.applicant
    organization = posting.organization if posting is not None else None
    return ApplicationResponse(
        id=application.id,
        applicant_id=application.applicant_id,
        posting_id=application.posting_id,
        status=application.status,
        applied_at=application.applied_at,
        posting_title=posting.title if posting is not None else None,
        organization_name=organization.name if organization is not None else None,
        applicant_name=applicant.name if applicant is not None else None,
        applicant_email=applicant.email if applicant is not None else None,
    )


def to_received_application_response(application: Application) -> ReceivedApplicationResponse:
    applicant = application.applicant
    return ReceivedApplicationResponse(
        **to_application_response(application).model_dump(),
        applicant_department=applicant.department if applicant is not None else None,
        applicant_batch=applicant.batch if applicant is not None else None,
        applicant_skills=list(applicant.skills or []) if applicant is not None else [],
    )
