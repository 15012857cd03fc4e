"""
Applications Router

Endpoints:
- POST /applications - Apply to an active posting (approved applicant)
- GET /applications/mine - Own applications (applicant)
- GET /applications/received - Applications to own postings (organization)
- PUT /applications/{id}/status - Set status (owning organization)
- DELETE /applications/{id} - Withdraw own application (applicant)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.auth import CurrentAccount, get_current_account
from placement.core.database import get_db
from placement.modules.applications import service
from placement.modules.applications.schemas import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    MessageResponse,
    ReceivedApplicationResponse,
    to_application_response,
    to_received_application_response,
)
from placement.modules.shared.errors import ServiceError
from placement.modules.shared.http import to_http_exception, unexpected_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to Posting",
    responses={
        403: {"description": "Not an approved applicant"},
        404: {"description": "Posting not found or not active"},
        409: {"description": "Already applied to this posting"},
    },
)
async def create_application(
    data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> ApplicationResponse:
    try:
        application = await service.create_application(db, current, data.posting_id)
        return to_application_response(application)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "creating application") from e


@router.get("/mine", response_model=list[ApplicationResponse], summary="List Own Applications")
async def list_my_applications(
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> list[ApplicationResponse]:
    try:
        applications = await service.list_my_applications(db, current.session)
        return [to_application_response(a) for a in applications]
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "listing applications") from e


@router.get(
    "/received",
    response_model=list[ReceivedApplicationResponse],
    summary="List Received Applications",
)
async def list_received_applications(
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> list[ReceivedApplicationResponse]:
    try:
        applications = await service.list_received_applications(db, current.session)
        return [to_received_application_response(a) for a in applications]
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "listing received applications") from e


@router.put(
    "/{application_id}/status",
    response_model=ApplicationResponse,
    summary="Set Application Status",
    responses={
        403: {"description": "Application is for another organization's posting"},
        404: {"description": "Application not found"},
        422: {"description": "Unknown status value"},
    },
)
async def set_application_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> ApplicationResponse:
    try:
        application = await service.set_application_status(
            db, current.session, application_id, data.status
        )
        return to_application_response(application)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"updating application {application_id}") from e


@router.delete("/{application_id}", response_model=MessageResponse, summary="Withdraw Application")
async def withdraw_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> MessageResponse:
    try:
        await service.withdraw_application(db, current.session, application_id)
        return MessageResponse(message="Application withdrawn successfully.")
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"withdrawing application {application_id}") from e
