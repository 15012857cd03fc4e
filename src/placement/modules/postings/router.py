"""
Postings Router

Endpoints:
- GET /postings - List active postings (public)
- POST /postings - Create a posting (approved organization)
- GET /postings/mine - Own postings with application counts (organization)
- GET /postings/recommended - Active postings ranked by skill match (applicant)
- GET /postings/{id} - Posting details (public for active postings)
- PUT /postings/{id} - Edit own posting, sends it back for review (organization)
- DELETE /postings/{id} - Delete own posting (organization)
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.auth import (
    CurrentAccount,
    Session,
    get_current_account,
    get_optional_session,
)
from placement.core.database import get_db
from placement.modules.postings import service
from placement.modules.postings.schemas import (
    MessageResponse,
    OrganizationPostingResponse,
    PostingCreate,
    PostingResponse,
    PostingUpdate,
    RecommendedPostingResponse,
    posting_fields,
    to_posting_response,
)
from placement.modules.shared.errors import ServiceError
from placement.modules.shared.http import to_http_exception, unexpected_error

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Listing
# ============================================


@router.get("", response_model=list[PostingResponse], summary="List Active Postings")
async def list_postings(db: AsyncSession = Depends(get_db)) -> list[PostingResponse]:
    try:
        postings = await service.list_active_postings(db)
        return [to_posting_response(p) for p in postings]
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "listing postings") from e


@router.get(
    "/mine",
    response_model=list[OrganizationPostingResponse],
    summary="List Own Postings",
)
async def list_my_postings(
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> list[OrganizationPostingResponse]:
    """All of the calling organization's postings, in every status."""
    try:
        rows = await service.list_organization_postings(db, current.session)
        return [
            OrganizationPostingResponse(**posting_fields(posting), application_count=count)
            for posting, count in rows
        ]
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "listing organization postings") from e


@router.get(
    "/recommended",
    response_model=list[RecommendedPostingResponse],
    summary="Recommended Postings",
)
async def list_recommended_postings(
    limit: int = Query(10, ge=1, le=50, description="Maximum postings to return"),
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> list[RecommendedPostingResponse]:
    """Active postings ranked by how well they match the applicant's skills."""
    try:
        ranked = await service.recommended_postings(db, current, limit=limit)
        return [
            RecommendedPostingResponse(
                **posting_fields(posting),
                skill_match=skill_match,
                match_percentage=percentage,
            )
            for posting, skill_match, percentage in ranked
        ]
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "building recommendations") from e


# ============================================
# Single Posting
# ============================================


@router.post(
    "",
    response_model=PostingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Posting",
    responses={403: {"description": "Not an approved organization"}},
)
async def create_posting(
    data: PostingCreate,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> PostingResponse:
    """Create a posting. It stays pending until an administrator approves it."""
    try:
        posting = await service.create_posting(db, current, data)
        return to_posting_response(posting)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "creating posting") from e


@router.get("/{posting_id}", response_model=PostingResponse, summary="Get Posting")
async def get_posting(
    posting_id: int,
    db: AsyncSession = Depends(get_db),
    session: Session | None = Depends(get_optional_session),
) -> PostingResponse:
    try:
        posting = await service.get_posting(db, posting_id, session)
        return to_posting_response(posting)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"fetching posting {posting_id}") from e


@router.put(
    "/{posting_id}",
    response_model=PostingResponse,
    summary="Edit Posting",
    responses={
        403: {"description": "Not the owning organization"},
        404: {"description": "Posting not found"},
    },
)
async def edit_posting(
    posting_id: int,
    data: PostingUpdate,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> PostingResponse:
    try:
        posting = await service.edit_posting(db, current.session, posting_id, data)
        return to_posting_response(posting)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"editing posting {posting_id}") from e


@router.delete("/{posting_id}", response_model=MessageResponse, summary="Delete Posting")
async def delete_posting(
    posting_id: int,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> MessageResponse:
    try:
        await service.delete_own_posting(db, current.session, posting_id)
        return MessageResponse(message="Posting deleted successfully.")
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"deleting posting {posting_id}") from e
