"""
Admin Router

API endpoints for the platform administrator. Every endpoint requires an
administrator session; mutations are rate limited per administrator.

Endpoints:
- GET /admin/stats - Dashboard statistics
- GET /admin/accounts/{variant} - List applicants or organizations
- PUT /admin/accounts/{variant}/{id}/approve - Approve (or unblock) an account
- PUT /admin/accounts/{variant}/{id}/block - Block an account
- DELETE /admin/accounts/{variant}/{id} - Delete an account and its dependents
- GET /admin/postings - List postings in every status
- PUT /admin/postings/{id}/approve - Approve a pending posting
- PUT /admin/postings/{id}/reject - Reject a pending posting
- DELETE /admin/postings/{id} - Delete any posting
- GET /admin/applications - List all applications
- PUT /admin/applications/{id}/status - Set any application's status
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.auth import CurrentAccount, Session, get_current_account
from placement.core.config import settings
from placement.core.database import get_db
from placement.core.rate_limit import enforce_rate_limit
from placement.modules.accounts import service as accounts_service
from placement.modules.accounts.models import AccountRole, AccountStatus
from placement.modules.accounts.schemas import (
    AccountActionResponse,
    ApplicantResponse,
    OrganizationResponse,
    to_account_response,
)
from placement.modules.admin import service
from placement.modules.admin.schemas import DashboardStats
from placement.modules.applications import service as applications_service
from placement.modules.applications.models import ApplicationStatus
from placement.modules.applications.schemas import (
    ApplicationResponse,
    ApplicationStatusUpdate,
    to_application_response,
)
from placement.modules.postings import service as postings_service
from placement.modules.postings.models import PostingStatus
from placement.modules.postings.schemas import (
    MessageResponse,
    PostingActionResponse,
    PostingResponse,
    to_posting_response,
)
from placement.modules.shared.errors import ServiceError
from placement.modules.shared.http import to_http_exception, unexpected_error

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Helper Functions
# ============================================


async def _check_admin_rate_limit(session: Session, action: str) -> None:
    """
    Limit an administrator's mutations per action.

    Raises:
        RateLimitExceeded: If rate limit is exceeded
    """
    await enforce_rate_limit(
        f"admin:{action}:{session.account_id}",
        settings.admin_action_rate_limit,
        settings.admin_action_rate_limit_window_seconds,
    )


# ============================================
# Dashboard
# ============================================


@router.get("/stats", response_model=DashboardStats, summary="Get Dashboard Statistics")
async def get_stats(
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> DashboardStats:
    try:
        stats = await service.get_dashboard_stats(db, current.session)
        return DashboardStats(**stats)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "getting dashboard stats") from e


# ============================================
# Accounts
# ============================================


@router.get(
    "/accounts/{variant}",
    response_model=list[ApplicantResponse] | list[OrganizationResponse],
    summary="List Accounts",
)
async def list_accounts(
    variant: AccountRole,
    status: AccountStatus | None = Query(None, description="Filter by account status"),
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
):
    try:
        accounts = await accounts_service.admin_list_accounts(db, current.session, variant, status)
        return [to_account_response(a) for a in accounts]
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"listing {variant.value} accounts") from e


@router.put(
    "/accounts/{variant}/{account_id}/approve",
    response_model=AccountActionResponse,
    summary="Approve Account",
)
async def approve_account(
    variant: AccountRole,
    account_id: int,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> AccountActionResponse:
    """Approve a pending account, or unblock a blocked one."""
    await _check_admin_rate_limit(current.session, "approve_account")
    try:
        account = await accounts_service.admin_approve_account(
            db, current.session, variant, account_id
        )
        return AccountActionResponse(
            message=f"{variant.value.capitalize()} approved successfully.",
            account=to_account_response(account),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"approving {variant.value} {account_id}") from e


@router.put(
    "/accounts/{variant}/{account_id}/block",
    response_model=AccountActionResponse,
    summary="Block Account",
)
async def block_account(
    variant: AccountRole,
    account_id: int,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> AccountActionResponse:
    await _check_admin_rate_limit(current.session, "block_account")
    try:
        account = await accounts_service.admin_block_account(
            db, current.session, variant, account_id
        )
        return AccountActionResponse(
            message=f"{variant.value.capitalize()} blocked successfully.",
            account=to_account_response(account),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"blocking {variant.value} {account_id}") from e


@router.delete(
    "/accounts/{variant}/{account_id}",
    response_model=MessageResponse,
    summary="Delete Account",
)
async def delete_account(
    variant: AccountRole,
    account_id: int,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> MessageResponse:
    """Delete an account together with its postings and applications."""
    await _check_admin_rate_limit(current.session, "delete_account")
    try:
        await accounts_service.admin_delete_account(db, current.session, variant, account_id)
        return MessageResponse(message=f"{variant.value.capitalize()} deleted successfully.")
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"deleting {variant.value} {account_id}") from e


# ============================================
# Postings
# ============================================


@router.get("/postings", response_model=list[PostingResponse], summary="List All Postings")
async def list_postings(
    status: PostingStatus | None = Query(None, description="Filter by posting status"),
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> list[PostingResponse]:
    try:
        postings = await postings_service.admin_list_postings(db, current.session, status)
        return [to_posting_response(p) for p in postings]
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "listing postings") from e


@router.put(
    "/postings/{posting_id}/approve",
    response_model=PostingActionResponse,
    summary="Approve Posting",
    responses={409: {"description": "Posting was rejected and has not been edited since"}},
)
async def approve_posting(
    posting_id: int,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> PostingActionResponse:
    await _check_admin_rate_limit(current.session, "approve_posting")
    try:
        posting = await postings_service.admin_approve_posting(db, current.session, posting_id)
        return PostingActionResponse(
            message="Posting approved successfully.",
            posting=to_posting_response(posting),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"approving posting {posting_id}") from e


@router.put(
    "/postings/{posting_id}/reject",
    response_model=PostingActionResponse,
    summary="Reject Posting",
    responses={409: {"description": "Posting is already active"}},
)
async def reject_posting(
    posting_id: int,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> PostingActionResponse:
    await _check_admin_rate_limit(current.session, "reject_posting")
    try:
        posting = await postings_service.admin_reject_posting(db, current.session, posting_id)
        return PostingActionResponse(
            message="Posting rejected.",
            posting=to_posting_response(posting),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"rejecting posting {posting_id}") from e


@router.delete("/postings/{posting_id}", response_model=MessageResponse, summary="Delete Posting")
async def delete_posting(
    posting_id: int,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> MessageResponse:
    await _check_admin_rate_limit(current.session, "delete_posting")
    try:
        await postings_service.admin_delete_posting(db, current.session, posting_id)
        return MessageResponse(message="Posting deleted successfully.")
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"deleting posting {posting_id}") from e


# ============================================
# Applications
# ============================================


@router.get(
    "/applications",
    response_model=list[ApplicationResponse],
    summary="List All Applications",
)
async def list_applications(
    status: ApplicationStatus | None = Query(None, description="Filter by application status"),
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> list[ApplicationResponse]:
    try:
        applications = await applications_service.admin_list_applications(
            db, current.session, status
        )
        return [to_application_response(a) for a in applications]
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "listing applications") from e


@router.put(
    "/applications/{application_id}/status",
    response_model=ApplicationResponse,
    summary="Set Application Status",
)
async def set_application_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> ApplicationResponse:
    await _check_admin_rate_limit(current.session, "set_application_status")
    try:
        application = await applications_service.set_application_status(
            db, current.session, application_id, data.status
        )
        return to_application_response(application)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, f"updating application {application_id}") from e
