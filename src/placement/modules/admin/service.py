"""
Admin Service Layer

Dashboard statistics. Account, posting and application actions live in
their own modules' services and are exposed together by the admin router.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.auth import Session
from placement.modules.accounts.models import AccountRole, AccountStatus
from placement.modules.accounts.repository import AccountRepository
from placement.modules.applications import repository as applications_repository
from placement.modules.applications.models import ApplicationStatus
from placement.modules.authorization import Action, ensure_role
from placement.modules.postings import repository as postings_repository
from placement.modules.postings.models import PostingStatus

logger = logging.getLogger(__name__)


async def get_dashboard_stats(db: AsyncSession, session: Session) -> dict[str, int]:
    """
    Get aggregated counts for the admin dashboard.

    Returns:
        Dict with totals per entity plus pending/blocked account counts,
        pending/active posting counts and selected application count
    """
    ensure_role(session, Action.VIEW_ALL)

    applicants, organizations = AccountRole.APPLICANT, AccountRole.ORGANIZATION

    stats = {
        "total_applicants": await AccountRepository.count(db, applicants),
        "total_organizations": await AccountRepository.count(db, organizations),
        "total_postings": await postings_repository.count(db),
        "total_applications": await applications_repository.count(db),
        "pending_applicants": await AccountRepository.count(db, applicants, AccountStatus.PENDING),
        "pending_organizations": await AccountRepository.count(
            db, organizations, AccountStatus.PENDING
        ),
        "blocked_applicants": await AccountRepository.count(db, applicants, AccountStatus.BLOCKED),
        "blocked_organizations": await AccountRepository.count(
            db, organizations, AccountStatus.BLOCKED
        ),
        "pending_postings": await postings_repository.count(db, PostingStatus.PENDING),
        "active_postings": await postings_repository.count(db, PostingStatus.ACTIVE),
        "selected_applications": await applications_repository.count(
            db, ApplicationStatus.SELECTED
        ),
    }

    logger.info(f"Admin {session.account_id} fetched dashboard stats")
    return stats
