"""
Postings Service Layer

Business logic for job postings.

Lifecycle:
- An approved organization creates a posting in PENDING
- An administrator approves (ACTIVE) or rejects (REJECTED) it
- Any edit by the owner sends it back to PENDING for re-review
- Only ACTIVE postings are visible to the public and open for applications

Deleting a posting, by its owner or an administrator, removes every
application made to it in the same transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.auth import CurrentAccount, Session
from placement.modules.accounts.models import AccountRole
from placement.modules.authorization import Action, ensure_allowed, ensure_role
from placement.modules.lifecycle import PostingEvent, next_posting_status
from placement.modules.postings import repository
from placement.modules.postings.models import Posting, PostingStatus
from placement.modules.postings.schemas import PostingCreate, PostingUpdate
from placement.modules.shared import atomic
from placement.modules.shared.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

RECOMMENDATION_LIMIT = 10


async def _get_posting_or_404(db: AsyncSession, posting_id: int) -> Posting:
    posting = await repository.get_by_id(db, posting_id)
    if posting is None:
        raise NotFoundError("posting", posting_id)
    return posting


# ============================================
# Organization Operations
# ============================================


async def create_posting(db: AsyncSession, current: CurrentAccount, data: PostingCreate) -> Posting:
    """
    Create a posting for the calling organization.

    Raises:
        ForbiddenError: Caller is not an organization, or is not approved
    """
    ensure_allowed(current.session, Action.CREATE_POSTING, actor=current.account)

    async with atomic(db):
        posting = await repository.create(db, current.session.account_id, **data.model_dump())

    logger.info(f"Organization {current.session.account_id} created posting {posting.id}")
    return posting


async def edit_posting(
    db: AsyncSession,
    session: Session,
    posting_id: int,
    data: PostingUpdate,
) -> Posting:
    """
    Apply an owner's edit and send the posting back for review.

    Raises:
        ValidationError: If no field was provided
        ForbiddenError: Caller is not an organization
        NotFoundError: Posting does not exist
        ForbiddenCrossTenantError: Posting belongs to another organization
    """
    ensure_role(session, Action.EDIT_POSTING)

    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if not changes:
        raise ValidationError("No posting fields were provided.")

    posting = await _get_posting_or_404(db, posting_id)
    ensure_allowed(session, Action.EDIT_POSTING, posting=posting)

    new_status = next_posting_status(posting.status, PostingEvent.EDIT)

    async with atomic(db):
        await repository.update_fields(db, posting, **changes)
        await repository.set_status(db, posting, new_status)

    logger.info(f"Posting {posting_id} edited by its owner, status now {new_status.value}")
    return posting


async def delete_own_posting(db: AsyncSession, session: Session, posting_id: int) -> None:
    """
    Delete a posting owned by the calling organization.

    Raises:
        ForbiddenError: Caller is not an organization
        NotFoundError: Posting does not exist
        ForbiddenCrossTenantError: Posting belongs to another organization
    """
    ensure_role(session, Action.DELETE_OWN_POSTING)
    posting = await _get_posting_or_404(db, posting_id)
    ensure_allowed(session, Action.DELETE_OWN_POSTING, posting=posting)

    async with atomic(db):
        await repository.delete_with_applications(db, posting_id)

    logger.info(f"Posting {posting_id} deleted by its owner")


async def list_organization_postings(
    db: AsyncSession,
    session: Session,
) -> list[tuple[Posting, int]]:
    """List the calling organization's postings in every status, with application counts."""
    ensure_role(session, Action.LIST_OWN_POSTINGS)
    return await repository.list_by_organization_with_counts(db, session.account_id)


# ============================================
# Public Operations
# ============================================


async def list_active_postings(db: AsyncSession) -> list[Posting]:
    """List active postings, newest first."""
    return await repository.list_by_status(db, PostingStatus.ACTIVE)


async def get_posting(db: AsyncSession, posting_id: int, session: Session | None = None) -> Posting:
    """
    Get a single posting.

    Active postings are public. Pending and rejected postings are visible
    only to their owner and to administrators; to everyone else they do
    not exist.

    Raises:
        NotFoundError: Posting does not exist or is not visible to the caller
    """
    posting = await _get_posting_or_404(db, posting_id)

    if posting.status == PostingStatus.ACTIVE:
        return posting

    if session is not None and (
        session.is_admin
        or (
            session.role == AccountRole.ORGANIZATION
            and session.account_id == posting.organization_id
        )
    ):
        return posting

    raise NotFoundError("posting", posting_id)


# ============================================
# Recommendations
# ============================================


def match_skills(applicant_skills: list[str], required_skills: list[str]) -> tuple[int, float]:
    """
    Score how well an applicant's skills cover a posting's required skills.

    A skill matches when either name contains the other, ignoring case
    ("python" matches "Python 3").

    Returns:
        Tuple of (number of applicant skills that match, percentage of
        required skills covered, 0-100)
    """
    applicant = [s.lower() for s in applicant_skills if s]
    required = [s.lower() for s in required_skills if s]
    if not applicant or not required:
        return 0, 0.0

    def _matches(a: str, b: str) -> bool:
        return a in b or b in a

    skill_match = sum(1 for skill in applicant if any(_matches(skill, r) for r in required))
    covered = sum(1 for r in required if any(_matches(skill, r) for skill in applicant))
    return skill_match, round(covered / len(required) * 100, 2)


async def recommended_postings(
    db: AsyncSession,
    current: CurrentAccount,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[tuple[Posting, int, float]]:
    """
    Rank active postings against the calling applicant's skills.

    Returns:
        Up to ``limit`` tuples of (posting, skill_match, match_percentage),
        best match first; ties keep newest first
    """
    ensure_role(current.session, Action.RECOMMEND_POSTINGS)

    skills = list(getattr(current.account, "skills", None) or [])
    postings = await repository.list_by_status(db, PostingStatus.ACTIVE)

    scored = []
    for posting in postings:
        skill_match, percentage = match_skills(skills, list(posting.required_skills or []))
        scored.append((posting, skill_match, percentage))

    scored.sort(key=lambda item: (item[2], item[1]), reverse=True)
    return scored[:limit]


# ============================================
# Administrator Operations
# ============================================


async def _apply_posting_decision(
    db: AsyncSession,
    session: Session,
    posting_id: int,
    event: PostingEvent,
    action: Action,
) -> Posting:
    ensure_role(session, action)
    posting = await _get_posting_or_404(db, posting_id)
    ensure_allowed(session, action, posting=posting)

    new_status = next_posting_status(posting.status, event)
    if new_status == posting.status:
        logger.info(f"Posting {posting_id} already {new_status.value}, nothing to do")
        return posting

    async with atomic(db):
        await repository.set_status(db, posting, new_status)

    logger.info(f"Admin {session.account_id} applied {event.value} to posting {posting_id}")
    return posting


async def admin_approve_posting(db: AsyncSession, session: Session, posting_id: int) -> Posting:
    """
    Approve a pending posting, making it active.

    Raises:
        ForbiddenError: Caller is not an administrator
        NotFoundError: Posting does not exist
        InvalidStatusTransitionError: Posting is rejected (must be edited first)
    """
    return await _apply_posting_decision(
        db, session, posting_id, PostingEvent.APPROVE, Action.APPROVE_POSTING
    )


async def admin_reject_posting(db: AsyncSession, session: Session, posting_id: int) -> Posting:
    """
    Reject a pending posting.

    Raises:
        ForbiddenError: Caller is not an administrator
        NotFoundError: Posting does not exist
        InvalidStatusTransitionError: Posting is already active
    """
    return await _apply_posting_decision(
        db, session, posting_id, PostingEvent.REJECT, Action.REJECT_POSTING
    )


async def admin_delete_posting(db: AsyncSession, session: Session, posting_id: int) -> None:
    """Delete any posting, in any status, with its applications."""
    ensure_role(session, Action.DELETE_ANY_POSTING)
    await _get_posting_or_404(db, posting_id)

    async with atomic(db):
        await repository.delete_with_applications(db, posting_id)

    logger.info(f"Admin {session.account_id} deleted posting {posting_id}")


async def admin_list_postings(
    db: AsyncSession,
    session: Session,
    status: PostingStatus | None = None,
) -> list[Posting]:
    """List postings in every status, newest first."""
    ensure_role(session, Action.VIEW_ALL)
    return await repository.list_by_status(db, status)
