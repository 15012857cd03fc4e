"""
Applications Service Layer

Business logic for applications.

Creating an application runs as one transaction: the posting is checked
to exist and be active, an existing application for the same pair is
looked for, and the row is inserted. Two concurrent requests for the
same pair can both pass the look-up; the unique constraint on
(applicant_id, posting_id) rejects the second insert and the caller
receives DUPLICATE_APPLICATION with nothing written.

Status changes are made by the organization that owns the posting or by
an administrator. Applicants may withdraw (delete) their own applications
in any status.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.auth import CurrentAccount, Session
from placement.modules.applications import repository
from placement.modules.applications.models import Application, ApplicationStatus
from placement.modules.authorization import Action, ensure_allowed, ensure_role
from placement.modules.lifecycle import next_application_status
from placement.modules.postings import repository as postings_repository
from placement.modules.shared import atomic
from placement.modules.shared.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


async def _get_application_or_404(db: AsyncSession, application_id: int) -> Application:
    application = await repository.get_by_id(db, application_id)
    if application is None:
        raise NotFoundError("application", application_id)
    return application


async def create_application(
    db: AsyncSession,
    current: CurrentAccount,
    posting_id: int,
) -> Application:
    """
    Apply the calling applicant to an active posting.

    Raises:
        ForbiddenError: Caller is not an applicant, or is not approved
        NotFoundError: Posting does not exist or is not active
        ConflictError: The applicant already applied to this posting
    """
    session = current.session
    ensure_role(session, Action.CREATE_APPLICATION)

    async with atomic(db, on_conflict=ConflictError):
        posting = await postings_repository.get_by_id(db, posting_id)
        if posting is None:
            raise NotFoundError("posting", posting_id)

        ensure_allowed(session, Action.CREATE_APPLICATION, actor=current.account, posting=posting)

        existing = await repository.get_by_applicant_and_posting(db, session.account_id, posting_id)
        if existing is not None:
            logger.warning(f"Duplicate application: applicant {session.account_id} -> {posting_id}")
            raise ConflictError()

        application = await repository.create(db, session.account_id, posting_id)

    logger.info(f"Applicant {session.account_id} applied to posting {posting_id}")
    return application


async def set_application_status(
    db: AsyncSession,
    session: Session,
    application_id: int,
    requested_status: str | ApplicationStatus,
) -> Application:
    """
    Set an application's status on behalf of its posting's organization or an administrator.

    Raises:
        ForbiddenError: Caller is an applicant
        NotFoundError: Application does not exist
        ForbiddenCrossTenantError: Organization does not own the posting
        InvalidStatusError: Unknown status value
    """
    ensure_role(session, Action.SET_APPLICATION_STATUS)
    application = await _get_application_or_404(db, application_id)
    ensure_allowed(
        session,
        Action.SET_APPLICATION_STATUS,
        posting=application.posting,
        application=application,
    )

    new_status = next_application_status(application.status, requested_status)

    async with atomic(db):
        await repository.set_status(db, application, new_status)

    logger.info(f"{session} set application {application_id} to {new_status.value}")
    return application


async def withdraw_application(db: AsyncSession, session: Session, application_id: int) -> None:
    """
    Delete one of the calling applicant's applications.

    Raises:
        ForbiddenError: Caller is not an applicant
        NotFoundError: Application does not exist
        ForbiddenCrossTenantError: Application belongs to another applicant
    """
    ensure_role(session, Action.WITHDRAW_APPLICATION)
    application = await _get_application_or_404(db, application_id)
    ensure_allowed(session, Action.WITHDRAW_APPLICATION, application=application)

    async with atomic(db):
        await repository.delete_by_id(db, application_id)

    logger.info(f"Applicant {session.account_id} withdrew application {application_id}")


async def list_my_applications(db: AsyncSession, session: Session) -> list[Application]:
    ensure_role(session, Action.LIST_OWN_APPLICATIONS)
    return await repository.list_by_applicant(db, session.account_id)


async def list_received_applications(db: AsyncSession, session: Session) -> list[Application]:
    """Applications made to any of the calling organization's postings."""
    ensure_role(session, Action.LIST_RECEIVED_APPLICATIONS)
    return await repository.list_for_organization(db, session.account_id)


async def admin_list_applications(
    db: AsyncSession,
    session: Session,
    status: ApplicationStatus | None = None,
) -> list[Application]:
    ensure_role(session, Action.VIEW_ALL)
    return await repository.list_all(db, status)
