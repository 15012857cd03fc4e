"""
Applications Repository

Database operations for applications. Functions never commit; callers
wrap them in ``atomic``.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from placement.modules.applications.models import Application, ApplicationStatus
from placement.modules.postings.models import Posting


async def create(db: AsyncSession, applicant_id: int, posting_id: int) -> Application:
    """
    Insert a new PENDING application.

    The flush surfaces a unique-constraint violation immediately if another
    request inserted the same (applicant, posting) pair first.
    """
    application = Application(
        applicant_id=applicant_id,
        posting_id=posting_id,
        status=ApplicationStatus.PENDING,
    )

    db.add(application)
    await db.flush()
    await db.refresh(application)

    return application


async def get_by_id(db: AsyncSession, id: int) -> Application | None:
    """Get application by ID."""
    return await db.get(Application, id)


async def get_by_applicant_and_posting(
    db: AsyncSession,
    applicant_id: int,
    posting_id: int,
) -> Application | None:
    result = await db.execute(
        select(Application).where(
            Application.applicant_id == applicant_id,
            Application.posting_id == posting_id,
        )
    )
    return result.scalar_one_or_none()


async def list_by_applicant(db: AsyncSession, applicant_id: int) -> list[Application]:
    """An applicant's applications, most recent first."""
    result = await db.execute(
        select(Application)
        .where(Application.applicant_id == applicant_id)
        .order_by(Application.applied_at.desc(), Application.id.desc())
    )
    return list(result.scalars().all())


async def list_for_organization(db: AsyncSession, organization_id: int) -> list[Application]:
    """Applications made to any posting of an organization, most recent first."""
    result = await db.execute(
        select(Application)
        .join(Posting, Application.posting_id == Posting.id)
        .where(Posting.organization_id == organization_id)
        .order_by(Application.applied_at.desc(), Application.id.desc())
    )
    return list(result.scalars().all())


async def list_all(
    db: AsyncSession,
    status: ApplicationStatus | None = None,
) -> list[Application]:
    query = select(Application).order_by(Application.applied_at.desc(), Application.id.desc())
    if status is not None:
        query = query.where(Application.status == status)

    result = await db.execute(query)
    return list(result.scalars().all())


async def set_status(
    db: AsyncSession,
    application: Application,
    status: ApplicationStatus,
) -> Application:
    """Persist a status already resolved by the application state machine."""
    application.status = status
    await db.flush()
    return application


async def delete_by_id(db: AsyncSession, id: int) -> None:
    await db.execute(delete(Application).where(Application.id == id))


async def count(db: AsyncSession, status: ApplicationStatus | None = None) -> int:
    """Count applications, optionally only those in a given status."""
    query = select(func.count()).select_from(Application)
    if status is not None:
        query = query.where(Application.status == status)

    result = await db.execute(query)
    return result.scalar_one()
