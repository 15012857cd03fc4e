"""
Postings Repository

Database operations for job postings. Functions never commit; the service
wraps them in ``atomic`` so every write is part of one transaction.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from placement.modules.applications.models import Application
from placement.modules.postings.models import Posting, PostingStatus


async def create(db: AsyncSession, organization_id: int, **fields) -> Posting:
    """Create a new posting in PENDING status."""
    posting = Posting(
        organization_id=organization_id,
        status=PostingStatus.PENDING,
        **fields,
    )

    db.add(posting)
    await db.flush()
    await db.refresh(posting)

    return posting


async def get_by_id(db: AsyncSession, id: int) -> Posting | None:
    """Get posting by ID."""
    return await db.get(Posting, id)


async def list_by_status(
    db: AsyncSession,
    status: PostingStatus | None = None,
) -> list[Posting]:
    """List postings newest first, optionally filtered by status."""
    query = select(Posting).order_by(Posting.created_at.desc(), Posting.id.desc())
    if status is not None:
        query = query.where(Posting.status == status)

    result = await db.execute(query)
    return list(result.scalars().all())


async def list_by_organization_with_counts(
    db: AsyncSession,
    organization_id: int,
) -> list[tuple[Posting, int]]:
    """
    List an organization's postings, newest first, with their application counts.

    Returns:
        List of (posting, application_count) tuples
    """
    application_count = (
        select(func.count(Application.id))
        .where(Application.posting_id == Posting.id)
        .correlate(Posting)
        .scalar_subquery()
    )

    result = await db.execute(
        select(Posting, application_count)
        .where(Posting.organization_id == organization_id)
        .order_by(Posting.created_at.desc(), Posting.id.desc())
    )
    return [(row[0], row[1]) for row in result.all()]


async def update_fields(db: AsyncSession, posting: Posting, **fields) -> Posting:
    """Set content fields on a posting. Status is set separately."""
    for key, value in fields.items():
        if hasattr(posting, key):
            setattr(posting, key, value)

    await db.flush()
    return posting


async def set_status(db: AsyncSession, posting: Posting, status: PostingStatus) -> Posting:
    """Persist a status already resolved by the posting state machine."""
    posting.status = status
    await db.flush()
    return posting


async def delete_with_applications(db: AsyncSession, posting_id: int) -> None:
    """Hard delete a posting and every application made to it."""
    await db.execute(delete(Application).where(Application.posting_id == posting_id))
    await db.execute(delete(Posting).where(Posting.id == posting_id))


async def count(db: AsyncSession, status: PostingStatus | None = None) -> int:
    """Count postings, optionally only those in a given status."""
    query = select(func.count()).select_from(Posting)
    if status is not None:
        query = query.where(Posting.status == status)

    result = await db.execute(query)
    return result.scalar_one()
