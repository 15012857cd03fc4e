"""
Transaction Coordination

Wraps multi-statement effects in one atomic unit of work. All checks and
writes inside an ``atomic`` block observe the same transaction; any failure
rolls the whole block back so no partial effect is ever committed.

Uniqueness races are closed by database constraints: a constraint violation
surfacing from the block is translated into the caller's typed conflict
error instead of leaking the driver exception.
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from placement.modules.shared.errors import ServiceError, StoreUnavailableError

logger = logging.getLogger(__name__)


async def _rollback(db: AsyncSession) -> None:
    try:
        await db.rollback()
    except (OperationalError, InterfaceError):
        logger.exception("Rollback failed; connection already unusable")


@asynccontextmanager
async def atomic(
    db: AsyncSession,
    *,
    on_conflict: Callable[[], ServiceError] | None = None,
) -> AsyncIterator[AsyncSession]:
    """
    Run the enclosed statements as a single transaction.

    Usage:
        async with atomic(db, on_conflict=ConflictError):
            ...checks and writes...

    Args:
        db: The request's database session
        on_conflict: Factory for the error raised when a unique or foreign
            key constraint rejects the write. When omitted the
            IntegrityError propagates unchanged.

    Raises:
        ServiceError: Whatever the block raises, or the on_conflict error
        StoreUnavailableError: If the database connection fails
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as e:
        await _rollback(db)
        if on_conflict is None:
            raise
        logger.warning(f"Constraint violation rolled back: {e.orig}")
        raise on_conflict() from e
    except (OperationalError, InterfaceError) as e:
        await _rollback(db)
        logger.error(f"Store unavailable: {e}")
        raise StoreUnavailableError() from e
    except Exception:
        await _rollback(db)
        raise
