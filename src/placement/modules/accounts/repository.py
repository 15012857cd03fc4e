"""
Account Repository

Credential store for applicants, organizations and administrators.
Each role has its own table, so every lookup is keyed by (role, ...).
Emails are stored and compared in lower case.
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from placement.modules.accounts.models import (
    ACCOUNT_MODELS,
    Account,
    AccountRole,
    AccountStatus,
)
from placement.modules.applications.models import Application
from placement.modules.postings.models import Posting

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountRepository:
    """Repository for account database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        role: AccountRole,
        *,
        email: str,
        password_hash: str,
        **fields,
    ) -> Account:
        """
        Create a new account record.

        The caller owns the transaction; the row is flushed so that the id
        is assigned and unique constraints are checked immediately.

        Args:
            db: Database session
            role: Account kind, selects the table
            email: Email address (unique within the role)
            password_hash: Already hashed password
            **fields: Profile fields of the role's model

        Returns:
            Created account instance
        """
        model = ACCOUNT_MODELS[role]
        account = model(email=normalize_email(email), password_hash=password_hash, **fields)

        db.add(account)
        await db.flush()
        await db.refresh(account)

        logger.info(f"Created {role.value} account: {account.id}")
        return account

    @staticmethod
    async def get_by_id(db: AsyncSession, role: AccountRole, account_id: int) -> Account | None:
        """
        Get an account by role and ID.

        Returns:
            Account instance or None if not found
        """
        return await db.get(ACCOUNT_MODELS[role], account_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, role: AccountRole, email: str) -> Account | None:
        """
        Get an account by email within a role's namespace.

        Args:
            db: Database session
            role: Account kind
            email: Email address (case-insensitive)

        Returns:
            Account instance or None if not found
        """
        model = ACCOUNT_MODELS[role]
        result = await db.execute(select(model).where(model.email == normalize_email(email)))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, role: AccountRole, email: str) -> bool:
        """Check if an email is already registered in the role's namespace."""
        account = await AccountRepository.get_by_email(db, role, email)
        return account is not None

    @staticmethod
    async def list_by_role(
        db: AsyncSession,
        role: AccountRole,
        status: AccountStatus | None = None,
    ) -> list[Account]:
        """List accounts of a role, newest first, optionally filtered by status."""
        model = ACCOUNT_MODELS[role]
        query = select(model).order_by(model.created_at.desc(), model.id.desc())
        if status is not None:
            query = query.where(model.status == status)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count(
        db: AsyncSession,
        role: AccountRole,
        status: AccountStatus | None = None,
    ) -> int:
        """Count accounts of a role, optionally only those in a given status."""
        model = ACCOUNT_MODELS[role]
        query = select(func.count()).select_from(model)
        if status is not None:
            query = query.where(model.status == status)

        result = await db.execute(query)
        return result.scalar_one()

    @staticmethod
    async def update_status(
        db: AsyncSession,
        account: Account,
        status: AccountStatus,
    ) -> Account:
        """
        Persist a status already resolved by the account state machine.

        Returns:
            Updated account instance
        """
        account.status = status
        await db.flush()

        logger.info(f"{account.role.value} {account.id} status set to {status.value}")
        return account

    @staticmethod
    async def update_fields(db: AsyncSession, account: Account, **fields) -> Account:
        """Set profile fields on an account. Unknown attributes are ignored."""
        for key, value in fields.items():
            if hasattr(account, key):
                setattr(account, key, value)

        await db.flush()
        return account

    @staticmethod
    async def delete(db: AsyncSession, role: AccountRole, account_id: int) -> None:
        """
        Hard delete an account and everything that depends on it.

        Applicants take their applications with them. Organizations take
        their postings and every application made to those postings.
        """
        if role == AccountRole.APPLICANT:
            await db.execute(delete(Application).where(Application.applicant_id == account_id))

        elif role == AccountRole.ORGANIZATION:
            owned_postings = select(Posting.id).where(Posting.organization_id == account_id)
            await db.execute(
                delete(Application)
                .where(Application.posting_id.in_(owned_postings))
                .execution_options(synchronize_session=False)
            )
            await db.execute(delete(Posting).where(Posting.organization_id == account_id))

        model = ACCOUNT_MODELS[role]
        await db.execute(delete(model).where(model.id == account_id))

        logger.info(f"Deleted {role.value} account {account_id} and its dependents")
