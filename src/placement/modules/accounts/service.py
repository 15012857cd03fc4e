"""
Accounts Service Layer

Registration, login, profile management and administrator account actions.

Registration:
- Emails are normalized to lower case and must be unique within the role
- Passwords are hashed before the row is written
- New applicants and organizations start in PENDING

Login:
- Credentials are checked against the requested role's namespace only
- Eligibility (pending / blocked) is checked after a successful match,
  before any token is issued

Administrator actions go through the authorization gate and the account
state machine; deletes cascade to postings and applications.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.auth import CurrentAccount, Session
from placement.core.security import create_access_token, hash_password, verify_password
from placement.modules.accounts.models import Account, AccountRole, AccountStatus
from placement.modules.accounts.repository import AccountRepository, normalize_email
from placement.modules.accounts.schemas import (
    PROFILE_FIELDS,
    ApplicantRegister,
    OrganizationRegister,
    PasswordChange,
    ProfileUpdate,
)
from placement.modules.authorization import Action, check_login_eligibility, ensure_allowed
from placement.modules.lifecycle import AccountEvent, next_account_status
from placement.modules.shared import atomic
from placement.modules.shared.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Roles whose accounts carry an approval status and can be managed by an admin
MANAGED_ROLES = (AccountRole.APPLICANT, AccountRole.ORGANIZATION)


def mask_email(email: str) -> str:
    """Mask an email for logging: j***@example.com"""
    local, _, domain = email.partition("@")
    if not domain:
        return "***"
    return f"{local[:1]}***@{domain}"


# ============================================
# Registration
# ============================================


async def _register(
    db: AsyncSession,
    role: AccountRole,
    *,
    email: str,
    password: str,
    **fields,
) -> Account:
    email = normalize_email(email)

    if await AccountRepository.email_exists(db, role, email):
        logger.warning(f"Duplicate {role.value} registration: {mask_email(email)}")
        raise DuplicateIdentityError(email)

    password_hash = hash_password(password)

    # A concurrent registration that slips past the pre-check hits the unique index
    async with atomic(db, on_conflict=lambda: DuplicateIdentityError(email)):
        account = await AccountRepository.create(
            db,
            role,
            email=email,
            password_hash=password_hash,
            status=AccountStatus.PENDING,
            **fields,
        )

    logger.info(f"Registered {role.value} {account.id}, awaiting approval")
    return account


async def register_applicant(db: AsyncSession, data: ApplicantRegister) -> Account:
    """
    Register a new applicant in PENDING status.

    Raises:
        DuplicateIdentityError: If the email is already registered as an applicant
    """
    fields = data.model_dump(exclude={"email", "password"})
    return await _register(
        db, AccountRole.APPLICANT, email=data.email, password=data.password, **fields
    )


async def register_organization(db: AsyncSession, data: OrganizationRegister) -> Account:
    """
    Register a new organization in PENDING status.

    Raises:
        DuplicateIdentityError: If the email is already registered as an organization
    """
    fields = data.model_dump(exclude={"email", "password"})
    return await _register(
        db, AccountRole.ORGANIZATION, email=data.email, password=data.password, **fields
    )


# ============================================
# Login
# ============================================


async def login(
    db: AsyncSession,
    email: str,
    password: str,
    role: AccountRole,
) -> tuple[str, Account]:
    """
    Authenticate an account and issue a session token.

    Args:
        db: Database session
        email: Email address
        password: Plaintext password
        role: Namespace to look the email up in

    Returns:
        Tuple of (access token, account)

    Raises:
        InvalidCredentialsError: Unknown email for the role, or wrong password
        AccountPendingApprovalError: Account not yet approved
        AccountBlockedError: Account is blocked
    """
    account = await AccountRepository.get_by_email(db, role, email)

    if account is None:
        logger.warning(f"Login attempt for unknown {role.value}: {mask_email(email)}")
        raise InvalidCredentialsError()

    if not verify_password(password, account.password_hash):
        logger.warning(f"Invalid password for {role.value} {account.id}")
        raise InvalidCredentialsError()

    check_login_eligibility(account)

    token = create_access_token(subject=str(account.id), role=role.value)

    logger.info(f"{role.value} {account.id} logged in")
    return token, account


# ============================================
# Profile
# ============================================


async def update_profile(
    db: AsyncSession,
    current: CurrentAccount,
    data: ProfileUpdate,
) -> Account:
    """
    Update the caller's own profile.

    Only fields that were sent and that belong to the caller's role are
    applied. Email, password and status cannot be changed here.

    Raises:
        ValidationError: If no editable field was provided
    """
    allowed = PROFILE_FIELDS[current.session.role]
    changes = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if key in allowed
    }
    if not changes:
        raise ValidationError("No editable profile fields were provided.")

    async with atomic(db):
        account = await AccountRepository.update_fields(db, current.account, **changes)

    logger.info(f"Profile updated for {current.session}: {sorted(changes)}")
    return account


async def change_password(
    db: AsyncSession,
    current: CurrentAccount,
    data: PasswordChange,
) -> None:
    """
    Change the caller's password after verifying the current one.

    Raises:
        ValidationError: If the current password is incorrect
    """
    if not verify_password(data.current_password, current.account.password_hash):
        logger.warning(f"Password change with wrong current password for {current.session}")
        raise ValidationError("Current password is incorrect.")

    password_hash = hash_password(data.new_password)

    async with atomic(db):
        await AccountRepository.update_fields(db, current.account, password_hash=password_hash)

    logger.info(f"Password changed for {current.session}")


# ============================================
# Administrator Actions
# ============================================


def _require_managed_role(role: AccountRole) -> None:
    if role not in MANAGED_ROLES:
        raise ValidationError("Administrator accounts cannot be managed through this endpoint.")


async def _get_managed_account(db: AsyncSession, role: AccountRole, account_id: int) -> Account:
    _require_managed_role(role)
    account = await AccountRepository.get_by_id(db, role, account_id)
    if account is None:
        raise NotFoundError(role.value, account_id)
    return account


async def _apply_account_event(
    db: AsyncSession,
    session: Session,
    role: AccountRole,
    account_id: int,
    event: AccountEvent,
) -> Account:
    action = Action.APPROVE_ACCOUNT if event == AccountEvent.APPROVE else Action.BLOCK_ACCOUNT
    ensure_allowed(session, action)

    account = await _get_managed_account(db, role, account_id)
    new_status = next_account_status(account.status, event)

    async with atomic(db):
        await AccountRepository.update_status(db, account, new_status)

    logger.info(f"Admin {session.account_id} applied {event.value} to {role.value} {account_id}")
    return account


async def admin_approve_account(
    db: AsyncSession,
    session: Session,
    role: AccountRole,
    account_id: int,
) -> Account:
    """
    Approve (or unblock) an applicant or organization.

    Raises:
        ForbiddenError: If the caller is not an administrator
        NotFoundError: If the account does not exist
    """
    return await _apply_account_event(db, session, role, account_id, AccountEvent.APPROVE)


async def admin_block_account(
    db: AsyncSession,
    session: Session,
    role: AccountRole,
    account_id: int,
) -> Account:
    """
    Block an applicant or organization. Takes effect on its next request.

    Raises:
        ForbiddenError: If the caller is not an administrator
        NotFoundError: If the account does not exist
    """
    return await _apply_account_event(db, session, role, account_id, AccountEvent.BLOCK)


async def admin_delete_account(
    db: AsyncSession,
    session: Session,
    role: AccountRole,
    account_id: int,
) -> None:
    """
    Hard delete an applicant or organization with all dependent rows.

    Raises:
        ForbiddenError: If the caller is not an administrator
        NotFoundError: If the account does not exist
    """
    ensure_allowed(session, Action.DELETE_ACCOUNT)
    await _get_managed_account(db, role, account_id)

    async with atomic(db):
        await AccountRepository.delete(db, role, account_id)

    logger.info(f"Admin {session.account_id} deleted {role.value} {account_id}")


async def admin_list_accounts(
    db: AsyncSession,
    session: Session,
    role: AccountRole,
    status: AccountStatus | None = None,
) -> list[Account]:
    """
    List applicants or organizations, newest first.

    Raises:
        ForbiddenError: If the caller is not an administrator
    """
    ensure_allowed(session, Action.VIEW_ALL)
    _require_managed_role(role)
    return await AccountRepository.list_by_role(db, role, status)
