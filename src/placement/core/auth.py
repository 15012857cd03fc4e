"""
Authentication Dependencies

Resolves the bearer token on each request into a verified session and
re-loads the account behind it, so that role and status are always read
from the store rather than trusted from the token.

Flow:
1. HTTPBearer extracts the token
2. decode_token verifies signature and expiry
3. The account is loaded by (role, id); a missing account invalidates the token
4. A blocked account is refused on every authenticated request
"""

import logging
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.database import get_db
from placement.core.security import ACCESS_TOKEN_TYPE, decode_token
from placement.modules.accounts.models import Account, AccountRole, AccountStatus
from placement.modules.accounts.repository import AccountRepository
from placement.modules.shared.errors import (
    AccountBlockedError,
    InvalidTokenError,
    ServiceError,
)
from placement.modules.shared.http import to_http_exception

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


@dataclass(frozen=True)
class Session:
    """
    A verified (account id, role) pair derived from a bearer token.

    Attributes:
        account_id: Id of the account within its role's table
        role: The account kind
    """

    account_id: int
    role: AccountRole

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMINISTRATOR

    def __str__(self) -> str:
        return f"Session(account_id={self.account_id}, role={self.role.value})"


@dataclass
class CurrentAccount:
    """An authenticated session together with the freshly loaded account."""

    session: Session
    account: Account


def verify_session_token(token: str) -> Session:
    """
    Verify a bearer token and extract the session it binds.

    Raises:
        InvalidTokenError: If the signature is invalid, the token is malformed
            or expired, or its claims are not a valid (id, role) pair
    """
    payload = decode_token(token)
    if payload is None:
        raise InvalidTokenError()

    if payload.get("type", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError("This endpoint requires an access token.")

    try:
        account_id = int(payload["sub"])
        role = AccountRole(payload["role"])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise InvalidTokenError("Token contains invalid or missing claims.") from e

    return Session(account_id=account_id, role=role)


def _raise_http(e: ServiceError) -> None:
    raise to_http_exception(e) from e


async def load_current_account(db: AsyncSession, session: Session) -> Account:
    """
    Re-load the account behind a session.

    Raises:
        InvalidTokenError: If the account no longer exists
        AccountBlockedError: If the account is blocked
    """
    account = await AccountRepository.get_by_id(db, session.role, session.account_id)
    if account is None:
        logger.warning(f"Token refers to missing account: {session}")
        raise InvalidTokenError("Token is not valid.")

    if getattr(account, "status", None) == AccountStatus.BLOCKED:
        logger.warning(f"Blocked account attempted access: {session}")
        raise AccountBlockedError()

    return account


async def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Session:
    """
    FastAPI dependency returning the verified session (no store access).

    Raises:
        HTTPException 401: If the token is missing, invalid or expired
    """
    if credentials is None:
        _raise_http(InvalidTokenError("No token, authorization denied."))

    try:
        return verify_session_token(credentials.credentials)
    except InvalidTokenError as e:
        _raise_http(e)


async def get_current_account(
    session: Session = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
) -> CurrentAccount:
    """
    FastAPI dependency returning the session and its current account state.

    Usage:
        @router.post("/postings")
        async def create(current: CurrentAccount = Depends(get_current_account)):
            ...

    Raises:
        HTTPException 401: If the account behind the token no longer exists
        HTTPException 403: If the account is blocked
    """
    try:
        account = await load_current_account(db, session)
    except ServiceError as e:
        _raise_http(e)

    logger.debug(f"Authenticated {session}")
    return CurrentAccount(session=session, account=account)


async def get_optional_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Session | None:
    """
    Optional authentication dependency for public endpoints.

    Returns the session if a valid token is provided, or None otherwise.
    """
    if not credentials:
        return None

    try:
        return verify_session_token(credentials.credentials)
    except InvalidTokenError:
        return None


__all__ = [
    "CurrentAccount",
    "Session",
    "get_current_account",
    "get_current_session",
    "get_optional_session",
    "load_current_account",
    "verify_session_token",
]
