"""
Accounts Router

Endpoints:
- POST /auth/register/applicant - Applicant self-registration
- POST /auth/register/organization - Organization self-registration
- POST /auth/login - Exchange credentials for a bearer token
- GET /auth/me - Current account
- GET /profile - Current account profile
- PUT /profile - Update own profile
- PUT /profile/password - Change own password
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from placement.core.auth import CurrentAccount, get_current_account
from placement.core.config import settings
from placement.core.database import get_db
from placement.core.rate_limit import enforce_rate_limit
from placement.modules.accounts import service
from placement.modules.accounts.schemas import (
    AccountResponse,
    ApplicantRegister,
    ApplicantResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    OrganizationRegister,
    OrganizationResponse,
    PasswordChange,
    ProfileUpdate,
    to_account_response,
)
from placement.modules.shared.errors import ServiceError
from placement.modules.shared.http import to_http_exception, unexpected_error

logger = logging.getLogger(__name__)

router = APIRouter()
profile_router = APIRouter()


# ============================================
# Helper Functions
# ============================================


async def _check_login_rate_limit(request: Request, email: str) -> None:
    """Limit login attempts per client address and email."""
    client_ip = request.client.host if request.client else "unknown"
    await enforce_rate_limit(
        f"login:{client_ip}:{email.lower()}",
        settings.login_rate_limit,
        settings.login_rate_limit_window_seconds,
    )


# ============================================
# Registration & Login
# ============================================


@router.post(
    "/register/applicant",
    response_model=ApplicantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Applicant",
    responses={409: {"description": "Email already registered as an applicant"}},
)
async def register_applicant(
    data: ApplicantRegister,
    db: AsyncSession = Depends(get_db),
) -> ApplicantResponse:
    """Register a new applicant. The account must be approved before it can log in."""
    try:
        account = await service.register_applicant(db, data)
        return to_account_response(account)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "registering applicant") from e


@router.post(
    "/register/organization",
    response_model=OrganizationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Organization",
    responses={409: {"description": "Email already registered as an organization"}},
)
async def register_organization(
    data: OrganizationRegister,
    db: AsyncSession = Depends(get_db),
) -> OrganizationResponse:
    """Register a new organization. The account must be approved before it can log in."""
    try:
        account = await service.register_organization(db, data)
        return to_account_response(account)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "registering organization") from e


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Account blocked or pending approval"},
        429: {"description": "Too many login attempts"},
    },
)
async def login(
    credentials: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate and return a bearer token.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account blocked or not yet approved
    """
    await _check_login_rate_limit(request, credentials.email)

    try:
        token, account = await service.login(
            db, credentials.email, credentials.password, credentials.role
        )
        return LoginResponse(
            access_token=token,
            token_type="bearer",
            account=to_account_response(account),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "during login") from e


@router.get("/me", response_model=AccountResponse, summary="Current Account")
async def me(current: CurrentAccount = Depends(get_current_account)) -> AccountResponse:
    return to_account_response(current.account)


# ============================================
# Profile
# ============================================


@profile_router.get("", response_model=AccountResponse, summary="Get Profile")
async def get_profile(current: CurrentAccount = Depends(get_current_account)) -> AccountResponse:
    return to_account_response(current.account)


@profile_router.put("", response_model=AccountResponse, summary="Update Profile")
async def update_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> AccountResponse:
    """Update the caller's profile. Fields that do not belong to the caller's role are ignored."""
    try:
        account = await service.update_profile(db, current, data)
        return to_account_response(account)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "updating profile") from e


@profile_router.put("/password", response_model=MessageResponse, summary="Change Password")
async def change_password(
    data: PasswordChange,
    db: AsyncSession = Depends(get_db),
    current: CurrentAccount = Depends(get_current_account),
) -> MessageResponse:
    try:
        await service.change_password(db, current, data)
        return MessageResponse(message="Password updated successfully.")
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise unexpected_error(e, "changing password") from e
