"""
Authorization Gate

Decides, for a verified session and a requested action, whether the
operation may proceed. Decisions depend on the actor's role, on ownership
of the target resource and, for a few actions, on the current state of the
actor or the resource.

Role table:
- Administrator: every administrative action, plus setting any
  application's status. No ownership checks.
- Organization: postings it owns and applications made to them. Creating
  a posting additionally requires the organization to be approved.
- Applicant: applying (own account approved, posting active) and
  withdrawing its own applications.

Anything else is denied. Targeting another tenant's resource is denied
with FORBIDDEN_CROSS_TENANT.
"""

import enum
import logging
from dataclasses import dataclass

from placement.core.auth import Session
from placement.modules.accounts.models import Account, AccountRole, AccountStatus
from placement.modules.applications.models import Application
from placement.modules.postings.models import Posting, PostingStatus
from placement.modules.shared.errors import (
    AccountBlockedError,
    AccountPendingApprovalError,
    ForbiddenCrossTenantError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
)

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    """Operations subject to authorization."""

    # Organization
    CREATE_POSTING = "create_posting"
    EDIT_POSTING = "edit_posting"
    DELETE_OWN_POSTING = "delete_own_posting"
    LIST_OWN_POSTINGS = "list_own_postings"
    LIST_RECEIVED_APPLICATIONS = "list_received_applications"

    # Organization (own postings) or administrator (any)
    SET_APPLICATION_STATUS = "set_application_status"

    # Applicant
    CREATE_APPLICATION = "create_application"
    WITHDRAW_APPLICATION = "withdraw_application"
    LIST_OWN_APPLICATIONS = "list_own_applications"
    RECOMMEND_POSTINGS = "recommend_postings"

    # Administrator
    APPROVE_ACCOUNT = "approve_account"
    BLOCK_ACCOUNT = "block_account"
    DELETE_ACCOUNT = "delete_account"
    APPROVE_POSTING = "approve_posting"
    REJECT_POSTING = "reject_posting"
    DELETE_ANY_POSTING = "delete_any_posting"
    VIEW_ALL = "view_all"


ADMIN_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.APPROVE_ACCOUNT,
        Action.BLOCK_ACCOUNT,
        Action.DELETE_ACCOUNT,
        Action.APPROVE_POSTING,
        Action.REJECT_POSTING,
        Action.DELETE_ANY_POSTING,
        Action.VIEW_ALL,
        Action.SET_APPLICATION_STATUS,
    }
)

ORGANIZATION_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.CREATE_POSTING,
        Action.EDIT_POSTING,
        Action.DELETE_OWN_POSTING,
        Action.LIST_OWN_POSTINGS,
        Action.LIST_RECEIVED_APPLICATIONS,
        Action.SET_APPLICATION_STATUS,
    }
)

APPLICANT_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.CREATE_APPLICATION,
        Action.WITHDRAW_APPLICATION,
        Action.LIST_OWN_APPLICATIONS,
        Action.RECOMMEND_POSTINGS,
    }
)

ROLE_ACTIONS: dict[AccountRole, frozenset[Action]] = {
    AccountRole.ADMINISTRATOR: ADMIN_ACTIONS,
    AccountRole.ORGANIZATION: ORGANIZATION_ACTIONS,
    AccountRole.APPLICANT: APPLICANT_ACTIONS,
}


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check: Allow, or Deny carrying the typed error."""

    allowed: bool
    error: ServiceError | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, error: ServiceError) -> "Decision":
        return cls(allowed=False, error=error)

    @property
    def reason(self) -> str | None:
        return self.error.message if self.error else None


def _owner_of(posting: Posting | None) -> int | None:
    return posting.organization_id if posting is not None else None


def _authorize_organization(
    session: Session,
    action: Action,
    actor: Account | None,
    posting: Posting | None,
) -> Decision:
    if action == Action.CREATE_POSTING:
        status = getattr(actor, "status", None)
        if status == AccountStatus.BLOCKED:
            return Decision.deny(AccountBlockedError())
        if status != AccountStatus.APPROVED:
            return Decision.deny(
                ForbiddenError("Your organization must be approved before posting.")
            )
        return Decision.allow()

    if action in (Action.EDIT_POSTING, Action.DELETE_OWN_POSTING, Action.SET_APPLICATION_STATUS):
        if _owner_of(posting) != session.account_id:
            return Decision.deny(ForbiddenCrossTenantError())
        return Decision.allow()

    return Decision.allow()


def _authorize_applicant(
    session: Session,
    action: Action,
    actor: Account | None,
    posting: Posting | None,
    application: Application | None,
) -> Decision:
    if action == Action.CREATE_APPLICATION:
        status = getattr(actor, "status", None)
        if status == AccountStatus.BLOCKED:
            return Decision.deny(AccountBlockedError())
        if status != AccountStatus.APPROVED:
            return Decision.deny(
                ForbiddenError("Your account must be approved before applying.")
            )
        if posting is None or posting.status != PostingStatus.ACTIVE:
            return Decision.deny(NotFoundError("posting", posting.id if posting else None))
        return Decision.allow()

    if action == Action.WITHDRAW_APPLICATION:
        if application is None or application.applicant_id != session.account_id:
            return Decision.deny(ForbiddenCrossTenantError())
        return Decision.allow()

    return Decision.allow()


def authorize(
    session: Session,
    action: Action,
    *,
    actor: Account | None = None,
    posting: Posting | None = None,
    application: Application | None = None,
) -> Decision:
    """
    Decide whether a session may perform an action.

    Args:
        session: The verified session
        action: Requested action
        actor: The session's freshly loaded account (needed for status checks)
        posting: Target posting, or the posting an application belongs to
        application: Target application

    Returns:
        Decision.allow() or Decision.deny(error)
    """
    if action not in ROLE_ACTIONS.get(session.role, frozenset()):
        return Decision.deny(ForbiddenError())

    if session.role == AccountRole.ADMINISTRATOR:
        return Decision.allow()

    if session.role == AccountRole.ORGANIZATION:
        return _authorize_organization(session, action, actor, posting)

    return _authorize_applicant(session, action, actor, posting, application)


def ensure_role(session: Session, action: Action) -> None:
    """
    Check only that the session's role may perform the action at all.

    Services call this before loading the target, so that a wrong-role
    caller is refused with FORBIDDEN rather than learning whether the
    target exists.

    Raises:
        ForbiddenError: If the role never performs this action
    """
    if action not in ROLE_ACTIONS.get(session.role, frozenset()):
        logger.warning(f"Denied {action.value} for {session}: wrong role")
        raise ForbiddenError()


def ensure_allowed(
    session: Session,
    action: Action,
    *,
    actor: Account | None = None,
    posting: Posting | None = None,
    application: Application | None = None,
) -> None:
    """
    Authorize and raise the denial's typed error.

    Raises:
        ForbiddenError: Role or state does not permit the action
        ForbiddenCrossTenantError: Target belongs to another account
        AccountBlockedError: The actor is blocked
        NotFoundError: Applying to a posting that is not active
    """
    decision = authorize(
        session, action, actor=actor, posting=posting, application=application
    )
    if not decision.allowed:
        logger.warning(f"Denied {action.value} for {session}: {decision.reason}")
        raise decision.error


def check_login_eligibility(account: Account) -> None:
    """
    Refuse a login for accounts whose status makes them ineligible.

    Applicants and organizations must be approved. Administrators are
    always eligible.

    Raises:
        AccountBlockedError: If the account is blocked
        AccountPendingApprovalError: If the account is awaiting approval
    """
    status = getattr(account, "status", None)
    if status is None:
        return
    if status == AccountStatus.BLOCKED:
        raise AccountBlockedError()
    if status == AccountStatus.PENDING:
        raise AccountPendingApprovalError()
