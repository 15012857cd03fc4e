"""
Lifecycle State Machines

Transition tables for account approval, posting review and application
progression. Services never assign a status field directly; they ask the
machine for the next state, which raises if the transition is not allowed.

Account (applicant and organization):
    approve: pending | approved | blocked -> approved   (unblock reuses approve)
    block:   pending | approved | blocked -> blocked

Posting:
    approve: pending -> active
    reject:  pending -> rejected
    edit:    pending | active | rejected -> pending     (owner edit forces re-review)
    Re-applying a decision to a posting already in that state is a no-op.
    There is no direct active <-> rejected transition.

Application:
    Any status may follow any status. Only the value set is validated.
"""

import enum

from placement.modules.accounts.models import AccountStatus
from placement.modules.applications.models import ApplicationStatus
from placement.modules.postings.models import PostingStatus
from placement.modules.shared.errors import InvalidStatusError, InvalidStatusTransitionError


class AccountEvent(str, enum.Enum):
    APPROVE = "approve"
    BLOCK = "block"


class PostingEvent(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"
    EDIT = "edit"


ACCOUNT_TRANSITIONS: dict[AccountEvent, dict[AccountStatus, AccountStatus]] = {
    AccountEvent.APPROVE: {
        AccountStatus.PENDING: AccountStatus.APPROVED,
        AccountStatus.APPROVED: AccountStatus.APPROVED,
        AccountStatus.BLOCKED: AccountStatus.APPROVED,
    },
    AccountEvent.BLOCK: {
        AccountStatus.PENDING: AccountStatus.BLOCKED,
        AccountStatus.APPROVED: AccountStatus.BLOCKED,
        AccountStatus.BLOCKED: AccountStatus.BLOCKED,
    },
}

POSTING_TRANSITIONS: dict[PostingEvent, dict[PostingStatus, PostingStatus]] = {
    PostingEvent.APPROVE: {
        PostingStatus.PENDING: PostingStatus.ACTIVE,
        PostingStatus.ACTIVE: PostingStatus.ACTIVE,
    },
    PostingEvent.REJECT: {
        PostingStatus.PENDING: PostingStatus.REJECTED,
        PostingStatus.REJECTED: PostingStatus.REJECTED,
    },
    PostingEvent.EDIT: {
        PostingStatus.PENDING: PostingStatus.PENDING,
        PostingStatus.ACTIVE: PostingStatus.PENDING,
        PostingStatus.REJECTED: PostingStatus.PENDING,
    },
}

# Unordered workflow: every status is reachable from every status
APPLICATION_TRANSITIONS: dict[ApplicationStatus, set[ApplicationStatus]] = {
    status: set(ApplicationStatus) for status in ApplicationStatus
}


def next_account_status(current: AccountStatus, event: AccountEvent) -> AccountStatus:
    """
    Resolve the account status after an administrator action.

    Raises:
        InvalidStatusTransitionError: If the event is not defined for the current status
    """
    target = ACCOUNT_TRANSITIONS[event].get(current)
    if target is None:
        raise InvalidStatusTransitionError("account", current.value, event.value)
    return target


def next_posting_status(current: PostingStatus, event: PostingEvent) -> PostingStatus:
    """
    Resolve the posting status after an approve, reject or edit.

    Raises:
        InvalidStatusTransitionError: e.g. rejecting an already active posting
    """
    target = POSTING_TRANSITIONS[event].get(current)
    if target is None:
        raise InvalidStatusTransitionError("posting", current.value, event.value)
    return target


def parse_application_status(value: str | ApplicationStatus) -> ApplicationStatus:
    """
    Convert a requested status value into an ApplicationStatus.

    Raises:
        InvalidStatusError: If the value is not one of the four statuses
    """
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(value)
    except ValueError as e:
        raise InvalidStatusError(str(value), [s.value for s in ApplicationStatus]) from e


def next_application_status(
    current: ApplicationStatus,
    requested: str | ApplicationStatus,
) -> ApplicationStatus:
    """
    Resolve the application status requested by an organization or administrator.

    Raises:
        InvalidStatusError: If the requested value is unknown
        InvalidStatusTransitionError: If the transition table forbids it
    """
    target = parse_application_status(requested)
    if target not in APPLICATION_TRANSITIONS.get(current, set()):
        raise InvalidStatusTransitionError("application", current.value, f"set {target.value} on")
    return target
