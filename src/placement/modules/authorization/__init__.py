"""Authorization module - role and state based access decisions."""

from placement.modules.authorization.gate import (
    Action,
    Decision,
    authorize,
    check_login_eligibility,
    ensure_allowed,
    ensure_role,
)

__all__ = [
    "Action",
    "Decision",
    "authorize",
    "check_login_eligibility",
    "ensure_allowed",
    "ensure_role",
]
