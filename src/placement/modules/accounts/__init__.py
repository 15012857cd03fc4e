"""
Accounts Module

Applicants, organizations and administrators: registration, login,
profiles and administrator approval/block/delete.

Routers are imported from placement.modules.accounts.router directly;
the session dependencies in placement.core.auth depend on this package.
"""

from placement.modules.accounts.models import (
    Account,
    AccountRole,
    AccountStatus,
    Administrator,
    Applicant,
    Organization,
)

__all__ = [
    "Account",
    "AccountRole",
    "AccountStatus",
    "Administrator",
    "Applicant",
    "Organization",
]
