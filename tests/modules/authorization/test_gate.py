"""
Unit tests for the authorization gate.
"""

import pytest

from placement.core.auth import Session
from placement.modules.accounts.models import AccountRole, AccountStatus
from placement.modules.applications.models import Application, ApplicationStatus
from placement.modules.authorization import (
    Action,
    Decision,
    authorize,
    check_login_eligibility,
    ensure_allowed,
    ensure_role,
)
from placement.modules.authorization.gate import ROLE_ACTIONS
from placement.modules.postings.models import PostingStatus
from placement.modules.shared.errors import (
    AccountBlockedError,
    AccountPendingApprovalError,
    ForbiddenCrossTenantError,
    ForbiddenError,
    NotFoundError,
)


def _application(applicant_id: int = 20, posting_id: int = 100) -> Application:
    return Application(
        id=500,
        applicant_id=applicant_id,
        posting_id=posting_id,
        status=ApplicationStatus.PENDING,
    )


# ============================================
# Role table
# ============================================


class TestRoleTable:
    """Tests for role-only decisions."""

    @pytest.mark.parametrize("action", list(Action))
    def test_every_action_belongs_to_some_role(self, action):
        assert any(action in actions for actions in ROLE_ACTIONS.values())

    @pytest.mark.parametrize(
        "action",
        [Action.APPROVE_ACCOUNT, Action.APPROVE_POSTING, Action.DELETE_ANY_POSTING, Action.VIEW_ALL],
    )
    def test_organization_cannot_perform_admin_actions(self, organization_session, action):
        decision = authorize(organization_session, action)

        assert not decision.allowed
        assert isinstance(decision.error, ForbiddenError)
        assert not isinstance(decision.error, ForbiddenCrossTenantError)

    def test_applicant_cannot_create_posting(self, applicant_session, sample_applicant):
        decision = authorize(applicant_session, Action.CREATE_POSTING, actor=sample_applicant)

        assert not decision.allowed
        assert decision.error.error_code == "FORBIDDEN"

    def test_organization_cannot_apply(self, organization_session, active_posting):
        decision = authorize(organization_session, Action.CREATE_APPLICATION, posting=active_posting)
        assert not decision.allowed

    def test_applicant_cannot_set_application_status(self, applicant_session):
        decision = authorize(
            applicant_session, Action.SET_APPLICATION_STATUS, application=_application()
        )
        assert not decision.allowed

    @pytest.mark.parametrize("action", sorted(ROLE_ACTIONS[AccountRole.ADMINISTRATOR]))
    def test_admin_allowed_every_admin_action(self, admin_session, action):
        assert authorize(admin_session, action).allowed

    def test_admin_may_set_status_on_any_posting(self, admin_session, posting_factory):
        posting = posting_factory(organization_id=999)
        decision = authorize(
            admin_session,
            Action.SET_APPLICATION_STATUS,
            posting=posting,
            application=_application(),
        )
        assert decision.allowed

    def test_admin_cannot_apply(self, admin_session, active_posting):
        assert not authorize(admin_session, Action.CREATE_APPLICATION, posting=active_posting).allowed


# ============================================
# Organization
# ============================================


class TestOrganizationDecisions:
    """Tests for organization state and ownership checks."""

    def test_approved_organization_may_create_posting(
        self, organization_session, sample_organization
    ):
        decision = authorize(
            organization_session, Action.CREATE_POSTING, actor=sample_organization
        )
        assert decision == Decision.allow()

    def test_pending_organization_may_not_create_posting(
        self, organization_session, sample_organization
    ):
        sample_organization.status = AccountStatus.PENDING

        decision = authorize(
            organization_session, Action.CREATE_POSTING, actor=sample_organization
        )

        assert not decision.allowed
        assert decision.error.error_code == "FORBIDDEN"
        assert "approved" in decision.reason

    def test_blocked_organization_may_not_create_posting(
        self, organization_session, sample_organization
    ):
        sample_organization.status = AccountStatus.BLOCKED

        decision = authorize(
            organization_session, Action.CREATE_POSTING, actor=sample_organization
        )

        assert isinstance(decision.error, AccountBlockedError)

    @pytest.mark.parametrize(
        "action",
        [Action.EDIT_POSTING, Action.DELETE_OWN_POSTING, Action.SET_APPLICATION_STATUS],
    )
    def test_owner_allowed(self, organization_session, active_posting, action):
        assert authorize(organization_session, action, posting=active_posting).allowed

    @pytest.mark.parametrize(
        "action",
        [Action.EDIT_POSTING, Action.DELETE_OWN_POSTING, Action.SET_APPLICATION_STATUS],
    )
    def test_other_tenant_denied(self, other_organization_session, active_posting, action):
        decision = authorize(other_organization_session, action, posting=active_posting)

        assert not decision.allowed
        assert decision.error.error_code == "FORBIDDEN_CROSS_TENANT"
        assert decision.error.status_code == 403


# ============================================
# Applicant
# ============================================


class TestApplicantDecisions:
    """Tests for applicant state and ownership checks."""

    def test_approved_applicant_may_apply_to_active_posting(
        self, applicant_session, sample_applicant, active_posting
    ):
        decision = authorize(
            applicant_session,
            Action.CREATE_APPLICATION,
            actor=sample_applicant,
            posting=active_posting,
        )
        assert decision.allowed

    def test_pending_applicant_may_not_apply(
        self, applicant_session, sample_applicant, active_posting
    ):
        sample_applicant.status = AccountStatus.PENDING

        decision = authorize(
            applicant_session,
            Action.CREATE_APPLICATION,
            actor=sample_applicant,
            posting=active_posting,
        )

        assert decision.error.error_code == "FORBIDDEN"

    def test_blocked_applicant_may_not_apply(
        self, applicant_session, sample_applicant, active_posting
    ):
        sample_applicant.status = AccountStatus.BLOCKED

        decision = authorize(
            applicant_session,
            Action.CREATE_APPLICATION,
            actor=sample_applicant,
            posting=active_posting,
        )

        assert isinstance(decision.error, AccountBlockedError)

    @pytest.mark.parametrize("status", [PostingStatus.PENDING, PostingStatus.REJECTED])
    def test_non_active_posting_is_not_found(
        self, applicant_session, sample_applicant, posting_factory, status
    ):
        decision = authorize(
            applicant_session,
            Action.CREATE_APPLICATION,
            actor=sample_applicant,
            posting=posting_factory(status=status),
        )

        assert isinstance(decision.error, NotFoundError)
        assert decision.error.error_code == "POSTING_NOT_FOUND"

    def test_withdraw_own_application(self, applicant_session):
        decision = authorize(
            applicant_session, Action.WITHDRAW_APPLICATION, application=_application()
        )
        assert decision.allowed

    def test_withdraw_other_applicants_application(self, applicant_session):
        decision = authorize(
            applicant_session,
            Action.WITHDRAW_APPLICATION,
            application=_application(applicant_id=21),
        )
        assert isinstance(decision.error, ForbiddenCrossTenantError)


# ============================================
# Raising helpers
# ============================================


class TestEnsureHelpers:
    def test_ensure_role_raises_forbidden_for_wrong_role(self, applicant_session):
        with pytest.raises(ForbiddenError):
            ensure_role(applicant_session, Action.VIEW_ALL)

    def test_ensure_role_ignores_ownership(self, other_organization_session):
        ensure_role(other_organization_session, Action.EDIT_POSTING)

    def test_ensure_allowed_raises_decision_error(
        self, other_organization_session, active_posting
    ):
        with pytest.raises(ForbiddenCrossTenantError):
            ensure_allowed(other_organization_session, Action.EDIT_POSTING, posting=active_posting)

    def test_ensure_allowed_passes_for_admin(self, admin_session):
        ensure_allowed(admin_session, Action.DELETE_ACCOUNT)


class TestLoginEligibility:
    def test_approved_account_is_eligible(self, sample_applicant):
        check_login_eligibility(sample_applicant)

    def test_pending_account_is_refused(self, sample_organization):
        sample_organization.status = AccountStatus.PENDING

        with pytest.raises(AccountPendingApprovalError):
            check_login_eligibility(sample_organization)

    def test_blocked_account_is_refused(self, sample_applicant):
        sample_applicant.status = AccountStatus.BLOCKED

        with pytest.raises(AccountBlockedError):
            check_login_eligibility(sample_applicant)

    def test_administrator_is_always_eligible(self, sample_administrator):
        check_login_eligibility(sample_administrator)


def test_session_is_admin_flag():
    assert Session(account_id=1, role=AccountRole.ADMINISTRATOR).is_admin
    assert not Session(account_id=1, role=AccountRole.ORGANIZATION).is_admin
