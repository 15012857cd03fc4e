"""
Tests for the applications service.

These tests verify:
- Applying (approved applicant, active posting, one application per pair)
- Setting status by the owning organization or an administrator
- Withdrawal by the applicant who applied
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from placement.core.auth import Session
from placement.modules.accounts.models import AccountRole, AccountStatus
from placement.modules.applications.models import Application, ApplicationStatus
from placement.modules.applications.service import (
    admin_list_applications,
    create_application,
    list_my_applications,
    list_received_applications,
    set_application_status,
    withdraw_application,
)
from placement.modules.postings.models import PostingStatus
from placement.modules.shared.errors import (
    ConflictError,
    ForbiddenCrossTenantError,
    ForbiddenError,
    InvalidStatusError,
    NotFoundError,
)

REPOSITORY = "placement.modules.applications.service.repository"
POSTINGS_REPOSITORY = "placement.modules.applications.service.postings_repository"


@pytest.fixture
def sample_application(active_posting):
    application = Application(
        id=500,
        applicant_id=20,
        posting_id=100,
        status=ApplicationStatus.PENDING,
    )
    application.posting = active_posting
    return application


# ============================================
# Create
# ============================================


@pytest.mark.asyncio
async def test_create_application_success(
    mock_db, current_applicant, active_posting, sample_application
):
    with patch(REPOSITORY) as mock_repo, patch(POSTINGS_REPOSITORY) as mock_postings:
        mock_postings.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.get_by_applicant_and_posting = AsyncMock(return_value=None)
        mock_repo.create = AsyncMock(return_value=sample_application)

        result = await create_application(mock_db, current_applicant, 100)

        assert result.status == ApplicationStatus.PENDING
        mock_repo.create.assert_called_once_with(mock_db, 20, 100)
        mock_db.commit.assert_called_once()


@pytest.mark.asyncio
async def test_duplicate_application_is_conflict(
    mock_db, current_applicant, active_posting, sample_application
):
    with patch(REPOSITORY) as mock_repo, patch(POSTINGS_REPOSITORY) as mock_postings:
        mock_postings.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.get_by_applicant_and_posting = AsyncMock(return_value=sample_application)
        mock_repo.create = AsyncMock()

        with pytest.raises(ConflictError) as exc_info:
            await create_application(mock_db, current_applicant, 100)

        assert exc_info.value.error_code == "DUPLICATE_APPLICATION"
        mock_repo.create.assert_not_called()
        mock_db.commit.assert_not_called()
        mock_db.rollback.assert_called_once()


@pytest.mark.asyncio
async def test_concurrent_duplicate_hits_unique_constraint(
    mock_db, current_applicant, active_posting
):
    """Both requests pass the look-up; the second insert is rejected by the constraint."""
    with patch(REPOSITORY) as mock_repo, patch(POSTINGS_REPOSITORY) as mock_postings:
        mock_postings.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.get_by_applicant_and_posting = AsyncMock(return_value=None)
        mock_repo.create = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("uq_applications_applicant_posting"))
        )

        with pytest.raises(ConflictError):
            await create_application(mock_db, current_applicant, 100)

        mock_db.commit.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [PostingStatus.PENDING, PostingStatus.REJECTED])
async def test_apply_to_non_active_posting(mock_db, current_applicant, posting_factory, status):
    with patch(REPOSITORY) as mock_repo, patch(POSTINGS_REPOSITORY) as mock_postings:
        mock_postings.get_by_id = AsyncMock(return_value=posting_factory(status=status))
        mock_repo.create = AsyncMock()

        with pytest.raises(NotFoundError):
            await create_application(mock_db, current_applicant, 100)

        mock_repo.create.assert_not_called()


@pytest.mark.asyncio
async def test_apply_to_missing_posting(mock_db, current_applicant):
    with patch(REPOSITORY) as mock_repo, patch(POSTINGS_REPOSITORY) as mock_postings:
        mock_postings.get_by_id = AsyncMock(return_value=None)
        mock_repo.create = AsyncMock()

        with pytest.raises(NotFoundError) as exc_info:
            await create_application(mock_db, current_applicant, 404)

        assert exc_info.value.error_code == "POSTING_NOT_FOUND"


@pytest.mark.asyncio
async def test_pending_applicant_cannot_apply(mock_db, current_applicant, active_posting):
    current_applicant.account.status = AccountStatus.PENDING

    with patch(REPOSITORY) as mock_repo, patch(POSTINGS_REPOSITORY) as mock_postings:
        mock_postings.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.create = AsyncMock()

        with pytest.raises(ForbiddenError):
            await create_application(mock_db, current_applicant, 100)

        mock_repo.create.assert_not_called()


@pytest.mark.asyncio
async def test_organization_cannot_apply(mock_db, current_organization):
    with patch(POSTINGS_REPOSITORY) as mock_postings:
        mock_postings.get_by_id = AsyncMock()

        with pytest.raises(ForbiddenError):
            await create_application(mock_db, current_organization, 100)

        mock_postings.get_by_id.assert_not_called()


# ============================================
# Status
# ============================================


@pytest.mark.asyncio
async def test_owner_sets_status(mock_db, organization_session, sample_application):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=sample_application)
        mock_repo.set_status = AsyncMock(return_value=sample_application)

        await set_application_status(mock_db, organization_session, 500, "selected")

        mock_repo.set_status.assert_called_once_with(
            mock_db, sample_application, ApplicationStatus.SELECTED
        )


@pytest.mark.asyncio
async def test_other_organization_cannot_set_status(
    mock_db, other_organization_session, sample_application
):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=sample_application)
        mock_repo.set_status = AsyncMock()

        with pytest.raises(ForbiddenCrossTenantError):
            await set_application_status(mock_db, other_organization_session, 500, "selected")

        mock_repo.set_status.assert_not_called()
        assert sample_application.status == ApplicationStatus.PENDING


@pytest.mark.asyncio
async def test_admin_sets_any_status(mock_db, admin_session, sample_application):
    sample_application.status = ApplicationStatus.SELECTED

    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=sample_application)
        mock_repo.set_status = AsyncMock()

        await set_application_status(mock_db, admin_session, 500, ApplicationStatus.PENDING)

        assert mock_repo.set_status.call_args.args[2] == ApplicationStatus.PENDING


@pytest.mark.asyncio
async def test_unknown_status_value(mock_db, organization_session, sample_application):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=sample_application)
        mock_repo.set_status = AsyncMock()

        with pytest.raises(InvalidStatusError):
            await set_application_status(mock_db, organization_session, 500, "hired")

        mock_repo.set_status.assert_not_called()


@pytest.mark.asyncio
async def test_applicant_cannot_set_status(mock_db, applicant_session):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock()

        with pytest.raises(ForbiddenError):
            await set_application_status(mock_db, applicant_session, 500, "selected")

        mock_repo.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_set_status_missing_application(mock_db, organization_session):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError) as exc_info:
            await set_application_status(mock_db, organization_session, 404, "selected")

    assert exc_info.value.error_code == "APPLICATION_NOT_FOUND"


# ============================================
# Withdraw
# ============================================


@pytest.mark.asyncio
async def test_withdraw_own_application(mock_db, applicant_session, sample_application):
    sample_application.status = ApplicationStatus.SELECTED

    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=sample_application)
        mock_repo.delete_by_id = AsyncMock()

        await withdraw_application(mock_db, applicant_session, 500)

        mock_repo.delete_by_id.assert_called_once_with(mock_db, 500)


@pytest.mark.asyncio
async def test_withdraw_other_applicants_application(mock_db, sample_application):
    intruder = Session(account_id=21, role=AccountRole.APPLICANT)

    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=sample_application)
        mock_repo.delete_by_id = AsyncMock()

        with pytest.raises(ForbiddenCrossTenantError):
            await withdraw_application(mock_db, intruder, 500)

        mock_repo.delete_by_id.assert_not_called()


# ============================================
# Listing
# ============================================


@pytest.mark.asyncio
async def test_list_my_applications(mock_db, applicant_session, sample_application):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.list_by_applicant = AsyncMock(return_value=[sample_application])

        result = await list_my_applications(mock_db, applicant_session)

    assert result == [sample_application]
    mock_repo.list_by_applicant.assert_called_once_with(mock_db, 20)


@pytest.mark.asyncio
async def test_list_received_applications(mock_db, organization_session):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.list_for_organization = AsyncMock(return_value=[])

        await list_received_applications(mock_db, organization_session)

    mock_repo.list_for_organization.assert_called_once_with(mock_db, 10)


@pytest.mark.asyncio
async def test_admin_list_requires_admin(mock_db, organization_session):
    with pytest.raises(ForbiddenError):
        await admin_list_applications(mock_db, organization_session)
