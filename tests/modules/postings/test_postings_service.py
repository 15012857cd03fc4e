"""
Tests for the postings service.

These tests verify:
- Creating postings (organization must be approved)
- Owner edits sending postings back to review
- Visibility of non-active postings
- Administrator approve / reject decisions
- Skill matching and recommendations
"""

from unittest.mock import AsyncMock, patch

import pytest

from placement.modules.accounts.models import AccountStatus
from placement.modules.postings.models import PostingStatus
from placement.modules.postings.schemas import PostingCreate, PostingUpdate
from placement.modules.postings.service import (
    admin_approve_posting,
    admin_delete_posting,
    admin_reject_posting,
    create_posting,
    delete_own_posting,
    edit_posting,
    get_posting,
    list_organization_postings,
    match_skills,
    recommended_postings,
)
from placement.modules.shared.errors import (
    ForbiddenCrossTenantError,
    ForbiddenError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)

REPOSITORY = "placement.modules.postings.service.repository"


@pytest.fixture
def posting_create():
    return PostingCreate(
        title="Backend Engineer",
        category="Full-time",
        description="Build APIs",
        required_skills=["Python", "python", "SQL"],
    )


# ============================================
# Create
# ============================================


@pytest.mark.asyncio
async def test_create_posting_success(mock_db, current_organization, posting_create, pending_posting):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.create = AsyncMock(return_value=pending_posting)

        result = await create_posting(mock_db, current_organization, posting_create)

        assert result.status == PostingStatus.PENDING
        args, kwargs = mock_repo.create.call_args
        assert args == (mock_db, 10)
        assert kwargs["required_skills"] == ["Python", "SQL"]
        assert kwargs["compensation"] == "Negotiable"
        assert kwargs["location"] == "Remote"
        assert kwargs["vacancies"] == 1
        mock_db.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unapproved_organization_cannot_create(
    mock_db, current_organization, posting_create
):
    current_organization.account.status = AccountStatus.PENDING

    with patch(REPOSITORY) as mock_repo:
        mock_repo.create = AsyncMock()

        with pytest.raises(ForbiddenError) as exc_info:
            await create_posting(mock_db, current_organization, posting_create)

        assert exc_info.value.error_code == "FORBIDDEN"
        mock_repo.create.assert_not_called()


@pytest.mark.asyncio
async def test_applicant_cannot_create_posting(mock_db, current_applicant, posting_create):
    with pytest.raises(ForbiddenError):
        await create_posting(mock_db, current_applicant, posting_create)


# ============================================
# Edit / Delete
# ============================================


@pytest.mark.asyncio
async def test_edit_active_posting_returns_to_pending(
    mock_db, organization_session, active_posting
):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.update_fields = AsyncMock(return_value=active_posting)
        mock_repo.set_status = AsyncMock(return_value=active_posting)

        await edit_posting(mock_db, organization_session, 100, PostingUpdate(vacancies=3))

        mock_repo.update_fields.assert_called_once_with(mock_db, active_posting, vacancies=3)
        mock_repo.set_status.assert_called_once_with(
            mock_db, active_posting, PostingStatus.PENDING
        )


@pytest.mark.asyncio
async def test_edit_other_organizations_posting(
    mock_db, other_organization_session, active_posting
):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.update_fields = AsyncMock()
        mock_repo.set_status = AsyncMock()

        with pytest.raises(ForbiddenCrossTenantError):
            await edit_posting(
                mock_db, other_organization_session, 100, PostingUpdate(title="Mine now")
            )

        mock_repo.update_fields.assert_not_called()
        mock_repo.set_status.assert_not_called()
        mock_db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_edit_with_no_fields(mock_db, organization_session):
    with pytest.raises(ValidationError):
        await edit_posting(mock_db, organization_session, 100, PostingUpdate())


@pytest.mark.asyncio
async def test_edit_missing_posting(mock_db, organization_session):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await edit_posting(mock_db, organization_session, 404, PostingUpdate(title="x"))


@pytest.mark.asyncio
async def test_applicant_edit_is_forbidden_before_lookup(mock_db, applicant_session):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock()

        with pytest.raises(ForbiddenError):
            await edit_posting(mock_db, applicant_session, 100, PostingUpdate(title="x"))

        mock_repo.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_delete_own_posting(mock_db, organization_session, active_posting):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.delete_with_applications = AsyncMock()

        await delete_own_posting(mock_db, organization_session, 100)

        mock_repo.delete_with_applications.assert_called_once_with(mock_db, 100)


@pytest.mark.asyncio
async def test_delete_other_organizations_posting(
    mock_db, other_organization_session, active_posting
):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.delete_with_applications = AsyncMock()

        with pytest.raises(ForbiddenCrossTenantError):
            await delete_own_posting(mock_db, other_organization_session, 100)

        mock_repo.delete_with_applications.assert_not_called()


@pytest.mark.asyncio
async def test_list_organization_postings_requires_organization(mock_db, applicant_session):
    with pytest.raises(ForbiddenError):
        await list_organization_postings(mock_db, applicant_session)


# ============================================
# Visibility
# ============================================


@pytest.mark.asyncio
async def test_get_active_posting_is_public(mock_db, active_posting):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=active_posting)

        assert await get_posting(mock_db, 100) is active_posting


@pytest.mark.asyncio
async def test_get_pending_posting_hidden_from_public(mock_db, pending_posting, applicant_session):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=pending_posting)

        with pytest.raises(NotFoundError):
            await get_posting(mock_db, 100)
        with pytest.raises(NotFoundError):
            await get_posting(mock_db, 100, applicant_session)


@pytest.mark.asyncio
async def test_get_pending_posting_visible_to_owner_and_admin(
    mock_db, pending_posting, organization_session, other_organization_session, admin_session
):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=pending_posting)

        assert await get_posting(mock_db, 100, organization_session) is pending_posting
        assert await get_posting(mock_db, 100, admin_session) is pending_posting
        with pytest.raises(NotFoundError):
            await get_posting(mock_db, 100, other_organization_session)


# ============================================
# Administrator decisions
# ============================================


@pytest.mark.asyncio
async def test_admin_approve_pending_posting(mock_db, admin_session, pending_posting):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=pending_posting)
        mock_repo.set_status = AsyncMock()

        await admin_approve_posting(mock_db, admin_session, 100)

        mock_repo.set_status.assert_called_once_with(mock_db, pending_posting, PostingStatus.ACTIVE)


@pytest.mark.asyncio
async def test_admin_approve_active_posting_is_idempotent(mock_db, admin_session, active_posting):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.set_status = AsyncMock()

        result = await admin_approve_posting(mock_db, admin_session, 100)

        assert result.status == PostingStatus.ACTIVE
        mock_repo.set_status.assert_not_called()
        mock_db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_admin_reject_active_posting_is_refused(mock_db, admin_session, active_posting):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=active_posting)
        mock_repo.set_status = AsyncMock()

        with pytest.raises(InvalidStatusTransitionError):
            await admin_reject_posting(mock_db, admin_session, 100)

        mock_repo.set_status.assert_not_called()


@pytest.mark.asyncio
async def test_organization_cannot_approve_own_posting(
    mock_db, organization_session, pending_posting
):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=pending_posting)

        with pytest.raises(ForbiddenError):
            await admin_approve_posting(mock_db, organization_session, 100)


@pytest.mark.asyncio
async def test_admin_delete_missing_posting(mock_db, admin_session):
    with patch(REPOSITORY) as mock_repo:
        mock_repo.get_by_id = AsyncMock(return_value=None)
        mock_repo.delete_with_applications = AsyncMock()

        with pytest.raises(NotFoundError):
            await admin_delete_posting(mock_db, admin_session, 404)

        mock_repo.delete_with_applications.assert_not_called()


# ============================================
# Recommendations
# ============================================


class TestMatchSkills:
    def test_full_match(self):
        assert match_skills(["Python", "SQL"], ["python", "sql"]) == (2, 100.0)

    def test_substring_match_either_direction(self):
        skill_match, percentage = match_skills(["Python"], ["Python 3", "Docker"])

        assert skill_match == 1
        assert percentage == 50.0

    def test_no_required_skills(self):
        assert match_skills(["Python"], []) == (0, 0.0)

    def test_no_applicant_skills(self):
        assert match_skills([], ["Python"]) == (0, 0.0)

    def test_percentage_is_rounded(self):
        _, percentage = match_skills(["Go"], ["go", "rust", "zig"])
        assert percentage == 33.33


@pytest.mark.asyncio
async def test_recommended_postings_ranked_by_match(mock_db, current_applicant, posting_factory):
    weak = posting_factory(posting_id=1, required_skills=["Java", "Kotlin"])
    strong = posting_factory(posting_id=2, required_skills=["Python", "SQL"])
    partial = posting_factory(posting_id=3, required_skills=["Python", "Go"])

    with patch(REPOSITORY) as mock_repo:
        mock_repo.list_by_status = AsyncMock(return_value=[weak, strong, partial])

        ranked = await recommended_postings(mock_db, current_applicant, limit=2)

        mock_repo.list_by_status.assert_called_once_with(mock_db, PostingStatus.ACTIVE)

    assert [posting.id for posting, _, _ in ranked] == [2, 3]
    assert ranked[0][2] == 100.0
    assert ranked[1][2] == 50.0


@pytest.mark.asyncio
async def test_recommendations_are_for_applicants_only(mock_db, current_organization):
    with pytest.raises(ForbiddenError):
        await recommended_postings(mock_db, current_organization)
