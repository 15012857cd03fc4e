"""
Shared test fixtures.

Environment is configured before the application package is imported so
the cached settings pick up the test database and cheap bcrypt rounds.
"""

import os

os.environ.setdefault("PYTHON_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-bytes")

from datetime import UTC, datetime  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from placement.core.auth import CurrentAccount, Session  # noqa: E402
from placement.core.database import Base, import_models  # noqa: E402
from placement.core.rate_limit import reset_memory_store  # noqa: E402
from placement.core.security import hash_password  # noqa: E402
from placement.modules.accounts.models import (  # noqa: E402
    AccountRole,
    AccountStatus,
    Administrator,
    Applicant,
    Organization,
)
from placement.modules.postings.models import Posting, PostingStatus  # noqa: E402

TEST_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Every test starts with empty in-memory rate limit windows."""
    reset_memory_store()
    yield
    reset_memory_store()


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


# ============================================
# Sessions
# ============================================


@pytest.fixture
def admin_session():
    return Session(account_id=1, role=AccountRole.ADMINISTRATOR)


@pytest.fixture
def organization_session():
    return Session(account_id=10, role=AccountRole.ORGANIZATION)


@pytest.fixture
def other_organization_session():
    return Session(account_id=11, role=AccountRole.ORGANIZATION)


@pytest.fixture
def applicant_session():
    return Session(account_id=20, role=AccountRole.APPLICANT)


# ============================================
# Accounts
# ============================================


@pytest.fixture
def password_hash():
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def sample_applicant(password_hash):
    """An approved applicant, not attached to any session."""
    return Applicant(
        id=20,
        name="Ana Student",
        email="ana@campus.edu",
        password_hash=password_hash,
        department="Computer Science",
        batch=2025,
        cgpa=8.4,
        skills=["Python", "SQL", "Docker"],
        status=AccountStatus.APPROVED,
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def sample_organization(password_hash):
    """An approved organization, not attached to any session."""
    return Organization(
        id=10,
        name="Acme Corp",
        email="hr@acme.io",
        password_hash=password_hash,
        contact_name="Rita Recruiter",
        status=AccountStatus.APPROVED,
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def sample_administrator(password_hash):
    return Administrator(
        id=1,
        name="Admin",
        email="admin@campus.edu",
        password_hash=password_hash,
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def current_applicant(applicant_session, sample_applicant):
    return CurrentAccount(session=applicant_session, account=sample_applicant)


@pytest.fixture
def current_organization(organization_session, sample_organization):
    return CurrentAccount(session=organization_session, account=sample_organization)


# ============================================
# Postings
# ============================================


def _make_posting(
    posting_id: int = 100,
    organization_id: int = 10,
    status: PostingStatus = PostingStatus.ACTIVE,
    required_skills: list[str] | None = None,
) -> Posting:
    return Posting(
        id=posting_id,
        organization_id=organization_id,
        title="Backend Engineer",
        category="Full-time",
        description="Build APIs",
        required_skills=required_skills if required_skills is not None else ["Python", "SQL"],
        compensation="Negotiable",
        location="Remote",
        vacancies=1,
        status=status,
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def posting_factory():
    """Build transient postings: posting_factory(posting_id=.., status=.., ...)."""
    return _make_posting


@pytest.fixture
def active_posting():
    return _make_posting()


@pytest.fixture
def pending_posting():
    return _make_posting(status=PostingStatus.PENDING)


# ============================================
# In-memory database
# ============================================


@pytest_asyncio.fixture
async def engine():
    """A fresh in-memory SQLite database with the full schema."""
    import_models()
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test database. Use one session per request."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
