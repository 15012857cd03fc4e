"""initial schema

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration creates the placement portal schema:
1. The account_status, posting_status and application_status enum types
2. One table per account kind (applicants, organizations, administrators),
   each with its own unique email index
3. The postings table, owned by an organization
4. The applications table with one row per (applicant, posting) pair

Foreign keys cascade on delete so postings and applications never outlive
the accounts they belong to.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a1c3e5f7b9d2"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


account_status_enum = postgresql.ENUM(
    "pending",
    "approved",
    "blocked",
    name="account_status",
    create_type=False,
)
posting_status_enum = postgresql.ENUM(
    "pending",
    "active",
    "rejected",
    name="posting_status",
    create_type=False,
)
application_status_enum = postgresql.ENUM(
    "pending",
    "shortlisted",
    "rejected",
    "selected",
    name="application_status",
    create_type=False,
)


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create enum types, account tables, postings and applications."""
    bind = op.get_bind()
    account_status_enum.create(bind, checkfirst=True)
    posting_status_enum.create(bind, checkfirst=True)
    application_status_enum.create(bind, checkfirst=True)

    # Applicants
    op.create_table(
        "applicants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_timestamp_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("batch", sa.Integer(), nullable=False),
        sa.Column("cgpa", sa.Float(), nullable=True),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("resume_url", sa.String(length=500), nullable=True),
        sa.Column("status", account_status_enum, nullable=False, server_default="pending"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_applicants_email"), "applicants", ["email"], unique=True)
    op.create_index(op.f("ix_applicants_status"), "applicants", ["status"], unique=False)

    # Organizations
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_timestamp_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("industry", sa.String(length=100), nullable=True),
        sa.Column("contact_name", sa.String(length=100), nullable=False),
        sa.Column("contact_phone", sa.String(length=20), nullable=True),
        sa.Column("status", account_status_enum, nullable=False, server_default="pending"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_organizations_email"), "organizations", ["email"], unique=True)
    op.create_index(op.f("ix_organizations_status"), "organizations", ["status"], unique=False)

    # Administrators
    op.create_table(
        "administrators",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_timestamp_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_administrators_email"), "administrators", ["email"], unique=True)

    # Postings
    op.create_table(
        "postings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_timestamp_columns(),
        sa.Column("organization_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("required_skills", sa.JSON(), nullable=False),
        sa.Column(
            "compensation", sa.String(length=100), nullable=False, server_default="Negotiable"
        ),
        sa.Column("location", sa.String(length=100), nullable=False, server_default="Remote"),
        sa.Column("vacancies", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", posting_status_enum, nullable=False, server_default="pending"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["organization_id"],
            ["organizations.id"],
            name="fk_postings_organization_id",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("vacancies > 0", name="ck_postings_vacancies_positive"),
    )
    op.create_index(
        op.f("ix_postings_organization_id"), "postings", ["organization_id"], unique=False
    )
    op.create_index("ix_postings_status", "postings", ["status"], unique=False)

    # Applications
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_timestamp_columns(),
        sa.Column("applicant_id", sa.Integer(), nullable=False),
        sa.Column("posting_id", sa.Integer(), nullable=False),
        sa.Column(
            "status", application_status_enum, nullable=False, server_default="pending"
        ),
        sa.Column(
            "applied_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["applicant_id"],
            ["applicants.id"],
            name="fk_applications_applicant_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["posting_id"],
            ["postings.id"],
            name="fk_applications_posting_id",
            ondelete="CASCADE",
        ),
        # Enforces a single application per applicant and posting under concurrency
        sa.UniqueConstraint(
            "applicant_id", "posting_id", name="uq_applications_applicant_posting"
        ),
    )
    op.create_index("ix_applications_posting_id", "applications", ["posting_id"], unique=False)


def downgrade() -> None:
    """Drop all tables and enum types in reverse dependency order."""
    op.drop_index("ix_applications_posting_id", table_name="applications")
    op.drop_table("applications")

    op.drop_index("ix_postings_status", table_name="postings")
    op.drop_index(op.f("ix_postings_organization_id"), table_name="postings")
    op.drop_table("postings")

    op.drop_index(op.f("ix_administrators_email"), table_name="administrators")
    op.drop_table("administrators")

    op.drop_index(op.f("ix_organizations_status"), table_name="organizations")
    op.drop_index(op.f("ix_organizations_email"), table_name="organizations")
    op.drop_table("organizations")

    op.drop_index(op.f("ix_applicants_status"), table_name="applicants")
    op.drop_index(op.f("ix_applicants_email"), table_name="applicants")
    op.drop_table("applicants")

    bind = op.get_bind()
    application_status_enum.drop(bind, checkfirst=True)
    posting_status_enum.drop(bind, checkfirst=True)
    account_status_enum.drop(bind, checkfirst=True)
