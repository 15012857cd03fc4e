"""
Seed Administrator

Creates the initial administrator account. Administrators cannot register
through the API, so run this once per deployment.

Credentials come from the environment:
    SEED_ADMIN_EMAIL, SEED_ADMIN_PASSWORD, SEED_ADMIN_NAME (optional)

Usage:
    SEED_ADMIN_EMAIL=admin@example.com SEED_ADMIN_PASSWORD=... \
        python scripts/seed_admin.py
"""

import asyncio
import os
import sys

from placement.core.database import async_session_maker, close_db, import_models
from placement.core.security import hash_password
from placement.modules.accounts.models import AccountRole
from placement.modules.accounts.repository import AccountRepository, normalize_email
from placement.modules.shared import atomic


async def seed_admin() -> int:
    """Create the administrator if it doesn't exist. Returns an exit code."""
    email = os.environ.get("SEED_ADMIN_EMAIL", "").strip()
    password = os.environ.get("SEED_ADMIN_PASSWORD", "")
    name = os.environ.get("SEED_ADMIN_NAME", "Administrator")

    if not email or not password:
        print("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set.")
        return 1

    import_models()

    async with async_session_maker() as db:
        existing = await AccountRepository.get_by_email(db, AccountRole.ADMINISTRATOR, email)
        if existing:
            print(f"Administrator already exists: {existing.email}")
            print(f"  ID: {existing.id}")
            return 0

        async with atomic(db):
            admin = await AccountRepository.create(
                db,
                AccountRole.ADMINISTRATOR,
                email=normalize_email(email),
                password_hash=hash_password(password),
                name=name,
            )

        print("Administrator created successfully!")
        print(f"  Email: {admin.email}")
        print(f"  Name: {admin.name}")
        print(f"  ID: {admin.id}")

    await close_db()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(seed_admin()))
