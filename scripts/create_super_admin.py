"""
Script to create the first Super Admin of the dashboard.
Run this after setting up the database and running migrations.

Usage:
    python scripts/create_super_admin.py
"""
import asyncio
import getpass
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from church_portal.core.security import get_password_hash
from church_portal.db import base  # noqa: F401  registers the models
from church_portal.db.session import AsyncSessionLocal
from church_portal.models.enums import AdminRole
from church_portal.models.user import AdminUser


async def create_super_admin():
    """Create the first Super Admin user."""
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(AdminUser).where(AdminUser.role == AdminRole.SUPER_ADMIN)
        )
        if result.scalars().first():
            print("A Super Admin already exists in the database.")
            return

        print("Creating the first Super Admin user...")
        email = input("Enter email: ").strip()
        password = getpass.getpass("Enter password: ").strip()
        full_name = input("Enter full name: ").strip()

        if not all([email, password, full_name]):
            print("Error: All fields are required.")
            return

        result = await session.execute(
            select(AdminUser).where(AdminUser.email == email)
        )
        if result.scalar_one_or_none():
            print(f"Error: User with email {email} already exists.")
            return

        session.add(AdminUser(
            email=email,
            password_hash=get_password_hash(password),
            full_name=full_name,
            role=AdminRole.SUPER_ADMIN,
            is_active=True,
        ))
        await session.commit()
        print(f"Super Admin created successfully: {email}")


if __name__ == "__main__":
    asyncio.run(create_super_admin())
