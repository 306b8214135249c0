"""
Seed Demo School

Registers a demo school in the SQL database so the API can be tried
without going through /auth/register. Skips if the username exists.

Usage:
    cd apps/api
    DATABASE_URL=sqlite+aiosqlite:///./schoolpay.db python scripts/seed_demo_school.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from schoolpay.core.config import settings
from schoolpay.core.database import close_db, init_db
from schoolpay.core.exceptions import ConflictError
from schoolpay.modules.schools.repository import SqlSchoolRepository
from schoolpay.modules.schools.schemas import SchoolRegisterRequest
from schoolpay.modules.schools.service import register_school


async def seed_demo_school() -> None:
    """Create the demo school if it doesn't exist."""

    data = SchoolRegisterRequest(
        name=os.getenv("DEMO_SCHOOL_NAME", "Demo Academy"),
        username=os.getenv("DEMO_SCHOOL_USERNAME", "demo-academy"),
        password=os.getenv("DEMO_SCHOOL_PASSWORD", "demo-password"),
    )

    session_maker = await init_db(settings.database_url)
    repo = SqlSchoolRepository(session_maker)

    try:
        school = await register_school(repo, data)
    except ConflictError:
        existing = await repo.get_by_username(data.username)
        print(f"Demo school already exists: {data.username}")
        if existing:
            print(f"  ID: {existing.id}")
        return
    finally:
        await close_db()

    print("Demo school created successfully!")
    print(f"  Name: {school.name}")
    print(f"  Username: {school.username}")
    print(f"  ID: {school.id}")


if __name__ == "__main__":
    asyncio.run(seed_demo_school())
