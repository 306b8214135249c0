"""
School Repository

Storage for school tenants. Two interchangeable backends implement the
SchoolRepository protocol:

- InMemorySchoolRepository: a dict guarded by an asyncio.Lock (default)
- SqlSchoolRepository: SQLAlchemy async session per operation

Username uniqueness is checked and enforced inside the same critical
section as the insert, so two concurrent registrations for one username
cannot both succeed.
"""

import asyncio
import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from schoolpay.core.exceptions import ConflictError
from schoolpay.modules.schools.models import School, SchoolRecord

logger = logging.getLogger(__name__)


def _duplicate_username(username: str) -> ConflictError:
    return ConflictError(f"Username '{username}' is already taken")


class SchoolRepository(Protocol):
    """Capability interface for school storage."""

    async def create(self, *, name: str, username: str, password_hash: str) -> School:
        """Store a new school. Raises ConflictError for a taken username."""
        ...

    async def get_by_id(self, school_id: UUID) -> School | None: ...

    async def get_by_username(self, username: str) -> School | None: ...


class InMemorySchoolRepository:
    """Process-local school storage."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._schools: dict[UUID, School] = {}
        self._ids_by_username: dict[str, UUID] = {}

    async def create(self, *, name: str, username: str, password_hash: str) -> School:
        async with self._lock:
            if username in self._ids_by_username:
                raise _duplicate_username(username)
            school = School(name=name, username=username, password_hash=password_hash)
            self._schools[school.id] = school
            self._ids_by_username[username] = school.id

        logger.info(f"Created school: {school.id} - {school.name}")
        return school

    async def get_by_id(self, school_id: UUID) -> School | None:
        async with self._lock:
            return self._schools.get(school_id)

    async def get_by_username(self, username: str) -> School | None:
        async with self._lock:
            school_id = self._ids_by_username.get(username)
            return self._schools.get(school_id) if school_id else None


class SqlSchoolRepository:
    """School storage on a SQL database; uniqueness comes from the UNIQUE constraint."""

    def __init__(self, session_maker: async_sessionmaker) -> None:
        self._session_maker = session_maker

    async def create(self, *, name: str, username: str, password_hash: str) -> School:
        school = School(name=name, username=username, password_hash=password_hash)
        try:
            async with self._session_maker() as session, session.begin():
                session.add(
                    SchoolRecord(
                        id=school.id,
                        name=school.name,
                        username=school.username,
                        password_hash=school.password_hash,
                        created_at=school.created_at,
                    )
                )
        except IntegrityError as e:
            raise _duplicate_username(username) from e

        logger.info(f"Created school: {school.id} - {school.name}")
        return school

    async def get_by_id(self, school_id: UUID) -> School | None:
        async with self._session_maker() as session:
            record = await session.get(SchoolRecord, school_id)
            return record.to_domain() if record else None

    async def get_by_username(self, username: str) -> School | None:
        async with self._session_maker() as session:
            result = await session.execute(
                select(SchoolRecord).where(SchoolRecord.username == username)
            )
            record = result.scalar_one_or_none()
            return record.to_domain() if record else None
