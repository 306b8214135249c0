"""
School Models

A school is a tenant: every student belongs to exactly one school, and the
school id is the unit of data isolation.

School is the record the repositories hand out. SchoolRecord is its table
for the SQL backend.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from schoolpay.core.database import Base


@dataclass(frozen=True)
class School:
    """
    School tenant.

    password_hash is a bcrypt hash; it never appears in API responses
    and is left out of repr.
    """

    name: str
    username: str
    password_hash: str = field(repr=False)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class SchoolRecord(Base):
    """Table row for School (SQL backend)."""

    __tablename__ = "schools"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # Usernames are unique across all tenants
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> School:
        return School(
            id=self.id,
            name=self.name,
            username=self.username,
            password_hash=self.password_hash,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<SchoolRecord(id={self.id}, username={self.username})>"
