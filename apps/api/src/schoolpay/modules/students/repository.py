"""
Student Repository

Tenant-scoped storage for student records. Every operation except
mark_paid_by_reference takes the owning school id and matches on both the
student id and the school id. A student that exists but belongs to another
school is reported exactly like a missing one (NotFoundError), so a tenant
cannot discover other tenants' records.

mark_paid_by_reference is the one unscoped operation: the payment webhook
only knows the reference, not the school that issued it. Both backends
resolve it through an index on the reference instead of scanning.

Backends:
- InMemoryStudentRepository: primary dict plus a reference index, both
  mutated under one asyncio.Lock. The lock is held only while touching
  the dicts, never across I/O. Callers receive copies.
- SqlStudentRepository: one transaction per operation; the unique
  payment_reference column is the index.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Protocol
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from schoolpay.core.exceptions import ConflictError, NotFoundError
from schoolpay.modules.students.models import (
    PaymentStatus,
    Student,
    StudentRecord,
    ensure_transition,
)
from schoolpay.modules.students.schemas import StudentCreate

logger = logging.getLogger(__name__)


def _reference_taken(reference: str) -> ConflictError:
    return ConflictError(f"Payment reference '{reference}' is already bound to another student")


class StudentRepository(Protocol):
    """Capability interface for student storage."""

    async def create(self, owner_id: UUID, data: StudentCreate) -> Student:
        """Store a new Pending student owned by owner_id."""
        ...

    async def list_by_owner(self, owner_id: UUID) -> list[Student]:
        """All students of one school, in no particular order."""
        ...

    async def get(self, owner_id: UUID, student_id: UUID) -> Student:
        """Raises NotFoundError unless the student exists and belongs to owner_id."""
        ...

    async def delete(self, owner_id: UUID, student_id: UUID) -> None:
        """Raises NotFoundError unless the student exists and belongs to owner_id."""
        ...

    async def set_payment_reference(self, owner_id: UUID, student_id: UUID, reference: str) -> None:
        """
        Overwrite the student's payment reference.

        Raises NotFoundError on a miss, and ConflictError if another student
        already holds the reference (neither record is changed).
        """
        ...

    async def mark_paid_by_reference(self, reference: str) -> bool:
        """
        Move the student holding reference from Pending to Paid.

        Returns True if this call changed the status, False if the student
        was already Paid. Raises NotFoundError if no student holds the reference.
        """
        ...


class InMemoryStudentRepository:
    """Process-local student storage."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._students: dict[UUID, Student] = {}
        self._ids_by_reference: dict[str, UUID] = {}

    def _owned(self, owner_id: UUID, student_id: UUID) -> Student:
        # Caller must hold self._lock
        student = self._students.get(student_id)
        if student is None or student.school_id != owner_id:
            raise NotFoundError()
        return student

    async def create(self, owner_id: UUID, data: StudentCreate) -> Student:
        student = Student(
            school_id=owner_id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=str(data.email),
            department=data.department,
        )
        async with self._lock:
            self._students[student.id] = student
            created = replace(student)

        logger.info(f"Created student: {student.id} (school {owner_id})")
        return created

    async def list_by_owner(self, owner_id: UUID) -> list[Student]:
        async with self._lock:
            return [
                replace(student)
                for student in self._students.values()
                if student.school_id == owner_id
            ]

    async def get(self, owner_id: UUID, student_id: UUID) -> Student:
        async with self._lock:
            return replace(self._owned(owner_id, student_id))

    async def delete(self, owner_id: UUID, student_id: UUID) -> None:
        async with self._lock:
            student = self._owned(owner_id, student_id)
            del self._students[student_id]
            if student.payment_reference is not None:
                self._ids_by_reference.pop(student.payment_reference, None)

        logger.info(f"Deleted student: {student_id} (school {owner_id})")

    async def set_payment_reference(self, owner_id: UUID, student_id: UUID, reference: str) -> None:
        async with self._lock:
            student = self._owned(owner_id, student_id)
            holder = self._ids_by_reference.get(reference)
            if holder is not None and holder != student_id:
                raise _reference_taken(reference)
            if student.payment_reference is not None:
                self._ids_by_reference.pop(student.payment_reference, None)
            student.payment_reference = reference
            self._ids_by_reference[reference] = student_id

    async def mark_paid_by_reference(self, reference: str) -> bool:
        async with self._lock:
            student_id = self._ids_by_reference.get(reference)
            if student_id is None:
                raise NotFoundError()
            student = self._students[student_id]
            if student.status == PaymentStatus.PAID:
                return False
            ensure_transition(student.status, PaymentStatus.PAID)
            student.status = PaymentStatus.PAID

        logger.info(f"Student {student_id} marked as paid")
        return True


class SqlStudentRepository:
    """Student storage on a SQL database."""

    def __init__(self, session_maker: async_sessionmaker) -> None:
        self._session_maker = session_maker

    @staticmethod
    def _owned_clause(owner_id: UUID, student_id: UUID):
        return (StudentRecord.id == student_id) & (StudentRecord.school_id == owner_id)

    async def create(self, owner_id: UUID, data: StudentCreate) -> Student:
        student = Student(
            school_id=owner_id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=str(data.email),
            department=data.department,
        )
        async with self._session_maker() as session, session.begin():
            session.add(
                StudentRecord(
                    id=student.id,
                    school_id=student.school_id,
                    first_name=student.first_name,
                    last_name=student.last_name,
                    email=student.email,
                    department=student.department,
                    status=student.status,
                    payment_reference=None,
                    created_at=student.created_at,
                )
            )

        logger.info(f"Created student: {student.id} (school {owner_id})")
        return student

    async def list_by_owner(self, owner_id: UUID) -> list[Student]:
        async with self._session_maker() as session:
            result = await session.execute(
                select(StudentRecord).where(StudentRecord.school_id == owner_id)
            )
            return [record.to_domain() for record in result.scalars()]

    async def get(self, owner_id: UUID, student_id: UUID) -> Student:
        async with self._session_maker() as session:
            result = await session.execute(
                select(StudentRecord).where(self._owned_clause(owner_id, student_id))
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise NotFoundError()
            return record.to_domain()

    async def delete(self, owner_id: UUID, student_id: UUID) -> None:
        async with self._session_maker() as session, session.begin():
            result = await session.execute(
                delete(StudentRecord).where(self._owned_clause(owner_id, student_id))
            )
            if result.rowcount == 0:
                raise NotFoundError()

        logger.info(f"Deleted student: {student_id} (school {owner_id})")

    async def set_payment_reference(self, owner_id: UUID, student_id: UUID, reference: str) -> None:
        try:
            async with self._session_maker() as session, session.begin():
                result = await session.execute(
                    update(StudentRecord)
                    .where(self._owned_clause(owner_id, student_id))
                    .values(payment_reference=reference)
                )
                if result.rowcount == 0:
                    raise NotFoundError()
        except IntegrityError as e:
            raise _reference_taken(reference) from e

    async def mark_paid_by_reference(self, reference: str) -> bool:
        async with self._session_maker() as session, session.begin():
            result = await session.execute(
                select(StudentRecord)
                .where(StudentRecord.payment_reference == reference)
                .with_for_update()
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise NotFoundError()
            if record.status == PaymentStatus.PAID:
                return False
            ensure_transition(record.status, PaymentStatus.PAID)
            record.status = PaymentStatus.PAID
            student_id = record.id

        logger.info(f"Student {student_id} marked as paid")
        return True
