"""
Student Models

Student records are owned by exactly one school. The owner is fixed at
creation. Payment status only ever moves forward: Pending -> Paid.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from schoolpay.core.database import Base


class PaymentStatus(str, Enum):
    """Fee payment status of a student."""

    PENDING = "Pending"
    PAID = "Paid"


# Paid is terminal: nothing moves a student back to Pending
VALID_STATUS_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    PaymentStatus.PENDING: {PaymentStatus.PAID},
    PaymentStatus.PAID: set(),
}


class InvalidStatusTransitionError(ValueError):
    """Raised when a status change is not in VALID_STATUS_TRANSITIONS."""

    def __init__(self, current_status: PaymentStatus, new_status: PaymentStatus):
        self.current_status = current_status
        self.new_status = new_status
        super().__init__(
            f"Invalid status transition: {current_status.value} -> {new_status.value}"
        )


def ensure_transition(current_status: PaymentStatus, new_status: PaymentStatus) -> None:
    """Raise InvalidStatusTransitionError unless current -> new is allowed."""
    if new_status not in VALID_STATUS_TRANSITIONS.get(current_status, set()):
        raise InvalidStatusTransitionError(current_status, new_status)


@dataclass
class Student:
    """A student record as handed out by the repositories."""

    school_id: UUID
    first_name: str
    last_name: str
    email: str
    department: str
    status: PaymentStatus = PaymentStatus.PENDING
    payment_reference: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class StudentRecord(Base):
    """Table row for Student (SQL backend)."""

    __tablename__ = "students"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    school_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("schools.id"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(
            PaymentStatus,
            name="payment_status",
            native_enum=False,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    # At most one student holds a given reference
    payment_reference: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> Student:
        return Student(
            id=self.id,
            school_id=self.school_id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            department=self.department,
            status=self.status,
            payment_reference=self.payment_reference,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return f"<StudentRecord(id={self.id}, school_id={self.school_id}, status={self.status.value})>"
