"""
Payment Initiation Service

Opens a Paystack transaction for a student's school fee and records the
resulting reference on the student.

The student store is touched twice (read, then write the reference) and
never while the gateway call is in flight. If the student is deleted in
between, the reference write fails with NotFoundError. If the gateway hands
back a reference another student already holds, it fails with ConflictError
and the other student keeps it. Either failure is logged and the caller
still gets the checkout URL. Likewise, no rollback happens if
the request is cancelled after the gateway accepted the transaction.
"""

import logging
from dataclasses import dataclass
from uuid import UUID, uuid4

from schoolpay.core.exceptions import AppError
from schoolpay.modules.payments.gateway import PaystackClient
from schoolpay.modules.students.repository import StudentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentInitiation:
    authorization_url: str
    reference: str


class PaymentService:
    """Starts fee payments for students."""

    def __init__(
        self,
        students: StudentRepository,
        gateway: PaystackClient,
        *,
        amount_kobo: int,
        reference_prefix: str = "SCH-",
    ) -> None:
        self._students = students
        self._gateway = gateway
        self._amount_kobo = amount_kobo
        self._reference_prefix = reference_prefix

    def new_reference(self) -> str:
        """A reference that is never handed out twice (prefix + random UUID)."""
        return f"{self._reference_prefix}{uuid4().hex}"

    async def initiate(self, owner_id: UUID, student_id: UUID) -> PaymentInitiation:
        """
        Start a payment for one student.

        A repeated call for the same student replaces the stored reference;
        the earlier reference is no longer matched by the webhook.

        Args:
            owner_id: Authenticated school
            student_id: Student to charge

        Returns:
            Checkout URL and the gateway's reference

        Raises:
            NotFoundError: Unknown student, or owned by another school
            PaymentGatewayError: The gateway call failed
        """
        student = await self._students.get(owner_id, student_id)

        reference = self.new_reference()
        initialization = await self._gateway.initialize_transaction(
            email=student.email,
            amount_kobo=self._amount_kobo,
            reference=reference,
        )

        if initialization.reference != reference:
            logger.warning(
                f"Gateway returned reference {initialization.reference} for requested {reference}"
            )

        try:
            await self._students.set_payment_reference(
                owner_id, student_id, initialization.reference
            )
        except AppError as e:
            # TODO: backfill job for gateway transactions that never got linked to a student
            logger.warning(
                f"Could not record reference {initialization.reference} on student "
                f"{student_id}: {e.message}"
            )

        logger.info(f"Payment initiated for student {student_id}: {initialization.reference}")
        return PaymentInitiation(
            authorization_url=initialization.authorization_url,
            reference=initialization.reference,
        )
