"""
Unit tests for payment initiation.

These tests cover:
- A successful initiation binds the gateway reference to the student
- Foreign or unknown students never reach the gateway
- Gateway failures leave the student untouched
- A student deleted mid-flight still gets a checkout URL
"""

from uuid import uuid4

import httpx
import pytest

from schoolpay.core.exceptions import NotFoundError, PaymentGatewayError
from schoolpay.modules.payments.service import PaymentService
from schoolpay.modules.students.models import PaymentStatus
from schoolpay.modules.students.repository import InMemoryStudentRepository


class VanishingStudentRepository(InMemoryStudentRepository):
    """Behaves as if the student was deleted while the gateway call was in flight."""

    async def set_payment_reference(self, owner_id, student_id, reference):
        raise NotFoundError()


@pytest.fixture
def payment_service(student_repo, fake_paystack):
    return PaymentService(
        student_repo,
        fake_paystack.client(),
        amount_kobo=500000,
        reference_prefix="SCH-",
    )


class TestNewReference:
    def test_references_are_prefixed_and_unique(self, payment_service):
        references = {payment_service.new_reference() for _ in range(100)}

        assert len(references) == 100
        assert all(reference.startswith("SCH-") for reference in references)


class TestInitiate:
    """Tests for PaymentService.initiate."""

    @pytest.mark.asyncio
    async def test_binds_reference_to_student(
        self, payment_service, student_repo, fake_paystack, school_a_id, student_create
    ):
        student = await student_repo.create(school_a_id, student_create)

        initiation = await payment_service.initiate(school_a_id, student.id)

        stored = await student_repo.get(school_a_id, student.id)
        assert stored.payment_reference == initiation.reference
        assert stored.status == PaymentStatus.PENDING
        assert initiation.authorization_url.endswith(initiation.reference)
        assert fake_paystack.requests[0]["json"]["email"] == "ada.obi@example.com"
        assert fake_paystack.requests[0]["json"]["amount"] == 500000

    @pytest.mark.asyncio
    async def test_gateway_reference_is_stored(
        self, payment_service, student_repo, fake_paystack, school_a_id, student_create
    ):
        """The reference Paystack reports back is the one that gets bound."""
        fake_paystack.reply = lambda body: httpx.Response(
            200,
            json={
                "status": True,
                "data": {"authorization_url": "https://checkout.test/x", "reference": "PS-777"},
            },
        )
        student = await student_repo.create(school_a_id, student_create)

        initiation = await payment_service.initiate(school_a_id, student.id)

        assert initiation.reference == "PS-777"
        assert (await student_repo.get(school_a_id, student.id)).payment_reference == "PS-777"

    @pytest.mark.asyncio
    async def test_foreign_student_never_reaches_gateway(
        self, payment_service, student_repo, fake_paystack, school_a_id, school_b_id, student_create
    ):
        student = await student_repo.create(school_a_id, student_create)

        with pytest.raises(NotFoundError):
            await payment_service.initiate(school_b_id, student.id)
        with pytest.raises(NotFoundError):
            await payment_service.initiate(school_a_id, uuid4())

        assert fake_paystack.requests == []

    @pytest.mark.asyncio
    async def test_gateway_failure_leaves_student_untouched(
        self, payment_service, student_repo, fake_paystack, school_a_id, student_create
    ):
        fake_paystack.reply = lambda body: httpx.Response(503, text="unavailable")
        student = await student_repo.create(school_a_id, student_create)

        with pytest.raises(PaymentGatewayError):
            await payment_service.initiate(school_a_id, student.id)

        assert (await student_repo.get(school_a_id, student.id)).payment_reference is None

    @pytest.mark.asyncio
    async def test_reinitiation_replaces_reference(
        self, payment_service, student_repo, school_a_id, student_create
    ):
        student = await student_repo.create(school_a_id, student_create)

        first = await payment_service.initiate(school_a_id, student.id)
        second = await payment_service.initiate(school_a_id, student.id)

        assert first.reference != second.reference
        assert (await student_repo.get(school_a_id, student.id)).payment_reference == (
            second.reference
        )

    @pytest.mark.asyncio
    async def test_student_deleted_during_gateway_call(
        self, fake_paystack, school_a_id, student_create
    ):
        students = VanishingStudentRepository()
        student = await students.create(school_a_id, student_create)
        service = PaymentService(students, fake_paystack.client(), amount_kobo=500000)

        initiation = await service.initiate(school_a_id, student.id)

        assert initiation.authorization_url
        assert len(fake_paystack.requests) == 1
        assert (await students.get(school_a_id, student.id)).payment_reference is None

    @pytest.mark.asyncio
    async def test_gateway_reference_held_by_other_school(
        self, payment_service, student_repo, fake_paystack, school_a_id, school_b_id, student_create
    ):
        """The other school's student keeps its link; the caller still gets a checkout URL."""
        theirs = await student_repo.create(school_b_id, student_create)
        await student_repo.set_payment_reference(school_b_id, theirs.id, "PS-shared")
        fake_paystack.reply = lambda body: httpx.Response(
            200,
            json={
                "status": True,
                "data": {"authorization_url": "https://checkout.test/y", "reference": "PS-shared"},
            },
        )
        mine = await student_repo.create(school_a_id, student_create)

        initiation = await payment_service.initiate(school_a_id, mine.id)

        assert initiation.authorization_url == "https://checkout.test/y"
        assert (await student_repo.get(school_b_id, theirs.id)).payment_reference == "PS-shared"
        assert (await student_repo.get(school_a_id, mine.id)).payment_reference is None
