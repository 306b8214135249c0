"""
Shared fixtures for SchoolPay tests.
"""

from uuid import uuid4

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from schoolpay.core.config import Settings
from schoolpay.main import create_app
from schoolpay.modules.students.repository import InMemoryStudentRepository
from schoolpay.modules.students.schemas import StudentCreate
from tests.helpers import TEST_JWT_SECRET, TEST_PAYSTACK_SECRET, TEST_PAYSTACK_URL, FakePaystack


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-memory app with known secrets."""
    return Settings(
        python_env="test",
        jwt_secret=TEST_JWT_SECRET,
        paystack_secret_key=TEST_PAYSTACK_SECRET,
        paystack_base_url=TEST_PAYSTACK_URL,
        storage_backend="memory",
        log_level="WARNING",
    )


@pytest.fixture
def school_a_id():
    return uuid4()


@pytest.fixture
def school_b_id():
    return uuid4()


@pytest.fixture
def student_create() -> StudentCreate:
    """A valid student creation request."""
    return StudentCreate(
        first_name="Ada",
        last_name="Obi",
        email="ada.obi@example.com",
        department="Computer Science",
    )


@pytest.fixture
def student_repo() -> InMemoryStudentRepository:
    return InMemoryStudentRepository()


@pytest.fixture
def fake_paystack() -> FakePaystack:
    return FakePaystack()


@pytest_asyncio.fixture
async def api_client(test_settings, fake_paystack):
    """HTTP client bound to a fresh app (in-memory storage, fake Paystack)."""
    app = create_app(test_settings, gateway=fake_paystack.client())
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
