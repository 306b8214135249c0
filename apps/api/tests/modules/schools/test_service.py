"""
Unit tests for the school service layer.

These tests cover:
- Registration hashes the password
- Duplicate registration leaves the first school's credentials intact
- Credential checks for wrong passwords and unknown usernames
- bcrypt work runs in a worker thread
"""

import asyncio
from unittest.mock import patch

import pytest

from schoolpay.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from schoolpay.core.security import hash_password, verify_password
from schoolpay.modules.schools.repository import InMemorySchoolRepository
from schoolpay.modules.schools.schemas import SchoolRegisterRequest
from schoolpay.modules.schools.service import (
    INVALID_CREDENTIALS,
    find_by_username,
    register_school,
    verify_credentials,
)


@pytest.fixture
def school_repo():
    return InMemorySchoolRepository()


@pytest.fixture
def registration():
    return SchoolRegisterRequest(
        name="Greenfield Academy", username="greenfield", password="s3cret-pass"
    )


class TestRegisterSchool:
    """Tests for register_school."""

    @pytest.mark.asyncio
    async def test_password_is_hashed(self, school_repo, registration):
        school = await register_school(school_repo, registration)

        assert school.username == "greenfield"
        assert school.password_hash != "s3cret-pass"

    @pytest.mark.asyncio
    async def test_duplicate_keeps_first_credentials(self, school_repo, registration):
        first = await register_school(school_repo, registration)
        duplicate = SchoolRegisterRequest(
            name="Impostor", username="greenfield", password="other-pass"
        )

        with pytest.raises(ConflictError):
            await register_school(school_repo, duplicate)

        school = await verify_credentials(school_repo, "greenfield", "s3cret-pass")
        assert school.id == first.id
        with pytest.raises(UnauthorizedError):
            await verify_credentials(school_repo, "greenfield", "other-pass")


class TestVerifyCredentials:
    """Tests for verify_credentials and find_by_username."""

    @pytest.mark.asyncio
    async def test_valid_credentials(self, school_repo, registration):
        registered = await register_school(school_repo, registration)

        school = await verify_credentials(school_repo, "greenfield", "s3cret-pass")

        assert school.id == registered.id

    @pytest.mark.asyncio
    async def test_wrong_password_is_repeatable(self, school_repo, registration):
        await register_school(school_repo, registration)

        for _ in range(3):
            with pytest.raises(UnauthorizedError) as exc_info:
                await verify_credentials(school_repo, "greenfield", "wrong-pass")
            assert exc_info.value.message == INVALID_CREDENTIALS

        # Failed attempts did not lock anything
        await verify_credentials(school_repo, "greenfield", "s3cret-pass")

    @pytest.mark.asyncio
    async def test_unknown_username_same_message(self, school_repo):
        with pytest.raises(UnauthorizedError) as exc_info:
            await verify_credentials(school_repo, "nobody", "whatever-pass")

        assert exc_info.value.message == INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_unknown_username_still_checks_a_hash(self, school_repo):
        """An unknown username costs one bcrypt check, like a wrong password."""
        with patch(
            "schoolpay.modules.schools.service.verify_password", wraps=verify_password
        ) as mock_verify:
            with pytest.raises(UnauthorizedError):
                await verify_credentials(school_repo, "nobody", "whatever-pass")

        mock_verify.assert_called_once()
        password, password_hash = mock_verify.call_args.args
        assert password == "whatever-pass"
        assert password_hash.startswith("$2")

    @pytest.mark.asyncio
    async def test_find_by_username_not_found(self, school_repo):
        with pytest.raises(NotFoundError):
            await find_by_username(school_repo, "nobody")


class TestRegisterRequestValidation:
    """Tests for SchoolRegisterRequest."""

    def test_password_over_72_bytes_rejected(self):
        with pytest.raises(ValueError):
            SchoolRegisterRequest(name="Greenfield", username="greenfield", password="é" * 40)


class TestHashingOffTheEventLoop:
    """bcrypt work goes through asyncio.to_thread."""

    @pytest.mark.asyncio
    async def test_register_hashes_in_thread(self, school_repo, registration):
        with patch(
            "schoolpay.modules.schools.service.asyncio.to_thread", wraps=asyncio.to_thread
        ) as mock_to_thread:
            await register_school(school_repo, registration)

        assert mock_to_thread.call_args_list[0].args[0] is hash_password

    @pytest.mark.asyncio
    async def test_login_verifies_in_thread(self, school_repo, registration):
        await register_school(school_repo, registration)

        with patch(
            "schoolpay.modules.schools.service.asyncio.to_thread", wraps=asyncio.to_thread
        ) as mock_to_thread:
            await verify_credentials(school_repo, "greenfield", "s3cret-pass")

        assert mock_to_thread.call_args_list[0].args[0] is verify_password
