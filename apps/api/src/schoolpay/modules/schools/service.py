"""
School Service Layer

Registration and credential checks for school tenants.

Security considerations:
- Passwords are bcrypt-hashed before they reach the repository
- Unknown usernames and wrong passwords fail with the same message, and both
  pay for one bcrypt check
- bcrypt runs in a worker thread, off the event loop
- Failed logins change no state, so they can be repeated freely
- Neither passwords nor hashes are logged
"""

import asyncio
import logging
from functools import lru_cache

from schoolpay.core.exceptions import NotFoundError, UnauthorizedError
from schoolpay.core.security import hash_password, verify_password
from schoolpay.modules.schools.models import School
from schoolpay.modules.schools.repository import SchoolRepository
from schoolpay.modules.schools.schemas import SchoolRegisterRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid username or password"


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    """A real bcrypt hash to check against when the username is unknown."""
    return hash_password("schoolpay-unknown-user")


def _verify_against_dummy(password: str) -> bool:
    return verify_password(password, _dummy_password_hash())


async def register_school(repo: SchoolRepository, data: SchoolRegisterRequest) -> School:
    """
    Register a new school.

    Args:
        repo: School repository
        data: Name, username and plaintext password

    Returns:
        The created School

    Raises:
        ConflictError: If the username is already taken
    """
    school = await repo.create(
        name=data.name,
        username=data.username,
        password_hash=await asyncio.to_thread(hash_password, data.password),
    )
    logger.info(f"Registered school: {school.id} ({school.username})")
    return school


async def find_by_username(repo: SchoolRepository, username: str) -> School:
    """
    Look up a school by username.

    Only used by the login flow; no route exposes it.

    Raises:
        NotFoundError: If no school has this username
    """
    school = await repo.get_by_username(username)
    if school is None:
        raise NotFoundError()
    return school


async def verify_credentials(repo: SchoolRepository, username: str, password: str) -> School:
    """
    Check a username/password pair.

    Args:
        repo: School repository
        username: Login name
        password: Plaintext password

    Returns:
        The matching School

    Raises:
        UnauthorizedError: If the username is unknown or the password is wrong
    """
    try:
        school = await find_by_username(repo, username)
    except NotFoundError as e:
        await asyncio.to_thread(_verify_against_dummy, password)
        logger.warning(f"Login attempt for unknown username: {username}")
        raise UnauthorizedError(INVALID_CREDENTIALS) from e

    if not await asyncio.to_thread(verify_password, password, school.password_hash):
        logger.warning(f"Invalid password for school: {username}")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    return school
