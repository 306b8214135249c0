"""
Authentication Gate

Turns a bearer token into the tenant identity used by every school-scoped
route. The gate knows nothing about storage: the school id comes straight
from the verified token claims, it is not looked up.

A forged signature, an expired token or missing claims all produce the
same "invalid or expired token" response.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schoolpay.core.config import Settings, get_settings
from schoolpay.core.exceptions import UnauthorizedError
from schoolpay.core.security import decode_token

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation. auto_error is off so that a
# missing header gets our own 401 body instead of FastAPI's default.
security = HTTPBearer(
    auto_error=False,
    description="Bearer token issued by /auth/login",
)

MISSING_HEADER = "missing authorization header"
INVALID_TOKEN = "invalid or expired token"
INVALID_SCHOOL_ID = "invalid school id in token"


@dataclass(frozen=True)
class AuthSchool:
    """
    The authenticated tenant for the current request.

    Attributes:
        school_id: Owning tenant for every student operation in the request
        username: School login name, for logging only
    """

    school_id: UUID
    username: str

    def __str__(self) -> str:
        return f"AuthSchool(school_id={self.school_id}, username={self.username})"


def verify_school_token(token: str, secret: str) -> AuthSchool:
    """
    Verify a bearer token and extract the school identity.

    Args:
        token: Raw token (without the "Bearer " prefix)
        secret: Shared signing secret

    Returns:
        AuthSchool built from the token claims

    Raises:
        UnauthorizedError: invalid or expired token, or a school_id claim
            that is not a UUID
    """
    payload = decode_token(token, secret)
    if payload is None:
        logger.warning("Rejected invalid or expired bearer token")
        raise UnauthorizedError(INVALID_TOKEN)

    school_id_claim = payload.get("school_id")
    username = payload.get("username")
    if not isinstance(school_id_claim, str) or not isinstance(username, str):
        logger.warning("Rejected bearer token with missing claims")
        raise UnauthorizedError(INVALID_TOKEN)

    try:
        school_id = UUID(school_id_claim)
    except ValueError as e:
        logger.warning("Rejected bearer token with malformed school_id claim")
        raise UnauthorizedError(INVALID_SCHOOL_ID) from e

    return AuthSchool(school_id=school_id, username=username)


async def get_current_school(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    app_settings: Settings = Depends(get_settings),
) -> AuthSchool:
    """
    FastAPI dependency guarding every tenant-scoped endpoint.

    The resolved identity is also stored on request.state.school for
    anything downstream that only has the request.

    Usage:
        @router.get("/students")
        async def list_students(school: AuthSchool = Depends(get_current_school)):
            ...

    Raises:
        HTTPException 401: missing/malformed header, invalid or expired
            token, or invalid school id claim
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(MISSING_HEADER).to_http()

    try:
        school = verify_school_token(credentials.credentials, app_settings.jwt_secret)
    except UnauthorizedError as e:
        raise e.to_http() from e

    request.state.school = school
    logger.debug(f"Authenticated school: {school.school_id} ({school.username})")
    return school


__all__ = [
    "AuthSchool",
    "get_current_school",
    "verify_school_token",
]
