"""
Security Utilities

Password hashing (bcrypt) and bearer token signing/decoding (python-jose, HS256).

Tokens carry three claims:
    school_id: the tenant's UUID as a string
    username:  the school's login name
    exp:       expiry timestamp (required on decode)
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from schoolpay.core.config import settings

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with bcrypt and a fresh salt.

    Args:
        password: Plaintext password

    Returns:
        The bcrypt hash as a string
    """
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    Any failure while verifying (malformed hash, wrong encoding, bcrypt
    refusing the input) counts as a mismatch rather than an error.

    Args:
        password: Plaintext password supplied by the caller
        password_hash: Stored bcrypt hash

    Returns:
        True only if the password matches the hash
    """
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError, UnicodeError) as e:
        logger.warning(f"Password verification failed on malformed hash: {type(e).__name__}")
        return False


def create_access_token(
    school_id: UUID,
    username: str,
    secret: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign an access token for a school.

    Args:
        school_id: Tenant identifier embedded as the school_id claim
        username: School username embedded as the username claim
        secret: Signing secret (defaults to JWT_SECRET)
        expires_delta: Token lifetime (defaults to ACCESS_TOKEN_EXPIRE_HOURS)

    Returns:
        Encoded JWT string
    """
    lifetime = expires_delta or timedelta(hours=settings.access_token_expire_hours)
    claims = {
        "school_id": str(school_id),
        "username": username,
        "exp": datetime.now(UTC) + lifetime,
    }
    return jwt.encode(claims, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, secret: str | None = None) -> dict[str, Any] | None:
    """
    Verify a token's signature and expiry and return its claims.

    Args:
        token: Encoded JWT
        secret: Verification secret (defaults to JWT_SECRET)

    Returns:
        The claims dict, or None when the token is forged, expired,
        lacks an exp claim, or cannot be decoded at all.
    """
    try:
        return jwt.decode(
            token,
            secret or settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True},
        )
    except JWTError:
        return None
