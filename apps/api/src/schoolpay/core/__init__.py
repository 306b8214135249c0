"""
Core module - Configuration, security, authentication, errors and database.
"""

from schoolpay.core.config import Settings, get_settings, settings
from schoolpay.core.exceptions import (
    AppError,
    BadRequestError,
    ConflictError,
    InternalServerError,
    NotFoundError,
    PaymentGatewayError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from schoolpay.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "Settings",
    "settings",
    "get_settings",
    # Errors
    "AppError",
    "BadRequestError",
    "ConflictError",
    "InternalServerError",
    "NotFoundError",
    "PaymentGatewayError",
    "UnauthorizedError",
    "UnprocessableEntityError",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
