"""Authentication module."""

from schoolpay.modules.auth.router import router
from schoolpay.modules.auth.schemas import LoginRequest, LoginResponse

__all__ = ["router", "LoginRequest", "LoginResponse"]
