"""Authentication schemas."""

from pydantic import BaseModel

from schoolpay.modules.schools.schemas import SchoolResponse


class LoginRequest(BaseModel):
    """Login request schema."""

    username: str
    password: str


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    token_type: str = "bearer"
    school: SchoolResponse
