"""
Student Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolpay.modules.students.models import PaymentStatus


class StudentCreate(BaseModel):
    """Request body for POST /students."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    department: str = Field(..., min_length=1, max_length=200)


class StudentResponse(BaseModel):
    """A student as seen by its owning school."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    department: str
    status: PaymentStatus
    payment_reference: str | None
    created_at: datetime


class MessageResponse(BaseModel):
    message: str
