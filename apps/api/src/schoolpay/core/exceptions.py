"""
Application Errors

Every failure a store, service or gate can report is one of these kinds.
Routers translate them to HTTP responses without changing the kind.
"""

from fastapi import HTTPException


class AppError(Exception):
    """Base exception for SchoolPay errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)

    def to_http(self) -> HTTPException:
        """Build the HTTPException routers raise for this error."""
        headers = {"WWW-Authenticate": "Bearer"} if self.status_code == 401 else None
        return HTTPException(
            status_code=self.status_code,
            detail={
                "error": self.error_code,
                "message": self.message,
            },
            headers=headers,
        )


class NotFoundError(AppError):
    """Entity is absent, or belongs to another tenant."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message=message, error_code="NOT_FOUND", status_code=404)


class ConflictError(AppError):
    """Raised on a uniqueness violation, such as a duplicate username."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="CONFLICT", status_code=409)


class UnauthorizedError(AppError):
    """Authentication, signature or credential failure."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="UNAUTHORIZED", status_code=401)


class BadRequestError(AppError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="BAD_REQUEST", status_code=400)


class UnprocessableEntityError(AppError):
    """Input cannot be processed: {field} - {message}."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(
            message=f"Invalid input, cannot be processed: {field} - {message}",
            error_code="UNPROCESSABLE_ENTITY",
            status_code=422,
        )


class InternalServerError(AppError):
    def __init__(self, message: str, error_code: str = "INTERNAL_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=500)


class PaymentGatewayError(InternalServerError):
    """The payment gateway failed, rejected the request, or answered garbage."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="PAYMENT_GATEWAY_ERROR")


__all__ = [
    "AppError",
    "NotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "BadRequestError",
    "UnprocessableEntityError",
    "InternalServerError",
    "PaymentGatewayError",
]
