"""
Request Dependencies

FastAPI providers for the shared collaborators built at startup and kept on
app.state. Tests swap any of them through app.dependency_overrides.
"""

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from schoolpay.modules.payments.service import PaymentService
    from schoolpay.modules.payments.webhook import WebhookReconciler
    from schoolpay.modules.schools.repository import SchoolRepository
    from schoolpay.modules.students.repository import StudentRepository


def get_school_repository(request: Request) -> "SchoolRepository":
    return request.app.state.school_repository


def get_student_repository(request: Request) -> "StudentRepository":
    return request.app.state.student_repository


def get_payment_service(request: Request) -> "PaymentService":
    return request.app.state.payment_service


def get_webhook_reconciler(request: Request) -> "WebhookReconciler":
    return request.app.state.webhook_reconciler
