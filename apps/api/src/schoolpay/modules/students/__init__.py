"""
Students module - Tenant-scoped student records.
"""

from schoolpay.modules.students.models import PaymentStatus, Student, StudentRecord
from schoolpay.modules.students.repository import (
    InMemoryStudentRepository,
    SqlStudentRepository,
    StudentRepository,
)

__all__ = [
    "PaymentStatus",
    "Student",
    "StudentRecord",
    "StudentRepository",
    "InMemoryStudentRepository",
    "SqlStudentRepository",
]
