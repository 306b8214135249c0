"""
Schools module - School tenant management.
"""

from schoolpay.modules.schools.models import School, SchoolRecord
from schoolpay.modules.schools.repository import (
    InMemorySchoolRepository,
    SchoolRepository,
    SqlSchoolRepository,
)

__all__ = [
    "School",
    "SchoolRecord",
    "SchoolRepository",
    "InMemorySchoolRepository",
    "SqlSchoolRepository",
]
