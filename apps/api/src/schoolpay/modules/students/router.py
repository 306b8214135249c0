"""
Students Router

Tenant-scoped student endpoints. Every route requires a bearer token; the
school id from the token is the owner for every read and write.

Endpoints:
- POST /students - Create a student (status Pending, no payment reference)
- GET /students - List the school's students
- GET /students/{student_id} - Get one student
- DELETE /students/{student_id} - Delete one student

Students of other schools are reported as 404, never 403.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from schoolpay.core.auth import AuthSchool, get_current_school
from schoolpay.core.exceptions import NotFoundError
from schoolpay.dependencies import get_student_repository
from schoolpay.modules.students.repository import StudentRepository
from schoolpay.modules.students.schemas import MessageResponse, StudentCreate, StudentResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Student",
)
async def create_student(
    data: StudentCreate,
    school: AuthSchool = Depends(get_current_school),
    repo: StudentRepository = Depends(get_student_repository),
) -> StudentResponse:
    """
    Create a student owned by the authenticated school.

    The student starts in the Pending status with no payment reference.
    """
    student = await repo.create(school.school_id, data)
    return StudentResponse.model_validate(student)


@router.get(
    "",
    response_model=list[StudentResponse],
    summary="List Students",
)
async def list_students(
    school: AuthSchool = Depends(get_current_school),
    repo: StudentRepository = Depends(get_student_repository),
) -> list[StudentResponse]:
    """List every student of the authenticated school, in no particular order."""
    students = await repo.list_by_owner(school.school_id)
    return [StudentResponse.model_validate(student) for student in students]


@router.get(
    "/{student_id}",
    response_model=StudentResponse,
    summary="Get Student",
    responses={404: {"description": "Student not found (or owned by another school)"}},
)
async def get_student(
    student_id: UUID,
    school: AuthSchool = Depends(get_current_school),
    repo: StudentRepository = Depends(get_student_repository),
) -> StudentResponse:
    """
    Get one student.

    Raises:
        HTTPException 404: Unknown id, or a student of another school
    """
    try:
        student = await repo.get(school.school_id, student_id)
    except NotFoundError as e:
        raise e.to_http() from e
    return StudentResponse.model_validate(student)


@router.delete(
    "/{student_id}",
    response_model=MessageResponse,
    summary="Delete Student",
    responses={404: {"description": "Student not found (or owned by another school)"}},
)
async def delete_student(
    student_id: UUID,
    school: AuthSchool = Depends(get_current_school),
    repo: StudentRepository = Depends(get_student_repository),
) -> MessageResponse:
    """
    Delete one student. Hard delete, nothing is kept.

    Raises:
        HTTPException 404: Unknown id, or a student of another school
    """
    try:
        await repo.delete(school.school_id, student_id)
    except NotFoundError as e:
        raise e.to_http() from e
    return MessageResponse(message="Student deleted")
