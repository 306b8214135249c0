"""Authentication router: school registration and login."""

import logging

from fastapi import APIRouter, Depends, status

from schoolpay.core.config import Settings, get_settings
from schoolpay.core.exceptions import ConflictError, UnauthorizedError
from schoolpay.core.security import create_access_token
from schoolpay.dependencies import get_school_repository
from schoolpay.modules.auth.schemas import LoginRequest, LoginResponse
from schoolpay.modules.schools import service as school_service
from schoolpay.modules.schools.repository import SchoolRepository
from schoolpay.modules.schools.schemas import SchoolRegisterRequest, SchoolResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=SchoolResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Username already taken"}},
)
async def register(
    data: SchoolRegisterRequest,
    repo: SchoolRepository = Depends(get_school_repository),
) -> SchoolResponse:
    """
    Register a new school.

    Args:
        data: School name, username and password
        repo: School repository

    Returns:
        The school, without its password hash

    Raises:
        HTTPException 409: Username already taken
    """
    try:
        school = await school_service.register_school(repo, data)
    except ConflictError as e:
        logger.warning(f"Registration rejected: {e.message}")
        raise e.to_http() from e

    return SchoolResponse.model_validate(school)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    repo: SchoolRepository = Depends(get_school_repository),
    app_settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """
    Authenticate a school and return a bearer token.

    Args:
        credentials: Username and password
        repo: School repository
        app_settings: Settings (token secret)

    Returns:
        Access token and the school's public profile

    Raises:
        HTTPException 401: Invalid credentials
    """
    try:
        school = await school_service.verify_credentials(
            repo, credentials.username, credentials.password
        )
    except UnauthorizedError as e:
        raise e.to_http() from e

    access_token = create_access_token(
        school_id=school.id,
        username=school.username,
        secret=app_settings.jwt_secret,
    )

    logger.info(f"School logged in: {school.username}")

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        school=SchoolResponse.model_validate(school),
    )
