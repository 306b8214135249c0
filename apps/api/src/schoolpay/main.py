"""
SchoolPay API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Storage backend (in-memory by default, SQL when STORAGE_BACKEND=sql)
- Paystack client, payment service and webhook reconciler
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schoolpay.api import api_router
from schoolpay.core.config import Settings, get_settings
from schoolpay.core.database import close_db, init_db
from schoolpay.core.exceptions import AppError, UnprocessableEntityError
from schoolpay.core.logging import configure_logging
from schoolpay.modules.payments.gateway import PaystackClient
from schoolpay.modules.payments.service import PaymentService
from schoolpay.modules.payments.webhook import WebhookReconciler
from schoolpay.modules.schools.repository import InMemorySchoolRepository, SqlSchoolRepository
from schoolpay.modules.students.repository import (
    InMemoryStudentRepository,
    SqlStudentRepository,
)

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    gateway: PaystackClient | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the environment)
        gateway: Paystack client to use instead of building one from settings

    Returns:
        The configured application; collaborators are created in its lifespan
    """
    config = app_settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Builds the repositories and payment collaborators on startup and
        releases the HTTP client and database engine on shutdown.
        """
        configure_logging(config.log_level)
        logger.info(f"Starting SchoolPay API in {config.python_env} mode...")

        if config.storage_backend == "sql":
            session_maker = await init_db(config.database_url)
            school_repository = SqlSchoolRepository(session_maker)
            student_repository = SqlStudentRepository(session_maker)
            logger.info("[OK] SQL storage ready")
        else:
            school_repository = InMemorySchoolRepository()
            student_repository = InMemoryStudentRepository()
            logger.info("[OK] In-memory storage ready")

        paystack = gateway or PaystackClient(
            config.paystack_secret_key,
            base_url=config.paystack_base_url,
            timeout=config.paystack_timeout_seconds,
        )
        if not config.paystack_secret_key:
            logger.warning("PAYSTACK_SECRET_KEY not set - payment initiation will fail")

        app.state.settings = config
        app.state.school_repository = school_repository
        app.state.student_repository = student_repository
        app.state.payment_service = PaymentService(
            student_repository,
            paystack,
            amount_kobo=config.payment_amount_kobo,
            reference_prefix=config.payment_reference_prefix,
        )
        app.state.webhook_reconciler = WebhookReconciler(student_repository, config.webhook_secret)

        yield  # Application runs here

        logger.info("Shutting down SchoolPay API...")
        await paystack.aclose()
        await close_db()
        logger.info("[OK] Cleanup complete")

    app = FastAPI(
        title="SchoolPay API",
        description="Multi-tenant student records with Paystack fee payments",
        version="0.1.0",
        docs_url="/docs" if config.is_development else None,
        redoc_url="/redoc" if config.is_development else None,
        lifespan=lifespan,
    )

    app.dependency_overrides[get_settings] = lambda: config

    app.include_router(api_router, prefix="/api/v1")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Errors that escaped a router keep their kind and status."""
        logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": {"error": exc.error_code, "message": exc.message}},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Body or path validation failures are reported for the first offending field."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        # loc starts with the request part (body, path, query, header)
        location = first.get("loc", ())
        field = ".".join(str(part) for part in location[1:])
        if not field:
            field = str(location[0]) if location else "body"
        error = UnprocessableEntityError(field, first.get("msg", "invalid input"))
        logger.info(f"{error.error_code} on {request.method} {request.url.path}: {field}")
        return JSONResponse(
            status_code=error.status_code,
            content={"detail": {"error": error.error_code, "message": error.message}},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": {
                    "error": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred. Please try again later.",
                }
            },
        )

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint - API welcome message."""
        return {
            "message": "Welcome to SchoolPay API",
            "status": "running",
            "environment": config.python_env,
        }

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {"status": "healthy"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on PORT."""
    config = get_settings()
    uvicorn.run("schoolpay.main:app", host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    run()
