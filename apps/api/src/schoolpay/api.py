from fastapi import APIRouter

from schoolpay.modules.auth import router as auth_router
from schoolpay.modules.payments.router import router as payments_router
from schoolpay.modules.students.router import router as students_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(students_router, prefix="/students", tags=["Students"])

api_router.include_router(payments_router, prefix="/payments", tags=["Payments"])
