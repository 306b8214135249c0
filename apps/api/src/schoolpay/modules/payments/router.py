"""
Payments Router

Endpoints:
- POST /payments/students/{student_id}/initiate - Open a Paystack checkout (bearer token)
- POST /payments/webhook - Paystack event receiver (HMAC signature, no bearer token)

The webhook reads the raw request body itself: the signature covers the
exact bytes Paystack sent, so the body must not be parsed first.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from schoolpay.core.auth import AuthSchool, get_current_school
from schoolpay.core.exceptions import AppError
from schoolpay.dependencies import get_payment_service, get_webhook_reconciler
from schoolpay.modules.payments.schemas import PaymentInitiationResponse, WebhookAck
from schoolpay.modules.payments.service import PaymentService
from schoolpay.modules.payments.webhook import SIGNATURE_HEADER, WebhookReconciler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/students/{student_id}/initiate",
    response_model=PaymentInitiationResponse,
    summary="Initiate Fee Payment",
    responses={
        404: {"description": "Student not found (or owned by another school)"},
        500: {"description": "Payment gateway failure"},
    },
)
async def initiate_payment(
    student_id: UUID,
    school: AuthSchool = Depends(get_current_school),
    payments: PaymentService = Depends(get_payment_service),
) -> PaymentInitiationResponse:
    """
    Open a Paystack transaction for a student's fee.

    The returned reference is stored on the student and later matched by
    the webhook. Calling this again replaces the stored reference.

    Raises:
        HTTPException 404: Unknown student, or owned by another school
        HTTPException 500: Gateway unreachable, rejected, or malformed reply
    """
    try:
        initiation = await payments.initiate(school.school_id, student_id)
    except AppError as e:
        if e.status_code >= 500:
            logger.error(f"Payment initiation failed for student {student_id}: {e.message}")
        raise e.to_http() from e

    return PaymentInitiationResponse(
        authorization_url=initiation.authorization_url,
        reference=initiation.reference,
    )


@router.post(
    "/webhook",
    response_model=WebhookAck,
    summary="Paystack Webhook",
    responses={
        400: {"description": "Signed body is not valid JSON"},
        401: {"description": "Missing or invalid signature"},
    },
)
async def paystack_webhook(
    request: Request,
    signature: str | None = Header(default=None, alias=SIGNATURE_HEADER),
    reconciler: WebhookReconciler = Depends(get_webhook_reconciler),
) -> WebhookAck:
    """
    Receive a Paystack event.

    Any delivery with a valid signature and a JSON body is acknowledged
    with 200, including unknown events and unknown references.
    """
    body = await request.body()
    try:
        outcome = await reconciler.handle(body, signature)
    except AppError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e

    logger.info(f"Webhook acknowledged: {outcome.value}")
    return WebhookAck()


__all__ = ["router"]
