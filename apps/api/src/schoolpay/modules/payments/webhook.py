"""
Paystack Webhook Reconciler

Handles one webhook delivery:

    receive body -> verify signature -> parse event -> dispatch or ignore -> acknowledge

The signature is an HMAC-SHA512 of the raw, unparsed request body, sent
hex-encoded in the x-paystack-signature header. Nothing in the body is
looked at before the signature matches.

After a valid signature and a parseable body the delivery is always
acknowledged, whatever happened downstream: an unknown reference or a
store failure is logged, not reported, so Paystack stops retrying.
Redelivering a charge.success for an already-paid student is a no-op.
"""

import hashlib
import hmac
import json
import logging
from enum import Enum
from typing import Any

from schoolpay.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from schoolpay.modules.students.repository import StudentRepository

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-paystack-signature"
CHARGE_SUCCESS_EVENT = "charge.success"

INVALID_SIGNATURE = "invalid webhook signature"
MALFORMED_PAYLOAD = "malformed webhook payload"


class WebhookOutcome(str, Enum):
    """What a verified delivery ended up doing. All outcomes are acknowledged."""

    PAID = "paid"
    ALREADY_PAID = "already_paid"
    UNKNOWN_REFERENCE = "unknown_reference"
    IGNORED = "ignored"
    FAILED = "failed"


def compute_signature(secret: str, body: bytes) -> str:
    """Lowercase hex HMAC-SHA512 of body under secret."""
    return hmac.new(secret.encode(), body, hashlib.sha512).hexdigest()


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """
    Check a webhook signature in constant time.

    Args:
        secret: Shared webhook secret
        body: Raw request body, exactly as received
        signature: Header value (None if the header was absent)

    Returns:
        True only if a secret is configured and the signature matches
    """
    if not signature or not secret:
        return False
    expected = compute_signature(secret, body)
    return hmac.compare_digest(expected.encode(), signature.encode())


def _extract_reference(event: Any) -> str | None:
    data = event.get("data") if isinstance(event, dict) else None
    reference = data.get("reference") if isinstance(data, dict) else None
    return reference if isinstance(reference, str) and reference else None


class WebhookReconciler:
    """Applies Paystack payment confirmations to student records."""

    def __init__(self, students: StudentRepository, secret: str) -> None:
        self._students = students
        self._secret = secret

    async def handle(self, body: bytes, signature: str | None) -> WebhookOutcome:
        """
        Process one webhook delivery.

        Args:
            body: Raw request body
            signature: x-paystack-signature header value

        Returns:
            The outcome, for logging; every outcome means "acknowledge"

        Raises:
            UnauthorizedError: Missing or mismatched signature
            BadRequestError: Signature matched but the body is not decodable JSON
        """
        if not verify_signature(self._secret, body, signature):
            logger.warning("Rejected webhook with missing or invalid signature")
            raise UnauthorizedError(INVALID_SIGNATURE)

        try:
            event = json.loads(body)
        except (ValueError, RecursionError) as e:
            logger.warning("Rejected signed webhook with unparseable body")
            raise BadRequestError(MALFORMED_PAYLOAD) from e

        event_type = event.get("event") if isinstance(event, dict) else None
        if event_type != CHARGE_SUCCESS_EVENT:
            logger.info(f"Ignoring webhook event: {event_type}")
            return WebhookOutcome.IGNORED

        reference = _extract_reference(event)
        if reference is None:
            logger.warning("charge.success webhook without a reference")
            return WebhookOutcome.IGNORED

        try:
            changed = await self._students.mark_paid_by_reference(reference)
        except NotFoundError:
            logger.warning(f"Webhook reference not bound to any student: {reference}")
            return WebhookOutcome.UNKNOWN_REFERENCE
        except Exception as e:
            logger.exception(f"Failed to apply webhook for reference {reference}: {e}")
            return WebhookOutcome.FAILED

        if not changed:
            logger.info(f"Duplicate webhook for already-paid reference {reference}")
            return WebhookOutcome.ALREADY_PAID

        logger.info(f"Payment confirmed for reference {reference}")
        return WebhookOutcome.PAID
