"""
Paystack Gateway Client

Thin async wrapper around Paystack's transaction initialization endpoint.
Every failure (transport error, HTTP error status, status=false, or a body
that does not have the expected shape) surfaces as PaymentGatewayError.
Calls are single-attempt: nothing here retries.
"""

import logging
from dataclasses import dataclass

import httpx
from pydantic import BaseModel, ValidationError

from schoolpay.core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

PAYSTACK_BASE_URL = "https://api.paystack.co"


class _InitializeData(BaseModel):
    authorization_url: str
    reference: str
    access_code: str | None = None


class _InitializeResponse(BaseModel):
    status: bool
    message: str | None = None
    data: _InitializeData | None = None


@dataclass(frozen=True)
class TransactionInitialization:
    """Checkout details returned by Paystack for a new transaction."""

    authorization_url: str
    reference: str
    access_code: str | None = None


class PaystackClient:
    """
    Paystack REST client.

    The underlying httpx.AsyncClient is shared across requests and closed
    by aclose() on application shutdown.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        base_url: str = PAYSTACK_BASE_URL,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._secret_key}",
            "Content-Type": "application/json",
        }

    async def initialize_transaction(
        self,
        *,
        email: str,
        amount_kobo: int,
        reference: str,
    ) -> TransactionInitialization:
        """
        Open a Paystack transaction.

        Args:
            email: Customer email
            amount_kobo: Amount in minor units (kobo)
            reference: Our unique reference for this transaction

        Returns:
            Checkout URL and the reference Paystack recorded

        Raises:
            PaymentGatewayError: On any transport, HTTP or payload failure
        """
        if not self._secret_key:
            logger.error("Paystack secret key not configured")
            raise PaymentGatewayError("Payment gateway is not configured")

        payload = {"email": email, "amount": amount_kobo, "reference": reference}
        logger.info(f"Paystack initialize request: reference={reference}")

        try:
            response = await self._client.post(
                f"{self._base_url}/transaction/initialize",
                json=payload,
                headers=self._build_headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Paystack request failed: {type(e).__name__}: {e}")
            raise PaymentGatewayError("Payment gateway request failed") from e

        if response.status_code >= 400:
            logger.error(
                f"Paystack initialize HTTP error: status={response.status_code} reference={reference}"
            )
            raise PaymentGatewayError(f"Payment gateway returned HTTP {response.status_code}")

        try:
            parsed = _InitializeResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Malformed Paystack response for reference={reference}")
            raise PaymentGatewayError("Payment gateway returned a malformed response") from e

        if not parsed.status or parsed.data is None:
            logger.error(f"Paystack rejected transaction {reference}: {parsed.message}")
            raise PaymentGatewayError("Payment gateway rejected the transaction")

        logger.info(f"Paystack initialize success: reference={parsed.data.reference}")
        return TransactionInitialization(
            authorization_url=parsed.data.authorization_url,
            reference=parsed.data.reference,
            access_code=parsed.data.access_code,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
