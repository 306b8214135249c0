"""
Test helpers shared across test modules.
"""

import json
from collections.abc import Callable

import httpx

from schoolpay.core.security import create_access_token
from schoolpay.modules.payments.gateway import PaystackClient
from schoolpay.modules.payments.webhook import compute_signature

TEST_JWT_SECRET = "test-jwt-secret"
TEST_PAYSTACK_SECRET = "sk_test_paystack_secret"
TEST_PAYSTACK_URL = "https://paystack.test"


class FakePaystack:
    """
    Records /transaction/initialize calls and answers them like Paystack.

    Set `reply` to a callable(request_json) -> httpx.Response to change the answer.
    """

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.reply: Callable[[dict], httpx.Response] | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(
            {"url": str(request.url), "headers": dict(request.headers), "json": body}
        )
        if self.reply is not None:
            return self.reply(body)
        return httpx.Response(
            200,
            json={
                "status": True,
                "message": "Authorization URL created",
                "data": {
                    "authorization_url": f"https://checkout.paystack.test/{body['reference']}",
                    "access_code": "access_code_123",
                    "reference": body["reference"],
                },
            },
        )

    def client(self, secret_key: str = TEST_PAYSTACK_SECRET) -> PaystackClient:
        return PaystackClient(
            secret_key,
            base_url=TEST_PAYSTACK_URL,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
        )


def auth_headers(school_id, username: str = "school", secret: str = TEST_JWT_SECRET) -> dict:
    """Authorization header carrying a valid token for school_id."""
    token = create_access_token(school_id=school_id, username=username, secret=secret)
    return {"Authorization": f"Bearer {token}"}


def signed_webhook(payload: dict | bytes, secret: str = TEST_PAYSTACK_SECRET) -> tuple[bytes, dict]:
    """Body bytes and headers for a correctly signed webhook delivery."""
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    return body, {
        "x-paystack-signature": compute_signature(secret, body),
        "Content-Type": "application/json",
    }


def charge_success(reference: str) -> dict:
    """A Paystack charge.success event for reference."""
    return {
        "event": "charge.success",
        "data": {
            "id": 302961,
            "status": "success",
            "reference": reference,
            "amount": 500000,
            "currency": "NGN",
        },
    }
