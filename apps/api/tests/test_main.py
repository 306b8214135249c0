"""Application wiring tests: the SQL backend behind the same API."""

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from schoolpay.main import create_app
from tests.helpers import auth_headers, charge_success, signed_webhook


@pytest.mark.asyncio
async def test_sql_backend_end_to_end(test_settings, fake_paystack, tmp_path, school_a_id):
    config = test_settings.model_copy(
        update={
            "storage_backend": "sql",
            "database_url": f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
        }
    )
    app = create_app(config, gateway=fake_paystack.client())

    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            registered = await client.post(
                "/api/v1/auth/register",
                json={"name": "Greenfield", "username": "greenfield", "password": "s3cret-pass"},
            )
            headers = auth_headers(registered.json()["id"])
            student_id = (
                await client.post(
                    "/api/v1/students",
                    json={
                        "first_name": "Ada",
                        "last_name": "Obi",
                        "email": "ada.obi@example.com",
                        "department": "Physics",
                    },
                    headers=headers,
                )
            ).json()["id"]
            reference = (
                await client.post(
                    f"/api/v1/payments/students/{student_id}/initiate", headers=headers
                )
            ).json()["reference"]

            body, webhook_headers = signed_webhook(charge_success(reference))
            await client.post("/api/v1/payments/webhook", content=body, headers=webhook_headers)

            student = (await client.get(f"/api/v1/students/{student_id}", headers=headers)).json()
            foreign = await client.get(
                f"/api/v1/students/{student_id}", headers=auth_headers(school_a_id)
            )

    assert student["status"] == "Paid"
    assert student["payment_reference"] == reference
    assert foreign.status_code == 404
