"""Payment schemas."""

from pydantic import BaseModel


class PaymentInitiationResponse(BaseModel):
    """Checkout details for a newly opened fee payment."""

    authorization_url: str
    reference: str


class WebhookAck(BaseModel):
    status: str = "ok"
