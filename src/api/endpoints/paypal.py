import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.api.dependencies import get_payment_client
from src.error_handler import ValidationFailed
from src.integrations.clients.mocks.paypal import PayPalMockClient
from src.integrations.clients.real_http.paypal import PayPalClient
from src.integrations.contracts.orders import order_amount
from src.utils.config_loader import Settings

logger = logging.getLogger(__name__)

api = APIRouter()
paypal_api = api


class CreateOrderRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)
    currency: str = "EUR"


class CaptureOrderRequest(BaseModel):
    orderID: Optional[str] = None


def _should_use_real_integrations(settings: Settings) -> bool:
    # The mock client is opt-in only; missing credentials surface as a 500 from the real client
    return settings.server.integrations_mode not in {"mock", "test"}


def select_payment_client(settings: Settings):
    if _should_use_real_integrations(settings):
        return PayPalClient(
            client_id=settings.paypal.client_id,
            client_secret=settings.paypal.client_secret,
            base_url=settings.paypal.base_url,
            timeout_seconds=settings.server.http_timeout_seconds,
        )
    logger.warning("Using the mock PayPal client; no real payments will be taken")
    return PayPalMockClient()


@api.post("/create-order", tags=["PayPal"])
async def create_order(body: CreateOrderRequest, client=Depends(get_payment_client)):
    amount = round(order_amount(body.items), 2)
    if amount <= 0:
        raise ValidationFailed("Order amount is empty")
    currency = (body.currency or "EUR").strip().upper()
    return await client.create_order(amount, currency)


@api.post("/capture-order", tags=["PayPal"])
async def capture_order(body: CaptureOrderRequest, client=Depends(get_payment_client)):
    if not body.orderID:
        raise ValidationFailed("orderID is required")
    return await client.capture_order(body.orderID)
