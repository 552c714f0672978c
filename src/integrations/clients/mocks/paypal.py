"""
PayPal MOCK client.

Offline stand-in for the Orders v2 API, used in development and tests
when INTEGRATIONS_MODE is mock or test.
No network calls are made; orders only live in this object.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from src.error_handler import UpstreamProviderError

logger = logging.getLogger(__name__)


class PayPalMockClient:
    def __init__(self) -> None:
        self._orders: Dict[str, Dict[str, Any]] = {}

    async def create_order(self, amount: float, currency: str) -> Dict[str, Any]:
        order_id = uuid.uuid4().hex[:17].upper()
        order = {
            "id": order_id,
            "status": "CREATED",
            "intent": "CAPTURE",
            "purchase_units": [{"amount": {"currency_code": currency, "value": f"{amount:.2f}"}}],
            "links": [],
        }
        self._orders[order_id] = order
        logger.info("[mock] PayPal order %s created for %.2f %s", order_id, amount, currency)
        return order

    async def capture_order(self, order_id: str) -> Dict[str, Any]:
        order = self._orders.get(order_id)
        if order is None:
            raise UpstreamProviderError("Failed to capture PayPal order", details=f"Order {order_id} not found")
        if order["status"] == "COMPLETED":
            raise UpstreamProviderError("Failed to capture PayPal order", details="ORDER_ALREADY_CAPTURED")

        order["status"] = "COMPLETED"
        amount = order["purchase_units"][0]["amount"]
        return {
            "id": order_id,
            "status": "COMPLETED",
            "purchase_units": [
                {
                    "payments": {
                        "captures": [
                            {
                                "id": f"CAP-{uuid.uuid4().hex[:12].upper()}",
                                "status": "COMPLETED",
                                "amount": dict(amount),
                                "create_time": datetime.now(timezone.utc).isoformat(),
                            }
                        ]
                    }
                }
            ],
        }
