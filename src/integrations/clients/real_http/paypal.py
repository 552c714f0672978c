"""
Real PayPal HTTP Client.

Used unless INTEGRATIONS_MODE asks for the offline mock. Missing
PAYPAL_CLIENT_ID / PAYPAL_CLIENT_SECRET fail the call with a 500.

Every operation exchanges the client credentials for a fresh access token
(POST /v1/oauth2/token) and then calls the Orders v2 API. Responses are
returned verbatim; failures are raised as UpstreamProviderError carrying
the provider's error text.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from src.error_handler import UpstreamProviderError
from src.utils.config_loader import DEFAULT_PAYPAL_BASE_URL

logger = logging.getLogger(__name__)

ORDER_DESCRIPTION = "Diagnostic equipment order"


class PayPalClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: Optional[str] = None,
        timeout_seconds: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = (base_url or DEFAULT_PAYPAL_BASE_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport)

    async def get_access_token(self) -> str:
        if not self.client_id or not self.client_secret:
            raise UpstreamProviderError("PAYPAL_CLIENT_ID / PAYPAL_CLIENT_SECRET are not configured")

        data = await self._request(
            "POST",
            "/v1/oauth2/token",
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self.client_secret),
            error_message="PayPal authentication failed",
        )
        token = data.get("access_token")
        if not token:
            raise UpstreamProviderError("PayPal authentication failed", details="missing access_token")
        return token

    async def create_order(self, amount: float, currency: str) -> Dict[str, Any]:
        access_token = await self.get_access_token()
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "amount": {"currency_code": currency, "value": f"{amount:.2f}"},
                    "description": ORDER_DESCRIPTION,
                }
            ],
        }
        order = await self._request(
            "POST",
            "/v2/checkout/orders",
            json=payload,
            headers=_bearer(access_token),
            error_message="Failed to create PayPal order",
        )
        logger.info("PayPal order %s created for %.2f %s", order.get("id"), amount, currency)
        return order

    async def capture_order(self, order_id: str) -> Dict[str, Any]:
        access_token = await self.get_access_token()
        capture = await self._request(
            "POST",
            f"/v2/checkout/orders/{order_id}/capture",
            json={},
            headers=_bearer(access_token),
            error_message="Failed to capture PayPal order",
        )
        logger.info("PayPal order %s captured with status %s", order_id, capture.get("status"))
        return capture

    async def _request(self, method: str, path: str, *, error_message: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            logger.warning("PayPal %s %s returned %s", method, path, e.response.status_code)
            raise UpstreamProviderError(error_message, details=_error_text(e.response)) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("PayPal %s %s failed: %s", method, path, e)
            raise UpstreamProviderError(error_message, details=str(e)) from e


def _bearer(access_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {access_token}", "Content-Type": "application/json"}


def _error_text(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error_description") or body.get("error") or body)
    return str(body)
