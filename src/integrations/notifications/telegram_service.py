"""Order notification to a Telegram chat through the Bot API."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from src.error_handler import UpstreamProviderError
from src.integrations.contracts.orders import Order
from src.utils.config_loader import TelegramConfig

logger = logging.getLogger(__name__)


def render_order_text(order: Order) -> str:
    c = order.customer
    items = ", ".join(f"{item.name} x{item.qty}" for item in order.items)
    return "\n".join(
        [
            "🛒 New order!",
            f"Customer: {c.full_name}",
            f"Email: {c.email}",
            f"Phone: {c.phone or '-'}",
            f"Total: {order.total:.2f}€",
            f"Items: {items}",
            f"PayPal: {order.paypal_order_id or '-'}",
        ]
    )


class TelegramNotificationService:
    channel = "telegram"

    def __init__(
        self,
        config: TelegramConfig,
        timeout_seconds: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.config.bot_token and self.config.chat_id)

    async def send(self, order: Order) -> bool:
        """Post the order summary to the chat. Returns False when the bot is not configured."""
        if not self.enabled:
            logger.debug("Telegram bot is not configured, skipping chat notification")
            return False

        url = f"{self.config.api_url.rstrip('/')}/bot{self.config.bot_token}/sendMessage"
        payload = {"chat_id": self.config.chat_id, "text": render_order_text(order)}
        # The bot token is part of the URL, so httpx errors are re-raised without it.
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamProviderError(
                f"Telegram sendMessage failed with HTTP {e.response.status_code}",
                details=_error_description(e.response),
            ) from None
        except httpx.HTTPError as e:
            raise UpstreamProviderError(f"Telegram sendMessage failed: {type(e).__name__}") from None
        logger.info("Order message posted to Telegram chat %s", self.config.chat_id)
        return True


def _error_description(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    return data.get("description") if isinstance(data, dict) else None
