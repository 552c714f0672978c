"""
Best-effort order notification fan-out.

All channels are sent concurrently and awaited together. A channel that
raises is logged and reported as "failed"; it never cancels the others and
never propagates to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Protocol

from src.integrations.contracts.orders import Order

logger = logging.getLogger(__name__)

SENT = "sent"
SKIPPED = "skipped"
FAILED = "failed"


class NotificationChannel(Protocol):
    channel: str

    async def send(self, order: Order) -> bool:
        ...


class NotificationDispatcher:
    def __init__(self, channels: List[NotificationChannel]) -> None:
        self.channels = list(channels)

    async def dispatch(self, order: Order) -> Dict[str, str]:
        results = await asyncio.gather(
            *(channel.send(order) for channel in self.channels),
            return_exceptions=True,
        )

        report: Dict[str, str] = {}
        for channel, result in zip(self.channels, results):
            if isinstance(result, BaseException):
                logger.warning("Order notification via %s failed: %s", channel.channel, result)
                report[channel.channel] = FAILED
            else:
                report[channel.channel] = SENT if result else SKIPPED
        logger.info("Order notifications: %s", report)
        return report
