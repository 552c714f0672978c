"""
Order notification by email.

Sends an HTML summary of a submitted order to ORDER_NOTIFY_EMAIL through the
configured SMTP server. The HTML body is rendered from
templates/emails/new_order_email.html; smtplib is blocking, so delivery runs
in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from src.integrations.contracts.orders import Order
from src.utils.config_loader import SmtpConfig

logger = logging.getLogger(__name__)

SUBJECT = "New order on the diagnostic equipment store"

templates = Environment(
    loader=PackageLoader("src.integrations.notifications", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_order_html(order: Order) -> str:
    return templates.get_template("emails/new_order_email.html").render(
        customer=order.customer,
        items=order.items,
        total=order.total,
        paypal_order_id=order.paypal_order_id,
    )


class EmailNotificationService:
    channel = "email"

    def __init__(self, config: SmtpConfig, smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None) -> None:
        self.config = config
        self._smtp_factory = smtp_factory

    @property
    def enabled(self) -> bool:
        return bool(self.config.host and self.config.notify_address)

    def build_message(self, order: Order) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self.config.sender
        message["To"] = self.config.notify_address
        message.set_content(f"New order from {order.customer.full_name}, total {order.total:.2f}€")
        message.add_alternative(render_order_html(order), subtype="html")
        return message

    async def send(self, order: Order) -> bool:
        """Send the order email. Returns False when SMTP is not configured."""
        if not self.enabled:
            logger.debug("SMTP is not configured, skipping email notification")
            return False
        message = self.build_message(order)
        await asyncio.to_thread(self._deliver, message)
        logger.info("Order email sent to %s", self.config.notify_address)
        return True

    def _deliver(self, message: EmailMessage) -> None:
        cfg = self.config
        if self._smtp_factory is not None:
            smtp = self._smtp_factory(cfg.host, cfg.port)
        elif cfg.secure:
            smtp = smtplib.SMTP_SSL(cfg.host, cfg.port, context=ssl.create_default_context())
        else:
            smtp = smtplib.SMTP(cfg.host, cfg.port)

        with smtp:
            if not cfg.secure:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls(context=ssl.create_default_context())
                    smtp.ehlo()
            if cfg.user:
                smtp.login(cfg.user, cfg.password)
            smtp.send_message(message)
