import asyncio
import json
import logging

import httpx
import pytest

from src.error_handler import UpstreamProviderError
from src.integrations.contracts.orders import CartLine, Customer, Order
from src.integrations.notifications import (
    FAILED,
    SENT,
    SKIPPED,
    EmailNotificationService,
    NotificationDispatcher,
    TelegramNotificationService,
)
from src.integrations.notifications.email_service import render_order_html
from src.integrations.notifications.telegram_service import render_order_text
from src.utils.config_loader import SmtpConfig, TelegramConfig


@pytest.fixture
def order():
    return Order(
        customer=Customer(
            first_name="Ivan",
            last_name="<Petrov>",
            email="ivan@example.com",
            country="Latvia",
            city="Riga",
            address="Brivibas 1",
            postcode="LV-1010",
        ),
        items=[CartLine(product_id="p1", name="Truck kit", price=1290.0, qty=2, license_years=2)],
        total=2580.0,
        paypal_order_id="5O190127TN364715T",
    )


class FakeSMTP:
    instances = []

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.sent = []
        self.logged_in = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def has_extn(self, name):
        return False

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, message):
        self.sent.append(message)


class RecordingChannel:
    def __init__(self, channel, result=True, error=None):
        self.channel = channel
        self.result = result
        self.error = error
        self.calls = 0

    async def send(self, order):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


def test_email_html_escapes_customer_input(order):
    body = render_order_html(order)

    assert "&lt;Petrov&gt;" in body
    assert "<li>Truck kit x 2 (2 yr)" in body
    assert "2580.00€" in body
    assert "5O190127TN364715T" in body
    assert "<strong>Phone:</strong> -" in body


def test_telegram_text_summary(order):
    text = render_order_text(order)

    assert "Customer: Ivan <Petrov>" in text
    assert "Items: Truck kit x2" in text
    assert "PayPal: 5O190127TN364715T" in text


@pytest.mark.asyncio
async def test_email_skipped_without_smtp_host(order):
    service = EmailNotificationService(SmtpConfig(notify_address="shop@example.com"))
    assert await service.send(order) is False


@pytest.mark.asyncio
async def test_email_sent_through_smtp(order):
    FakeSMTP.instances.clear()
    config = SmtpConfig(
        host="smtp.example.com",
        port=2525,
        user="mailer",
        password="pw",
        notify_address="shop@example.com",
    )
    service = EmailNotificationService(config, smtp_factory=FakeSMTP)

    assert await service.send(order) is True

    smtp = FakeSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.example.com", 2525)
    assert smtp.logged_in == ("mailer", "pw")
    message = smtp.sent[0]
    assert message["To"] == "shop@example.com"
    assert message["From"] == "mailer"


@pytest.mark.asyncio
async def test_telegram_posts_to_bot_api(order):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    service = TelegramNotificationService(
        TelegramConfig(bot_token="123:abc", chat_id="-100"),
        transport=httpx.MockTransport(handler),
    )

    assert await service.send(order) is True
    assert seen[0].url.path == "/bot123:abc/sendMessage"
    assert json.loads(seen[0].content)["chat_id"] == "-100"


@pytest.mark.asyncio
async def test_telegram_skipped_without_chat_id(order):
    service = TelegramNotificationService(TelegramConfig(bot_token="123:abc"))
    assert await service.send(order) is False


@pytest.mark.asyncio
async def test_dispatcher_failure_does_not_block_other_channel(order):
    email = RecordingChannel("email", error=ConnectionRefusedError("smtp down"))
    telegram = RecordingChannel("telegram")

    report = await NotificationDispatcher([email, telegram]).dispatch(order)

    assert report == {"email": FAILED, "telegram": SENT}
    assert email.calls == 1
    assert telegram.calls == 1


@pytest.mark.asyncio
async def test_dispatcher_reports_skipped_channels(order):
    report = await NotificationDispatcher(
        [RecordingChannel("email", result=False), RecordingChannel("telegram", error=RuntimeError("boom"))]
    ).dispatch(order)

    assert report == {"email": SKIPPED, "telegram": FAILED}


@pytest.mark.asyncio
async def test_dispatcher_runs_channels_concurrently(order):
    ready = asyncio.Event()

    class WaitingChannel:
        channel = "email"

        async def send(self, order):
            await ready.wait()
            return True

    class SignallingChannel:
        channel = "telegram"

        async def send(self, order):
            ready.set()
            return True

    dispatcher = NotificationDispatcher([WaitingChannel(), SignallingChannel()])
    report = await asyncio.wait_for(dispatcher.dispatch(order), timeout=1.0)

    assert report == {"email": SENT, "telegram": SENT}


@pytest.mark.asyncio
async def test_telegram_failure_does_not_log_bot_token(order, caplog):
    import src.api.main  # noqa: F401  configures the httpx logger

    def handler(request):
        return httpx.Response(401, json={"ok": False, "description": "Unauthorized"})

    service = TelegramNotificationService(
        TelegramConfig(bot_token="123:secret-token", chat_id="-100"),
        transport=httpx.MockTransport(handler),
    )
    caplog.set_level(logging.DEBUG, logger="src")

    with pytest.raises(UpstreamProviderError) as exc_info:
        await service.send(order)
    assert "secret-token" not in str(exc_info.value)
    assert exc_info.value.__cause__ is None
    assert exc_info.value.details == "Unauthorized"

    report = await NotificationDispatcher([service]).dispatch(order)

    assert report == {"telegram": FAILED}
    assert "secret-token" not in caplog.text
    assert "HTTP 401" in caplog.text


@pytest.mark.asyncio
async def test_telegram_network_error_is_sanitized(order):
    def handler(request):
        raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

    service = TelegramNotificationService(
        TelegramConfig(bot_token="123:secret-token", chat_id="-100"),
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(UpstreamProviderError) as exc_info:
        await service.send(order)

    assert str(exc_info.value) == "Telegram sendMessage failed: ConnectError"


def test_httpx_request_logging_is_quiet():
    import src.api.main  # noqa: F401

    assert logging.getLogger("httpx").getEffectiveLevel() >= logging.WARNING
