"""
Configuration loader for the storefront server.

All settings come from the process environment (optionally populated from a
``.env`` file by python-dotenv) and are validated with pydantic.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_PAYPAL_BASE_URL = "https://api-m.sandbox.paypal.com"


class PayPalConfig(BaseModel):
    """PayPal REST API credentials"""

    client_id: str = ""
    client_secret: str = ""
    base_url: str = DEFAULT_PAYPAL_BASE_URL

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)


class AdminConfig(BaseModel):
    """Shared admin credential"""

    username: str = ""
    password: str = ""
    token_ttl_hours: float = Field(default=8.0, gt=0)


class SmtpConfig(BaseModel):
    """Outgoing mail server used for order notifications"""

    host: str = ""
    port: int = Field(default=587, ge=1, le=65535)
    secure: bool = False
    user: str = ""
    password: str = ""
    from_address: str = ""
    notify_address: str = ""

    @property
    def sender(self) -> str:
        return self.from_address or self.user


class TelegramConfig(BaseModel):
    bot_token: str = ""
    chat_id: str = ""
    api_url: str = "https://api.telegram.org"


class ServerConfig(BaseModel):
    port: int = Field(default=3000, ge=1, le=65535)
    data_dir: Path = PROJECT_ROOT / "public" / "data"
    public_dir: Path = PROJECT_ROOT / "public"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    http_timeout_seconds: float = Field(default=20.0, gt=0)
    integrations_mode: str = ""


class Settings(BaseModel):
    paypal: PayPalConfig = Field(default_factory=PayPalConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    smtp: SmtpConfig = Field(default_factory=SmtpConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")


def _drop_empty(values: Dict[str, Optional[str]]) -> Dict[str, str]:
    # Unset variables fall back to the model defaults
    return {k: v for k, v in values.items() if v not in (None, "")}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build validated settings from environment variables

    Args:
        environ: Mapping to read from. Defaults to os.environ

    Returns:
        Validated Settings object

    Raises:
        ValidationError: If a variable has an invalid value (e.g. a non-numeric port)
    """
    env = os.environ if environ is None else environ

    cors = env.get("CORS_ORIGINS", "")
    settings = Settings(
        paypal=PayPalConfig(
            **_drop_empty(
                {
                    "client_id": env.get("PAYPAL_CLIENT_ID"),
                    "client_secret": env.get("PAYPAL_CLIENT_SECRET"),
                    "base_url": env.get("PAYPAL_BASE_URL"),
                }
            )
        ),
        admin=AdminConfig(
            **_drop_empty(
                {
                    "username": env.get("ADMIN_USERNAME"),
                    "password": env.get("ADMIN_PASSWORD"),
                    "token_ttl_hours": env.get("ADMIN_TOKEN_TTL_HOURS"),
                }
            )
        ),
        smtp=SmtpConfig(
            secure=_flag(env.get("SMTP_SECURE")),
            **_drop_empty(
                {
                    "host": env.get("SMTP_HOST"),
                    "port": env.get("SMTP_PORT"),
                    "user": env.get("SMTP_USER"),
                    "password": env.get("SMTP_PASS"),
                    "from_address": env.get("SMTP_FROM"),
                    "notify_address": env.get("ORDER_NOTIFY_EMAIL"),
                }
            ),
        ),
        telegram=TelegramConfig(
            **_drop_empty(
                {
                    "bot_token": env.get("TELEGRAM_BOT_TOKEN"),
                    "chat_id": env.get("TELEGRAM_CHAT_ID"),
                }
            )
        ),
        server=ServerConfig(
            **_drop_empty(
                {
                    "port": env.get("PORT"),
                    "data_dir": env.get("DATA_DIR"),
                    "public_dir": env.get("PUBLIC_DIR"),
                    "http_timeout_seconds": env.get("HTTP_TIMEOUT_SECONDS"),
                    "integrations_mode": (env.get("INTEGRATIONS_MODE") or "").strip().lower(),
                }
            ),
            **({"cors_origins": [o.strip() for o in cors.split(",") if o.strip()]} if cors.strip() else {}),
        ),
    )

    if not settings.admin.username or not settings.admin.password:
        logger.warning("ADMIN_USERNAME / ADMIN_PASSWORD are not set; admin login is disabled")
    if not settings.paypal.configured:
        logger.info("PayPal credentials not set")
    return settings
