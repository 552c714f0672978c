import logging
from typing import Optional

from fastapi import Depends, Header, Request

from src.database.catalog_store import CatalogStore
from src.database.session_registry import AdminSessionRegistry
from src.error_handler import AuthenticationRequired
from src.integrations.notifications import NotificationDispatcher
from src.utils.config_loader import Settings

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog_store(request: Request) -> CatalogStore:
    return request.app.state.catalog_store


def get_session_registry(request: Request) -> AdminSessionRegistry:
    return request.app.state.session_registry


def get_payment_client(request: Request):
    return request.app.state.payment_client


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.notification_dispatcher


def bearer_token(authorization: Optional[str]) -> str:
    scheme, _, token = (authorization or "").strip().partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


async def require_admin(
    authorization: Optional[str] = Header(default=None),
    registry: AdminSessionRegistry = Depends(get_session_registry),
) -> str:
    token = bearer_token(authorization)
    if not registry.authenticate(token):
        raise AuthenticationRequired()
    return token
