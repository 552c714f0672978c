"""
In-memory admin session registry.

Maps opaque bearer tokens to expiry instants. Nothing is persisted and
expired tokens are rejected on lookup rather than removed.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from src.error_handler import AuthenticationRequired

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(hours=8)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _digest(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()


@dataclass
class AdminToken:
    token: str
    expires_at: datetime

    def to_dict(self) -> Dict[str, str]:
        return {"token": self.token, "expiresAt": self.expires_at.isoformat()}


class AdminSessionRegistry:
    def __init__(
        self,
        username: str,
        password: str,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._enabled = bool(username and password)
        # Only digests are kept around for comparison
        self._username_digest = _digest(username or "")
        self._password_digest = _digest(password or "")
        self.ttl = ttl
        self._clock = clock
        self._tokens: Dict[str, datetime] = {}

    def login(self, username: Optional[str], password: Optional[str]) -> AdminToken:
        user_ok = hmac.compare_digest(_digest(username or ""), self._username_digest)
        pass_ok = hmac.compare_digest(_digest(password or ""), self._password_digest)
        if not (self._enabled and user_ok and pass_ok):
            logger.info("Admin login rejected")
            raise AuthenticationRequired("Invalid credentials")

        token = secrets.token_hex(24)
        expires_at = self._clock() + self.ttl
        self._tokens[token] = expires_at
        logger.info("Admin login succeeded, token valid until %s", expires_at.isoformat())
        return AdminToken(token=token, expires_at=expires_at)

    def authenticate(self, token: Optional[str]) -> bool:
        if not token:
            return False
        expires_at = self._tokens.get(token)
        if expires_at is None:
            return False
        return self._clock() < expires_at

    def require(self, token: Optional[str]) -> None:
        if not self.authenticate(token):
            raise AuthenticationRequired()

    def clear(self) -> None:
        self._tokens.clear()

    def __len__(self) -> int:
        return len(self._tokens)
