"""Error types and JSON error payloads for the storefront API."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(StorefrontError):
    status_code = 400


class AuthenticationRequired(StorefrontError):
    status_code = 401

    def __init__(self, message: str = "Authentication required", *, details: Any = None) -> None:
        super().__init__(message, details=details)


class UpstreamProviderError(StorefrontError):
    """Payment provider or network failure."""

    status_code = 500


class CatalogFileCorrupted(StorefrontError):
    """A catalog file on disk cannot be parsed, so it must not be rewritten."""

    status_code = 500


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if isinstance(exc, StorefrontError):
            if exc.status_code >= 500:
                logger.error("Request failed: %s (%s)", exc.message, exc.details, extra={"context": context or {}})
            else:
                logger.info("Request rejected: %s", exc.message)
            payload: Dict[str, Any] = {"error": exc.message}
            if exc.details is not None:
                payload["details"] = exc.details
            return payload

        logger.error("Unhandled exception in storefront API: %s", exc, exc_info=True)
        return {
            "error": "An internal error occurred while processing your request.",
            "details": str(exc),
        }

    @staticmethod
    def status_code_for(exc: Exception) -> int:
        if isinstance(exc, StorefrontError):
            return exc.status_code
        return 500
