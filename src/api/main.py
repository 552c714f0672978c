"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src.api.endpoints.admin import admin_api
from src.api.endpoints.orders import orders_api
from src.api.endpoints.paypal import paypal_api, select_payment_client
from src.api.endpoints.storefront import router as storefront_router
from src.database.catalog_store import CatalogStore
from src.database.session_registry import AdminSessionRegistry
from src.error_handler import ErrorHandler, StorefrontError
from src.integrations.notifications import (
    EmailNotificationService,
    NotificationDispatcher,
    TelegramNotificationService,
)
from src.utils.config_loader import Settings, load_settings

# Setup logging
logging.basicConfig(level=logging.INFO)
# httpx logs every request URL at INFO, and the Telegram URL carries the bot token
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

error_handler = ErrorHandler()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.catalog_store.init()
        logger.info("Catalog data directory: %s", settings.server.data_dir)
        yield
        app.state.session_registry.clear()

    app = FastAPI(
        title="Diagnostic Equipment Store API",
        description="Catalog administration, PayPal checkout and order notifications",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ============================================================================
    # DEPENDENCY INJECTION
    # ============================================================================

    app.state.settings = settings
    app.state.catalog_store = CatalogStore(settings.server.data_dir)
    app.state.session_registry = AdminSessionRegistry(
        settings.admin.username,
        settings.admin.password,
        ttl=timedelta(hours=settings.admin.token_ttl_hours),
    )
    app.state.payment_client = select_payment_client(settings)
    app.state.notification_dispatcher = NotificationDispatcher(
        [
            EmailNotificationService(settings.smtp),
            TelegramNotificationService(settings.telegram, timeout_seconds=settings.server.http_timeout_seconds),
        ]
    )

    # ============================================================================
    # ERROR HANDLERS
    # ============================================================================

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_handler.handle_exception(exc, {"path": request.url.path}),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": jsonable_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        return JSONResponse(
            status_code=500,
            content=error_handler.handle_exception(exc, {"path": request.url.path}),
        )

    # ============================================================================
    # ROUTES
    # ============================================================================

    app.include_router(admin_api, prefix="/api/admin")
    app.include_router(paypal_api, prefix="/api/paypal")
    app.include_router(orders_api, prefix="/api")
    app.include_router(storefront_router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    # Static mounts go last so API routes take precedence
    app.mount("/data", StaticFiles(directory=settings.server.data_dir, check_dir=False), name="data")
    app.mount("/", StaticFiles(directory=settings.server.public_dir, html=True, check_dir=False), name="public")

    return app


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.api.main:app", host="0.0.0.0", port=app.state.settings.server.port)
