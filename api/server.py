"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (startup/shutdown)
- Route registration
- Middleware configuration
- Error handling
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from accounts.factory import create_account_service
from api.dependencies import set_account_service, set_store
from api.routes import accounts_router, health_router
from core.config import settings
from core.errors import AccountError
from core.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from core.storage import BaseKeyValueStore, create_store
from core.timeutils import utc_now
from tools.delivery import MockDeliveryClient, SecretDeliveryClient


logger = get_logger(__name__)


def create_app(
    store: Optional[BaseKeyValueStore] = None,
    delivery: Optional[SecretDeliveryClient] = None,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.

    Args:
        store: Store to use instead of the configured backend
        delivery: Delivery client to use instead of MockDeliveryClient
        clock: Source of "now" for the account service
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Startup: create and set up the store, build the account service.
        Shutdown: close the store.
        """
        configure_logging()

        logger.info(
            "Starting account service...",
            storage_backend=settings.storage_backend,
        )

        app_store = store if store is not None else create_store(settings)
        app_store.setup()
        set_store(app_store)

        # Email gateway is out of scope; the mock keeps an outbox
        delivery_client = delivery if delivery is not None else MockDeliveryClient()
        logger.info("Using delivery client", client=type(delivery_client).__name__)

        service = create_account_service(settings, app_store, delivery_client, clock=clock)
        set_account_service(service)

        logger.info(
            "Account service started",
            host=settings.server_host,
            port=settings.server_port,
            storage_backend=settings.storage_backend,
        )

        yield

        # =========================================
        # Shutdown
        # =========================================
        logger.info("Shutting down account service...")

        set_account_service(None)
        set_store(None)
        app_store.close()

        logger.info("Account service stopped")

    app = FastAPI(
        title="Saju Account Service",
        description=(
            "Account management and session engine.\n\n"
            "Registration, login, membership tiers and usage history."
        ),
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        bind_request_context(
            method=request.method,
            path=request.url.path,
            session_id=request.headers.get("x-session-id"),
        )
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    # Register routes
    app.include_router(health_router)
    app.include_router(accounts_router)

    @app.exception_handler(AccountError)
    async def account_error_handler(request: Request, exc: AccountError):
        logger.info(
            "Account operation failed",
            path=request.url.path,
            method=request.method,
            code=exc.code,
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.server:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
