"""
FastAPI application factory and error handlers.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from amazonq import AmazonQClient
from config import GatewayConfig
from errors import GatewayError
from oauth import TokenLifecycleManager
from utils import CredentialStore, FileCredentialStore, MemoryCredentialStore
from .middleware import log_requests_middleware
from .endpoints import (
    anthropic_messages_router,
    chat_completions_router,
    credentials_router,
    health_router,
    models_router,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, error_type: str, code: Optional[str] = None) -> JSONResponse:
    error = {"message": message, "type": error_type}
    if code:
        error["code"] = code
    return JSONResponse({"error": error}, status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        logger.error(f"{request.method} {request.url.path} failed ({exc.status_code}): {exc.message}")
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, f"Invalid request: {exc.errors()}", "invalid_request_error")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error_response(404, "Not Found", "not_found")
        return _error_response(exc.status_code, str(exc.detail), "http_error")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error processing {request.method} {request.url.path}")
        return _error_response(500, str(exc) or "Internal Error", "server_error", "internal_error")


def build_store(config: GatewayConfig) -> CredentialStore:
    if config.credentials_file:
        return FileCredentialStore(config.credentials_file)
    return MemoryCredentialStore()


def create_app(
    config: Optional[GatewayConfig] = None,
    store: Optional[CredentialStore] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the gateway application

    Components are created here rather than at startup so the app is usable
    without running its lifespan.

    Args:
        config: Gateway configuration, read from settings when omitted
        store: Credential store, a file store at ``config.credentials_file`` by default
        http_client: Client shared by the OIDC and Amazon Q calls (tests inject
            a mock transport here)
    """
    import settings

    config = config or GatewayConfig.from_settings()
    store = store or build_store(config)
    token_manager = TokenLifecycleManager(store, config, http_client=http_client)
    amazonq_client = AmazonQClient(token_manager, config, http_client=http_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Credential store: {store.describe()}")
        yield
        await amazonq_client.aclose()

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.config = config
    app.state.store = store
    app.state.token_manager = token_manager
    app.state.amazonq_client = amazonq_client

    app.middleware("http")(log_requests_middleware)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(models_router)
    app.include_router(credentials_router)
    app.include_router(chat_completions_router)
    app.include_router(anthropic_messages_router)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app
